"""Metrics collection for the request layer."""

from dataclasses import dataclass, field

from src.errors import ErrorType


@dataclass
class NetworkMetrics:
    """Counters for requests issued by one service instance.

    Owned by the service rather than held in a process-wide singleton,
    so independent services never share counters.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_retry_total: int = 0
    http_failures_total: dict[str, int] = field(default_factory=dict)
    http_bytes_total: int = 0
    http_duration_ms_total: float = 0.0
    http_request_count: int = 0

    def record_response(self, status_code: int, bytes_received: int) -> None:
        """Record a received HTTP response.

        Args:
            status_code: HTTP status code.
            bytes_received: Number of body bytes received.
        """
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )
        self.http_bytes_total += bytes_received

    def record_retry(self) -> None:
        """Record a retry attempt."""
        self.http_retry_total += 1

    def record_failure(self, error_type: ErrorType) -> None:
        """Record a terminal request failure."""
        key = error_type.value
        self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1

    def record_duration(self, duration_ms: float) -> None:
        """Record the duration of one logical request."""
        self.http_duration_ms_total += duration_ms
        self.http_request_count += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_retry_total": self.http_retry_total,
            "http_failures_total": dict(self.http_failures_total),
            "http_bytes_total": self.http_bytes_total,
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_request_count": self.http_request_count,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Average duration of a logical request in milliseconds."""
        if self.http_request_count == 0:
            return 0.0
        return self.http_duration_ms_total / self.http_request_count
