"""Public entry point for resilient HTTP requests."""

import asyncio
import time
import uuid
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx
import structlog

from src.errors import ErrorType, ServiceError
from src.network.config import NetworkConfig
from src.network.constants import COMPONENT_NETWORK
from src.network.executor import RequestExecutor
from src.network.metrics import NetworkMetrics
from src.network.models import HttpMethod, RequestOptions
from src.network.retry import RetryController, SleepFunc
from src.observability.logging import request_context


logger = structlog.get_logger()


class NetworkService:
    """Resilient HTTP request service.

    Issues requests through a retry loop, decodes responses by content
    type and converts every failure into a ServiceError. Configuration
    is passed in explicitly and merged with per-call options on each
    request; concurrent calls share only the HTTP client and metrics.

    Use as an async context manager, or call aclose() when done, to
    release a client the service created itself.
    """

    def __init__(
        self,
        config: NetworkConfig | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the service.

        Args:
            config: Service-wide defaults (default: NetworkConfig()).
            client: HTTP client to use; one is created if omitted.
            sleep: Coroutine function used to wait between attempts.
        """
        self._config = config or NetworkConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        self._metrics = NetworkMetrics()
        self._executor = RequestExecutor(self._client, metrics=self._metrics)
        self._retry = RetryController(
            self._executor, sleep=sleep, metrics=self._metrics
        )
        self._log = logger.bind(component=COMPONENT_NETWORK)

    @property
    def config(self) -> NetworkConfig:
        """Get the service configuration."""
        return self._config

    @property
    def metrics(self) -> NetworkMetrics:
        """Get the metrics for requests issued by this service."""
        return self._metrics

    async def __aenter__(self) -> "NetworkService":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def request(self, url: str, options: RequestOptions | None = None) -> Any:
        """Issue a request with retries and return the decoded body.

        Args:
            url: Absolute request URL.
            options: Per-call options; unset fields use the service config.

        Returns:
            Parsed JSON, text, or bytes depending on the response content type.

        Raises:
            ServiceError: VALIDATION for an empty URL, NETWORK_RESPONSE for a
                non-success status, NETWORK_DECODE for a malformed JSON body,
                NETWORK_REQUEST when every attempt failed in transport.
        """
        if not url or not url.strip():
            msg = "Request URL must be a non-empty string"
            raise ServiceError(msg, ErrorType.VALIDATION, {"url": url})

        options = options or RequestOptions()
        resolved = options.resolve(self._config)

        async def retry_request() -> None:
            await self.request(url, options)

        with request_context(uuid.uuid4().hex[:12]):
            start_time_ns = time.perf_counter_ns()
            try:
                return await self._retry.run(
                    url, resolved, retry_callback=retry_request
                )
            finally:
                duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
                self._metrics.record_duration(duration_ms)

    async def get(
        self,
        url: str,
        options: RequestOptions | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Issue a GET request.

        Args:
            url: Absolute request URL.
            options: Additional per-call options.
            headers: Extra headers merged over options.headers.

        Returns:
            Decoded response body.
        """
        return await self.request(url, _with(options, HttpMethod.GET, headers))

    async def post(
        self,
        url: str,
        body: Any = None,
        options: RequestOptions | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Issue a POST request.

        Structured bodies are sent as JSON, strings as text/plain.

        Args:
            url: Absolute request URL.
            body: Request body.
            options: Additional per-call options.
            headers: Extra headers; may override the derived Content-Type.

        Returns:
            Decoded response body.
        """
        return await self.request(url, _with(options, HttpMethod.POST, headers, body))

    async def put(
        self,
        url: str,
        body: Any = None,
        options: RequestOptions | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Issue a PUT request with the same body rules as post()."""
        return await self.request(url, _with(options, HttpMethod.PUT, headers, body))

    async def delete(
        self,
        url: str,
        options: RequestOptions | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Issue a DELETE request."""
        return await self.request(url, _with(options, HttpMethod.DELETE, headers))


def _with(
    options: RequestOptions | None,
    method: HttpMethod,
    headers: Mapping[str, str] | None,
    body: Any = None,
) -> RequestOptions:
    """Derive verb-specific options without mutating the caller's."""
    base = options or RequestOptions()
    merged_headers = dict(base.headers or {})
    if headers:
        merged_headers.update(headers)

    update: dict[str, Any] = {"method": method, "headers": merged_headers or None}
    if body is not None:
        update["body"] = body
    return base.model_copy(update=update)
