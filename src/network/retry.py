"""Bounded retry loop around the request executor."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog

from src.errors import ErrorType, ServiceError, create_network_error
from src.errors.types import ActionCallback
from src.network.constants import COMPONENT_NETWORK
from src.network.executor import RequestExecutor, build_request_content
from src.network.metrics import NetworkMetrics
from src.network.models import ResolvedRequest
from src.network.redact import redact_url_credentials
from src.network.state_machine import RequestStateMachine


logger = structlog.get_logger()

SleepFunc = Callable[[float], Awaitable[Any]]

# Definitive answers from the server or the caller; never retried
TERMINAL_ERROR_TYPES = frozenset(
    {ErrorType.NETWORK_RESPONSE, ErrorType.NETWORK_DECODE, ErrorType.VALIDATION}
)

_TIMEOUT_ERRORS = (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)


def is_retryable(error: Exception) -> bool:
    """Check whether a failed attempt may be retried.

    Args:
        error: Exception raised by the attempt.

    Returns:
        False for terminal ServiceErrors, True for everything else.
    """
    if isinstance(error, ServiceError):
        return error.type not in TERMINAL_ERROR_TYPES
    return True


class RetryController:
    """Runs the executor up to ``retries + 1`` times.

    Transport failures are retried after a delay; HTTP-level and decode
    failures are re-raised on the attempt that produced them. Exhaustion
    raises a NETWORK_REQUEST ServiceError chained to the last failure.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        sleep: SleepFunc = asyncio.sleep,
        metrics: NetworkMetrics | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            executor: Executor performing single attempts.
            sleep: Coroutine function taking seconds, used between attempts.
            metrics: Optional metrics sink.
        """
        self._executor = executor
        self._sleep = sleep
        self._metrics = metrics

    async def run(
        self,
        url: str,
        request: ResolvedRequest,
        retry_callback: ActionCallback | None = None,
    ) -> Any:
        """Execute a request with retries.

        Args:
            url: Absolute request URL.
            request: Resolved request parameters.
            retry_callback: Attached to the exhaustion error as its action.

        Returns:
            Decoded response body.

        Raises:
            ServiceError: Terminal failure of the logical request.
        """
        safe_url = redact_url_credentials(url)
        machine = RequestStateMachine(safe_url)
        total_attempts = request.total_attempts
        log = logger.bind(
            component=COMPONENT_NETWORK,
            method=request.method.value,
            url=safe_url,
            total_attempts=total_attempts,
        )
        last_error: Exception | None = None

        try:
            content, headers = build_request_content(request.body, request.headers)
        except ServiceError as exc:
            self._record_failure(exc)
            log.info("request_rejected", error_type=exc.type.value)
            raise

        for attempt in range(total_attempts):
            if attempt > 0:
                delay_ms = request.retry_policy.get_delay_ms(
                    request.retry_delay_ms, attempt - 1
                )
                log.debug(
                    "request_retry_scheduled", attempt=attempt + 1, delay_ms=delay_ms
                )
                if self._metrics is not None:
                    self._metrics.record_retry()
                await self._sleep(delay_ms / 1000.0)

            machine.to_attempt()
            try:
                result = await asyncio.wait_for(
                    self._executor.send(
                        url,
                        request.method,
                        content,
                        headers,
                        timeout_ms=request.timeout_ms,
                    ),
                    timeout=request.timeout_ms / 1000.0,
                )
            except Exception as exc:  # noqa: BLE001
                if not is_retryable(exc):
                    machine.to_failed()
                    self._record_failure(exc)
                    raise

                last_error = exc
                log.warning(
                    "request_attempt_failed",
                    attempt=attempt + 1,
                    error=str(exc) or type(exc).__name__,
                    error_kind=type(exc).__name__,
                )
                if attempt + 1 < total_attempts:
                    machine.to_wait()
                continue

            machine.to_success()
            log.debug("request_succeeded", attempt=attempt + 1)
            return result

        machine.to_failed()
        error = create_network_error(
            f"Request to {safe_url} failed after {total_attempts} attempts",
            {
                "url": safe_url,
                "attempts": total_attempts,
                "last_error": last_error,
                "timed_out": isinstance(last_error, _TIMEOUT_ERRORS),
            },
            retry_callback,
        )
        self._record_failure(error)
        log.error("request_failed", attempts=machine.attempts, error=str(last_error))
        raise error from last_error

    def _record_failure(self, error: Exception) -> None:
        if self._metrics is None:
            return
        error_type = error.type if isinstance(error, ServiceError) else ErrorType.GENERAL
        self._metrics.record_failure(error_type)
