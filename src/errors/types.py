"""Structured error types shared by the request layer and its callers."""

import json
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import structlog


logger = structlog.get_logger()

DEFAULT_ACTION_TEXT = "Fix It"
RETRY_ACTION_TEXT = "Retry"


class ErrorType(str, Enum):
    """Closed taxonomy of structured errors.

    - GENERAL: Unclassified failure
    - VALIDATION: Caller supplied invalid input
    - NETWORK_REQUEST: No response obtained after all attempts
    - NETWORK_TIMEOUT: Request exceeded its deadline
    - NETWORK_RESPONSE: Server answered with a non-success status
    - NETWORK_DECODE: Response body did not match its declared content type
    """

    GENERAL = "GENERAL"
    VALIDATION = "VALIDATION"
    NETWORK_REQUEST = "NETWORK_REQUEST"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    NETWORK_RESPONSE = "NETWORK_RESPONSE"
    NETWORK_DECODE = "NETWORK_DECODE"


ActionCallback = Callable[[], Awaitable[None]]


class ServiceError(Exception):
    """Typed error with actionable information.

    Carries an error type from the closed taxonomy, a human-readable
    message and free-form details (HTTP status, attempt count, cause).
    Instances are not mutated after they are raised.
    """

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        error_type: ErrorType = ErrorType.GENERAL,
        details: dict[str, Any] | None = None,
        actionable: bool = False,
        action_text: str | None = None,
        action_callback: ActionCallback | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            error_type: Classification of the error.
            details: Additional structured context.
            actionable: Whether the caller can offer a remediation action.
            action_text: Label for the remediation action.
            action_callback: Coroutine function performing the action.
        """
        super().__init__(message)
        self.type = error_type
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.actionable = actionable
        self.action_text = action_text
        self.action_callback = action_callback

    @property
    def user_message(self) -> str:
        """Message suitable for showing to a user."""
        return self.message

    @property
    def dev_message(self) -> str:
        """Message including the error type and details."""
        if not self.details:
            return f"[{self.type.value}] {self.message}"
        rendered = json.dumps(self.details, default=str, sort_keys=True)
        return f"[{self.type.value}] {self.message} - {rendered}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "type": self.type.value,
            "message": self.message,
            "details": self.details,
            "actionable": self.actionable,
            "action_text": self.action_text,
        }


def create_network_error(
    message: str,
    details: dict[str, Any] | None = None,
    retry_callback: ActionCallback | None = None,
) -> ServiceError:
    """Create a NETWORK_REQUEST error, actionable when a retry is possible.

    Args:
        message: Error message.
        details: Error details.
        retry_callback: Coroutine function re-issuing the failed request.

    Returns:
        ServiceError of type NETWORK_REQUEST.
    """
    return ServiceError(
        message,
        ErrorType.NETWORK_REQUEST,
        details,
        actionable=retry_callback is not None,
        action_text=RETRY_ACTION_TEXT,
        action_callback=retry_callback,
    )


def create_response_error(
    status: int,
    status_text: str,
    url: str,
    body: Any = None,
) -> ServiceError:
    """Create a NETWORK_RESPONSE error for a non-success HTTP status.

    Args:
        status: HTTP status code.
        status_text: Reason phrase.
        url: Requested URL (credentials already redacted).
        body: Parsed error body, if any.

    Returns:
        ServiceError of type NETWORK_RESPONSE.
    """
    details: dict[str, Any] = {
        "status": status,
        "status_text": status_text,
        "url": url,
    }
    if body is not None:
        details["body"] = body
    return ServiceError(
        f"HTTP error {status}: {status_text}",
        ErrorType.NETWORK_RESPONSE,
        details,
    )


def create_decode_error(url: str, content_type: str, reason: str) -> ServiceError:
    """Create a NETWORK_DECODE error for a body that failed to parse.

    Args:
        url: Requested URL (credentials already redacted).
        content_type: Declared response content type.
        reason: Parser error description.

    Returns:
        ServiceError of type NETWORK_DECODE.
    """
    return ServiceError(
        f"Failed to decode {content_type} response: {reason}",
        ErrorType.NETWORK_DECODE,
        {"url": url, "content_type": content_type, "reason": reason},
    )


def log_error(
    error: BaseException,
    log: structlog.typing.FilteringBoundLogger | None = None,
) -> None:
    """Log an error with its classification.

    Args:
        error: Error to log.
        log: Bound logger to use (default: module logger).
    """
    log = log or logger
    if isinstance(error, ServiceError):
        log.error(
            "service_error",
            error_type=error.type.value,
            message=error.message,
            details=error.details,
        )
        return

    log.error(
        "service_error",
        error_type="UNKNOWN",
        message=str(error),
        exc_type=type(error).__name__,
    )
