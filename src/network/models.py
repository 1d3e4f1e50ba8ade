"""Data models for the request layer."""

from enum import Enum
from typing import Annotated, Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from src.network.config import NetworkConfig, RetryPolicy
from src.network.constants import (
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    JSON_MARKER,
    TEXT_MARKER,
)


class HttpMethod(str, Enum):
    """HTTP methods supported by the request layer."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ContentKind(str, Enum):
    """How a successful response body is decoded.

    - JSON: Parsed into Python structures
    - TEXT: Returned as the raw decoded string
    - BINARY: Returned as raw bytes
    """

    JSON = "JSON"
    TEXT = "TEXT"
    BINARY = "BINARY"


def classify_content_type(content_type: str | None) -> ContentKind:
    """Classify a content-type header value.

    Args:
        content_type: Raw header value, possibly absent.

    Returns:
        JSON if the value mentions json, TEXT if it mentions text,
        BINARY otherwise.
    """
    value = (content_type or "").lower()
    if JSON_MARKER in value:
        return ContentKind.JSON
    if TEXT_MARKER in value:
        return ContentKind.TEXT
    return ContentKind.BINARY


class RequestOptions(BaseModel):
    """Per-call request options.

    Unset fields fall back to the service's NetworkConfig when the
    request is resolved.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HttpMethod = HttpMethod.GET
    body: Any = None
    headers: dict[str, str] | None = None
    retries: Annotated[int, Field(ge=0)] | None = None
    retry_delay_ms: Annotated[int, Field(ge=0)] | None = None
    timeout_ms: Annotated[int, Field(gt=0)] | None = None

    def resolve(self, config: NetworkConfig) -> "ResolvedRequest":
        """Merge these options over the service defaults.

        Args:
            config: Service configuration supplying defaults.

        Returns:
            Fully specified request parameters.
        """
        headers = config.base_headers()
        if self.headers:
            headers.update(self.headers)

        return ResolvedRequest(
            method=self.method,
            body=self.body,
            headers=headers,
            retries=config.retries if self.retries is None else self.retries,
            retry_delay_ms=(
                config.retry_delay_ms
                if self.retry_delay_ms is None
                else self.retry_delay_ms
            ),
            timeout_ms=(
                config.timeout_ms if self.timeout_ms is None else self.timeout_ms
            ),
            retry_policy=config.retry_policy,
        )


class ResolvedRequest(BaseModel):
    """Request parameters after merging options with config."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HttpMethod
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    retries: Annotated[int, Field(ge=0)]
    retry_delay_ms: Annotated[int, Field(ge=0)]
    timeout_ms: Annotated[int, Field(gt=0)]
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)

    @property
    def total_attempts(self) -> int:
        """Number of attempts including the first one."""
        return self.retries + 1


class ResponseEnvelope(BaseModel):
    """Status and content classification of a received response."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status_code: int = Field(description="HTTP status code")
    reason_phrase: str = ""
    content_type: str = ""
    kind: ContentKind

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ResponseEnvelope":
        """Build an envelope from an httpx response.

        Args:
            response: Received response.

        Returns:
            ResponseEnvelope for the response.
        """
        content_type = response.headers.get("content-type", "")
        return cls(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            content_type=content_type,
            kind=classify_content_type(content_type),
        )

    @property
    def is_success(self) -> bool:
        """Check if the status is in the 2xx range."""
        return HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX
