"""Single-attempt HTTP request execution and response decoding."""

import json
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from src.errors import (
    ErrorType,
    ServiceError,
    create_decode_error,
    create_response_error,
)
from src.network.constants import (
    COMPONENT_NETWORK,
    CONTENT_TYPE_BINARY,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_TEXT,
)
from src.network.metrics import NetworkMetrics
from src.network.models import ContentKind, HttpMethod, ResponseEnvelope
from src.network.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()

# Statuses that carry no body by definition
_NO_CONTENT_STATUSES = frozenset({204, 205})


def build_request_content(
    body: Any,
    headers: Mapping[str, str] | None = None,
) -> tuple[bytes | None, httpx.Headers]:
    """Serialize a request body and derive its Content-Type.

    Structured values are sent as JSON, strings as plain text and bytes
    as an octet stream. Caller headers take precedence over the derived
    Content-Type.

    Args:
        body: None, str, bytes, or a JSON-serializable value.
        headers: Caller-supplied headers.

    Returns:
        Tuple of encoded content (None when there is no body) and headers.

    Raises:
        ServiceError: VALIDATION if a structured body is not JSON-serializable.
    """
    content: bytes | None
    defaults: dict[str, str] = {}

    if body is None:
        content = None
    elif isinstance(body, bytes | bytearray):
        content = bytes(body)
        defaults["Content-Type"] = CONTENT_TYPE_BINARY
    elif isinstance(body, str):
        content = body.encode("utf-8")
        defaults["Content-Type"] = CONTENT_TYPE_TEXT
    else:
        try:
            content = json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as exc:
            msg = f"Request body is not JSON-serializable: {exc}"
            raise ServiceError(
                msg, ErrorType.VALIDATION, {"body_type": type(body).__name__}
            ) from exc
        defaults["Content-Type"] = CONTENT_TYPE_JSON

    merged = httpx.Headers(defaults)
    if headers:
        merged.update(headers)
    return content, merged


def _error_body(response: httpx.Response, envelope: ResponseEnvelope) -> Any:
    """Best-effort parse of a non-success response body."""
    if not response.content:
        return None
    if envelope.kind == ContentKind.JSON:
        try:
            return response.json()
        except ValueError:
            return response.text
    if envelope.kind == ContentKind.TEXT:
        return response.text
    return None


class RequestExecutor:
    """Issues exactly one HTTP request and decodes its response.

    Holds no per-request state. Transport exceptions are left to the
    caller; only HTTP-level and decoding failures become ServiceErrors.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        metrics: NetworkMetrics | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            client: Shared async HTTP client.
            metrics: Optional metrics sink.
        """
        self._client = client
        self._metrics = metrics

    async def execute(
        self,
        url: str,
        method: HttpMethod = HttpMethod.GET,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> Any:
        """Issue one request and return the decoded body.

        Args:
            url: Absolute request URL.
            method: HTTP method.
            body: Request body (see build_request_content).
            headers: Request headers.
            timeout_ms: Transport timeout in milliseconds.

        Returns:
            Parsed JSON, text, or bytes depending on the response content type.

        Raises:
            ServiceError: VALIDATION for a body that cannot be serialized,
                NETWORK_RESPONSE for non-2xx statuses, NETWORK_DECODE for
                malformed JSON bodies.
            httpx.TransportError: On connection-level failures.
        """
        content, request_headers = build_request_content(body, headers)
        return await self.send(url, method, content, request_headers, timeout_ms)

    async def send(
        self,
        url: str,
        method: HttpMethod,
        content: bytes | None,
        headers: httpx.Headers,
        timeout_ms: int | None = None,
    ) -> Any:
        """Issue one request with an already encoded body.

        Callers that repeat a request encode it once with
        build_request_content and pass the result to every attempt.

        Args:
            url: Absolute request URL.
            method: HTTP method.
            content: Encoded body, or None.
            headers: Final request headers.
            timeout_ms: Transport timeout in milliseconds.

        Returns:
            Decoded response body.
        """
        safe_url = redact_url_credentials(url)
        log = logger.bind(component=COMPONENT_NETWORK, method=method.value, url=safe_url)
        log.debug("request_sent", headers=redact_headers(headers))

        kwargs: dict[str, Any] = {"content": content, "headers": headers}
        if timeout_ms is not None:
            kwargs["timeout"] = timeout_ms / 1000.0

        response = await self._client.request(method.value, url, **kwargs)
        envelope = ResponseEnvelope.from_response(response)

        if self._metrics is not None:
            self._metrics.record_response(response.status_code, len(response.content))

        log = log.bind(status_code=envelope.status_code, content_kind=envelope.kind.value)

        if not envelope.is_success:
            log.info("request_http_error", reason=envelope.reason_phrase)
            raise create_response_error(
                envelope.status_code,
                envelope.reason_phrase,
                safe_url,
                _error_body(response, envelope),
            )

        data = self._decode(response, envelope, safe_url)
        log.debug("request_decoded", bytes=len(response.content))
        return data

    @staticmethod
    def _decode(
        response: httpx.Response,
        envelope: ResponseEnvelope,
        safe_url: str,
    ) -> Any:
        """Decode a successful response according to its content kind.

        Raises:
            ServiceError: NETWORK_DECODE if a JSON body does not parse.
        """
        if envelope.status_code in _NO_CONTENT_STATUSES:
            return None

        if envelope.kind == ContentKind.JSON:
            try:
                return json.loads(response.content)
            except ValueError as exc:
                raise create_decode_error(
                    safe_url, envelope.content_type, str(exc)
                ) from exc

        if envelope.kind == ContentKind.TEXT:
            return response.text

        return response.content
