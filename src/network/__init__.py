"""Resilient HTTP request layer.

This module provides one entry point for outgoing HTTP requests with:
- Content-type based response decoding (JSON, text, binary)
- Bounded retries with a fixed or exponential delay
- No retries on HTTP-level or decoding failures
- Structured ServiceErrors for every failure mode
- Header and URL redaction for logging
"""

from src.network.config import BackoffStrategy, NetworkConfig, RetryPolicy
from src.network.executor import RequestExecutor, build_request_content
from src.network.metrics import NetworkMetrics
from src.network.models import (
    ContentKind,
    HttpMethod,
    RequestOptions,
    ResolvedRequest,
    ResponseEnvelope,
    classify_content_type,
)
from src.network.redact import redact_headers, redact_url_credentials
from src.network.retry import RetryController, is_retryable
from src.network.service import NetworkService
from src.network.state_machine import (
    RequestState,
    RequestStateMachine,
    RequestStateTransitionError,
)


__all__ = [
    # Service
    "NetworkService",
    # Components
    "RequestExecutor",
    "RetryController",
    "build_request_content",
    "is_retryable",
    # Config
    "BackoffStrategy",
    "NetworkConfig",
    "RetryPolicy",
    # Models
    "ContentKind",
    "HttpMethod",
    "RequestOptions",
    "ResolvedRequest",
    "ResponseEnvelope",
    "classify_content_type",
    # State machine
    "RequestState",
    "RequestStateMachine",
    "RequestStateTransitionError",
    # Metrics
    "NetworkMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
