"""Observability module for structured logging."""

from src.observability.logging import (
    configure_logging,
    get_logger,
    level_from_name,
    request_context,
)


__all__ = [
    "configure_logging",
    "get_logger",
    "level_from_name",
    "request_context",
]
