"""Structured error taxonomy and helpers."""

from src.errors.types import (
    ErrorType,
    ServiceError,
    create_decode_error,
    create_network_error,
    create_response_error,
    log_error,
)


__all__ = [
    "ErrorType",
    "ServiceError",
    "create_decode_error",
    "create_network_error",
    "create_response_error",
    "log_error",
]
