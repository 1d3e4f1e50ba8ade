"""Structured logging configuration."""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> None:
    """Configure structlog for the request layer and its callers.

    Log lines carry an ISO timestamp, the level and any context bound
    through contextvars (such as the request id).

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: current stderr).
        json_format: Render JSON lines instead of console output.
    """
    if output is None:
        output = sys.stderr
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=output.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    # httpx logs through the standard library
    logging.basicConfig(format="%(message)s", stream=output, level=level)


def level_from_name(name: str) -> int:
    """Translate a level name such as "debug" into a logging constant.

    Raises:
        ValueError: If the name is not a known level.
    """
    value = logging.getLevelName(name.upper())
    if not isinstance(value, int):
        msg = f"Unknown log level: {name}"
        raise ValueError(msg)
    return value


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a bound logger instance."""
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger


@contextmanager
def request_context(request_id: str) -> Iterator[None]:
    """Bind a request id to log lines emitted inside the block.

    Any request id already bound by the caller is restored on exit.

    Args:
        request_id: Identifier of the logical request.
    """
    with structlog.contextvars.bound_contextvars(request_id=request_id):
        yield
