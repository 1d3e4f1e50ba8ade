"""CLI for issuing a single resilient HTTP request."""

import asyncio
import json
import logging
import sys
from typing import Any

import click
import structlog

from src.errors import ServiceError, log_error
from src.network import HttpMethod, NetworkService, RequestOptions
from src.observability.logging import configure_logging, level_from_name
from src.settings import get_settings


logger = structlog.get_logger()


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated ``Name: value`` options.

    Raises:
        click.BadParameter: If a value has no colon.
    """
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            msg = f"Expected 'Name: value', got {raw!r}"
            raise click.BadParameter(msg, param_hint="--header")
        headers[name.strip()] = value.strip()
    return headers


def _render(data: Any) -> str:
    """Render a decoded body for the terminal."""
    if isinstance(data, bytes):
        return f"<{len(data)} bytes of binary data>"
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2, ensure_ascii=False)


async def _issue(url: str, options: RequestOptions) -> Any:
    config = get_settings().to_network_config()
    async with NetworkService(config) as service:
        return await service.request(url, options)


@click.command()
@click.version_option(version="0.1.0")
@click.argument("url")
@click.option(
    "--method",
    "-X",
    type=click.Choice([m.value for m in HttpMethod], case_sensitive=False),
    default=None,
    help="HTTP method (default: GET, or POST when a body is given).",
)
@click.option("--data", "-d", "text_data", default=None, help="Plain text body.")
@click.option(
    "--json-data",
    "json_data",
    default=None,
    help="JSON body; sent with Content-Type: application/json.",
)
@click.option(
    "--header",
    "-H",
    "header_values",
    multiple=True,
    help="Extra header as 'Name: value'. Repeatable.",
)
@click.option(
    "--retries",
    type=click.IntRange(min=0),
    default=None,
    help="Additional attempts after the first.",
)
@click.option(
    "--retry-delay",
    "retry_delay_ms",
    type=click.IntRange(min=0),
    default=None,
    help="Delay between attempts in milliseconds.",
)
@click.option(
    "--timeout",
    "timeout_ms",
    type=click.IntRange(min=1),
    default=None,
    help="Per-attempt timeout in milliseconds.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    envvar="LOG_JSON",
    help="Use JSON format for logs (default: true).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def cli(  # noqa: PLR0913
    url: str,
    method: str | None,
    text_data: str | None,
    json_data: str | None,
    header_values: tuple[str, ...],
    retries: int | None,
    retry_delay_ms: int | None,
    timeout_ms: int | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Send a request to URL and print the decoded response body."""
    settings = get_settings()
    level = logging.DEBUG if verbose else level_from_name(settings.log_level)
    configure_logging(level=level, json_format=json_logs)

    if text_data is not None and json_data is not None:
        msg = "Use either --data or --json-data, not both"
        raise click.UsageError(msg)

    body: Any = text_data
    if json_data is not None:
        try:
            body = json.loads(json_data)
        except ValueError as exc:
            msg = f"Invalid JSON: {exc}"
            raise click.BadParameter(msg, param_hint="--json-data") from exc

    default_method = HttpMethod.GET if body is None else HttpMethod.POST
    options = RequestOptions(
        method=HttpMethod(method.upper()) if method else default_method,
        body=body,
        headers=_parse_headers(header_values) or None,
        retries=retries,
        retry_delay_ms=retry_delay_ms,
        timeout_ms=timeout_ms,
    )

    try:
        data = asyncio.run(_issue(url, options))
    except ServiceError as exc:
        log_error(exc, logger.bind(command="netreq"))
        click.echo(exc.dev_message, err=True)
        sys.exit(1)

    click.echo(_render(data))
