"""Unit tests for the netreq CLI."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog
from click.testing import CliRunner

from src.cli.netreq import cli
from src.errors import ErrorType, ServiceError
from src.network.models import HttpMethod, RequestOptions


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[MagicMock]:
    with patch("src.cli.netreq.configure_logging") as mock_configure:
        yield mock_configure
    structlog.reset_defaults()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _sent_options(mock_issue: AsyncMock) -> RequestOptions:
    options: RequestOptions = mock_issue.call_args.args[1]
    return options


class TestNetreqCli:
    """Tests for the netreq command."""

    @patch("src.cli.netreq._issue", new_callable=AsyncMock)
    def test_get_prints_json(self, mock_issue: AsyncMock, runner: CliRunner) -> None:
        """Test that JSON bodies are pretty-printed."""
        mock_issue.return_value = {"success": True}

        result = runner.invoke(cli, ["https://example.com", "--no-json-logs"])

        assert result.exit_code == 0
        assert '"success": true' in result.output
        assert mock_issue.call_args.args[0] == "https://example.com"
        assert _sent_options(mock_issue).method == HttpMethod.GET

    @patch("src.cli.netreq._issue", new_callable=AsyncMock)
    def test_json_data_posts(self, mock_issue: AsyncMock, runner: CliRunner) -> None:
        """Test that --json-data implies POST with a structured body."""
        mock_issue.return_value = "ok"

        result = runner.invoke(
            cli,
            [
                "https://example.com",
                "--json-data",
                '{"a": 1}',
                "-H",
                "X-Trace: t1",
                "--retries",
                "0",
                "--retry-delay",
                "5",
            ],
        )

        options = _sent_options(mock_issue)
        assert result.exit_code == 0
        assert "ok" in result.output
        assert options.method == HttpMethod.POST
        assert options.body == {"a": 1}
        assert options.headers == {"X-Trace": "t1"}
        assert options.retries == 0
        assert options.retry_delay_ms == 5

    @patch("src.cli.netreq._issue", new_callable=AsyncMock)
    def test_binary_output_summarized(
        self, mock_issue: AsyncMock, runner: CliRunner
    ) -> None:
        """Test that binary bodies print a byte count."""
        mock_issue.return_value = b"\x00\x01\x02"

        result = runner.invoke(cli, ["https://example.com"])

        assert "<3 bytes of binary data>" in result.output

    @patch("src.cli.netreq._issue", new_callable=AsyncMock)
    def test_service_error_exits_nonzero(
        self, mock_issue: AsyncMock, runner: CliRunner
    ) -> None:
        """Test that ServiceErrors are reported and exit with status 1."""
        mock_issue.side_effect = ServiceError(
            "HTTP error 404: Not Found", ErrorType.NETWORK_RESPONSE, {"status": 404}
        )

        result = runner.invoke(cli, ["https://example.com"])

        assert result.exit_code == 1
        assert "[NETWORK_RESPONSE] HTTP error 404: Not Found" in result.output

    def test_conflicting_bodies_rejected(self, runner: CliRunner) -> None:
        """Test that --data and --json-data are mutually exclusive."""
        result = runner.invoke(
            cli, ["https://example.com", "--data", "x", "--json-data", "{}"]
        )

        assert result.exit_code == 2

    def test_malformed_header_rejected(self, runner: CliRunner) -> None:
        """Test that headers without a colon are refused."""
        result = runner.invoke(cli, ["https://example.com", "-H", "NoColon"])

        assert result.exit_code == 2
        assert "Name: value" in result.output
