"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from src.network.config import BackoffStrategy
from src.network.constants import DEFAULT_RETRIES, DEFAULT_RETRY_DELAY_MS
from src.settings import AppSettings


pytestmark = pytest.mark.unit


_ENV_VARS = (
    "NETWORK_RETRIES",
    "NETWORK_RETRY_DELAY_MS",
    "NETWORK_TIMEOUT_MS",
    "NETWORK_BACKOFF",
    "NETWORK_USER_AGENT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self) -> None:
        """Test defaults when no environment is set."""
        settings = AppSettings(_env_file=None)

        assert settings.network_retries == DEFAULT_RETRIES
        assert settings.network_retry_delay_ms == DEFAULT_RETRY_DELAY_MS
        assert settings.network_backoff == BackoffStrategy.FIXED
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables are applied."""
        monkeypatch.setenv("NETWORK_RETRIES", "5")
        monkeypatch.setenv("NETWORK_RETRY_DELAY_MS", "250")
        monkeypatch.setenv("NETWORK_TIMEOUT_MS", "2000")
        monkeypatch.setenv("NETWORK_BACKOFF", "exponential")

        settings = AppSettings(_env_file=None)

        assert settings.network_retries == 5
        assert settings.network_retry_delay_ms == 250
        assert settings.network_timeout_ms == 2000
        assert settings.network_backoff == BackoffStrategy.EXPONENTIAL

    def test_invalid_retries_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that negative retries fail validation."""
        monkeypatch.setenv("NETWORK_RETRIES", "-2")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_to_network_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test conversion into a NetworkConfig."""
        monkeypatch.setenv("NETWORK_RETRIES", "1")
        monkeypatch.setenv("NETWORK_BACKOFF", "exponential")
        monkeypatch.setenv("NETWORK_USER_AGENT", "gateway-client/3")

        config = AppSettings(_env_file=None).to_network_config()

        assert config.retries == 1
        assert config.user_agent == "gateway-client/3"
        assert config.retry_policy.strategy == BackoffStrategy.EXPONENTIAL
