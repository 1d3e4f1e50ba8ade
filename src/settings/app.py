"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.network.config import BackoffStrategy, NetworkConfig, RetryPolicy
from src.network.constants import (
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
)


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    network_retries: int = Field(
        default=DEFAULT_RETRIES, ge=0, validation_alias="NETWORK_RETRIES"
    )
    network_retry_delay_ms: int = Field(
        default=DEFAULT_RETRY_DELAY_MS, ge=0, validation_alias="NETWORK_RETRY_DELAY_MS"
    )
    network_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, validation_alias="NETWORK_TIMEOUT_MS"
    )
    network_backoff: BackoffStrategy = Field(
        default=BackoffStrategy.FIXED, validation_alias="NETWORK_BACKOFF"
    )
    network_user_agent: str = Field(
        default=DEFAULT_USER_AGENT, validation_alias="NETWORK_USER_AGENT"
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def to_network_config(self) -> NetworkConfig:
        """Build the request layer configuration from these settings."""
        return NetworkConfig(
            retries=self.network_retries,
            retry_delay_ms=self.network_retry_delay_ms,
            timeout_ms=self.network_timeout_ms,
            user_agent=self.network_user_agent,
            retry_policy=RetryPolicy(strategy=self.network_backoff),
        )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
