"""Configuration models for the request layer."""

import random
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.network.constants import (
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
    MAX_RETRIES,
    MAX_RETRY_DELAY_MS,
    MAX_TIMEOUT_MS,
)


class BackoffStrategy(str, Enum):
    """How the delay between retry attempts evolves.

    - FIXED: Same delay before every retry
    - EXPONENTIAL: Delay multiplied by exponential_base per retry
    """

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class RetryPolicy(BaseModel):
    """Backoff policy applied between retryable attempts.

    The default is a fixed delay without jitter. Exponential growth and
    jitter are opt-in and never change how many attempts are made.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strategy: BackoffStrategy = BackoffStrategy.FIXED
    max_delay_ms: Annotated[int, Field(ge=0, le=MAX_RETRY_DELAY_MS)] = 30_000
    exponential_base: Annotated[float, Field(ge=1.0, le=5.0)] = 2.0
    jitter_factor: Annotated[float, Field(ge=0.0, le=1.0)] = 0.0

    def get_delay_ms(self, base_delay_ms: int, attempt: int) -> int:
        """Calculate delay before the next attempt.

        Args:
            base_delay_ms: Configured retry delay.
            attempt: Index of the attempt that just failed (0-indexed).

        Returns:
            Delay in milliseconds.
        """
        delay = float(base_delay_ms)
        if self.strategy == BackoffStrategy.EXPONENTIAL:
            delay = min(delay * (self.exponential_base**attempt), self.max_delay_ms)

        if self.jitter_factor > 0:
            delay += delay * self.jitter_factor * random.random()  # noqa: S311

        return int(delay)


class NetworkConfig(BaseModel):
    """Service-wide defaults for outgoing requests.

    Passed explicitly into the service; per-call options are merged over
    these values on every request.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    retries: Annotated[int, Field(ge=0, le=MAX_RETRIES)] = DEFAULT_RETRIES
    retry_delay_ms: Annotated[int, Field(ge=0, le=MAX_RETRY_DELAY_MS)] = (
        DEFAULT_RETRY_DELAY_MS
    )
    timeout_ms: Annotated[int, Field(gt=0, le=MAX_TIMEOUT_MS)] = DEFAULT_TIMEOUT_MS
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)

    @field_validator("default_headers")
    @classmethod
    def validate_no_auth_headers(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure credentials are passed per call, not stored in config."""
        forbidden = {"authorization", "cookie", "x-api-key"}
        for key in v:
            if key.lower() in forbidden:
                msg = f"Header '{key}' must not be stored in config; pass it per request"
                raise ValueError(msg)
        return v

    def base_headers(self) -> dict[str, str]:
        """Headers applied before request-specific ones.

        Returns:
            User-Agent plus configured default headers.
        """
        headers = {"User-Agent": self.user_agent, "Accept": "*/*"}
        headers.update(self.default_headers)
        return headers
