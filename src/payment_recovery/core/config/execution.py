"""Retry and escalation configuration models.

Defines models for backoff behavior of gateway calls and for the
escalation thresholds applied across repeated payment failures.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from payment_recovery.core.constants import (
    ALTERNATIVES_THRESHOLD,
    AUTO_RETRY_DELAY_SECONDS,
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_BASE_DELAY_SECONDS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY_SECONDS,
    MAX_AUTO_RETRIES,
    MIN_RETRY_INTERVAL_SECONDS,
)


class RetryConfig(BaseModel):
    """Configuration for exponential backoff of gateway operations."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS, ge=1, description="Maximum attempts, first call included"
    )
    base_delay_seconds: float = Field(
        default=DEFAULT_BASE_DELAY_SECONDS, ge=0, description="Delay after the first failure"
    )
    max_delay_seconds: float = Field(
        default=DEFAULT_MAX_DELAY_SECONDS, ge=0, description="Cap for any single delay"
    )
    backoff_multiplier: float = Field(
        default=DEFAULT_BACKOFF_MULTIPLIER, gt=1, description="Exponential backoff multiplier"
    )

    @model_validator(mode="after")
    def _validate_delay_range(self) -> RetryConfig:
        if self.base_delay_seconds > self.max_delay_seconds:
            raise ValueError(
                f"base_delay_seconds ({self.base_delay_seconds}) must not exceed "
                f"max_delay_seconds ({self.max_delay_seconds})"
            )
        return self


DEFAULT_RETRY_CONFIG = RetryConfig()
"""Process-wide default backoff: 3 attempts, 1s base, 10s cap, x2."""


class EscalationConfig(BaseModel):
    """Configuration for escalation across repeated payment failures.

    Example:
        escalation:
          alternatives_threshold: 3
          max_auto_retries: 2
          auto_retry_delay_seconds: 2.0
    """

    alternatives_threshold: int = Field(
        default=ALTERNATIVES_THRESHOLD,
        ge=1,
        description="Failed attempts before alternative payment methods are offered",
    )
    max_auto_retries: int = Field(
        default=MAX_AUTO_RETRIES,
        ge=0,
        description="Automatic re-submissions allowed for one order (0 disables)",
    )
    auto_retry_delay_seconds: float = Field(
        default=AUTO_RETRY_DELAY_SECONDS,
        ge=0,
        description="Pause before an automatic re-submission",
    )
    min_retry_interval_seconds: float = Field(
        default=MIN_RETRY_INTERVAL_SECONDS,
        ge=0,
        description="Minimum spacing between two attempts for the same order",
    )
