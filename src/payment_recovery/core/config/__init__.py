"""Configuration models for payment recovery.

This package provides Pydantic models for loading and validating YAML
configuration. All models are re-exported from this ``__init__``.
"""

from payment_recovery.core.config.execution import (
    DEFAULT_RETRY_CONFIG,
    EscalationConfig,
    RetryConfig,
)
from payment_recovery.core.config.checkout import (
    CheckoutConfig,
    LogConfig,
)

__all__ = [
    "DEFAULT_RETRY_CONFIG",
    "EscalationConfig",
    "RetryConfig",
    "CheckoutConfig",
    "LogConfig",
]
