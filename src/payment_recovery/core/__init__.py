"""Core domain models and configuration."""

from payment_recovery.core.config import (
    DEFAULT_RETRY_CONFIG,
    CheckoutConfig,
    EscalationConfig,
    LogConfig,
    RetryConfig,
)
from payment_recovery.core.errors import (
    ErrorAction,
    ErrorCategory,
    ErrorClassifier,
    ErrorDetails,
    ErrorSummary,
    GatewayError,
)

__all__ = [
    "DEFAULT_RETRY_CONFIG",
    "CheckoutConfig",
    "EscalationConfig",
    "LogConfig",
    "RetryConfig",
    "ErrorAction",
    "ErrorCategory",
    "ErrorClassifier",
    "ErrorDetails",
    "ErrorSummary",
    "GatewayError",
]
