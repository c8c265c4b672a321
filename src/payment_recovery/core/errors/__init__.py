"""Error classification and handling.

Re-exports all public symbols so callers can import from
``payment_recovery.core.errors`` directly.
"""

from payment_recovery.core.errors.codes import (
    ERROR_CODE_MAP,
    GATEWAY_ERROR_CODE,
    GATEWAY_TIMEOUT_CODE,
    INVALID_VPA_CODE,
    NETWORK_ERROR_CODE,
    PAYMENT_METHOD_REQUIRED_CODE,
    UNKNOWN_ERROR_CODE,
    ErrorAction,
    ErrorCategory,
    ErrorMapping,
    Severity,
    lookup_error_code,
)
from payment_recovery.core.errors.exceptions import (
    ConfigError,
    GatewayError,
    GatewayNetworkError,
    GatewayTimeoutError,
    PaymentRecoveryError,
)
from payment_recovery.core.errors.models import (
    ErrorDetails,
    ErrorSummary,
    GatewayFailure,
    MessageFailure,
    NetworkFailure,
    OpaqueFailure,
    StructuredFailure,
)
from payment_recovery.core.errors.parsers import (
    extract_category,
    extract_message,
    extract_retryable,
    extract_status_code,
    has_network_indicator,
    ingest_failure,
)
from payment_recovery.core.errors.classifier import (
    ErrorClassifier,
    classify,
    get_user_friendly_message,
)

__all__ = [
    "ERROR_CODE_MAP",
    "GATEWAY_ERROR_CODE",
    "GATEWAY_TIMEOUT_CODE",
    "INVALID_VPA_CODE",
    "NETWORK_ERROR_CODE",
    "PAYMENT_METHOD_REQUIRED_CODE",
    "UNKNOWN_ERROR_CODE",
    "ErrorAction",
    "ErrorCategory",
    "ErrorMapping",
    "Severity",
    "lookup_error_code",
    "ConfigError",
    "GatewayError",
    "GatewayNetworkError",
    "GatewayTimeoutError",
    "PaymentRecoveryError",
    "ErrorDetails",
    "ErrorSummary",
    "GatewayFailure",
    "MessageFailure",
    "NetworkFailure",
    "OpaqueFailure",
    "StructuredFailure",
    "extract_category",
    "extract_message",
    "extract_retryable",
    "extract_status_code",
    "has_network_indicator",
    "ingest_failure",
    "ErrorClassifier",
    "classify",
    "get_user_friendly_message",
]
