"""ErrorClassifier implementation for gateway failure classification.

The classifier reduces any raw failure to ErrorDetails. It never raises:
a failure inside classification yields the default UNKNOWN_ERROR result.
"""

from __future__ import annotations

import json
from typing import Any

from payment_recovery.core.logging import get_logger

from .codes import (
    GATEWAY_TIMEOUT_CODE,
    NETWORK_ERROR_CODE,
    UNKNOWN_ERROR_CODE,
    ErrorAction,
    ErrorCategory,
    ErrorMapping,
    lookup_error_code,
)
from .models import (
    ErrorDetails,
    GatewayFailure,
    MessageFailure,
    NetworkFailure,
    OpaqueFailure,
    StructuredFailure,
)
from .parsers import ingest_failure

_logger = get_logger("errors")


DEFAULT_ERROR_MESSAGE = "An unexpected error occurred"
DEFAULT_USER_MESSAGE = "Something went wrong. Please try again or contact support."

# Keyword heuristics for free-text messages, checked in order.
# Each entry: (substrings that must all be present, user message)
_FRIENDLY_MESSAGES: list[tuple[tuple[str, ...], str]] = [
    (("invalid", "card"), "Please check your card details and try again."),
    (("declined",),
     "Your payment was declined. Please contact your bank or try a different card."),
    (("insufficient",), "Insufficient funds. Please use a different payment method."),
    (("expired",), "This card has expired. Please use a different card."),
    (("timeout",), "The request timed out. Please try again."),
    (("network",), "Network error. Please check your connection and try again."),
]


def get_user_friendly_message(technical_message: str) -> str:
    """Derive shopper-facing text from a technical message.

    Returns the original message when no keyword matches.
    """
    lower = technical_message.lower()
    for keywords, friendly in _FRIENDLY_MESSAGES:
        if all(keyword in lower for keyword in keywords):
            return friendly
    return technical_message


def _format_technical_details(extensions: dict[str, Any]) -> str:
    return json.dumps(extensions, indent=2, sort_keys=True, default=str)


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


class ErrorClassifier:
    """Classifies gateway failures into ErrorDetails.

    Priority order (structured metadata always wins over text heuristics):
    1. Known gateway error code in the extensions
    2. Network-layer failure
    3. Timeout mentioned in the message
    4. Free-text message with keyword-derived user message
    5. Default UNKNOWN_ERROR
    """

    def classify(self, raw: Any, retry_count: int = 0) -> ErrorDetails:
        """Classify a raw failure.

        Args:
            raw: Exception, GraphQL error dict, string, or any other failure.
            retry_count: Retries already made for the operation that failed.

        Returns:
            ErrorDetails; never raises.
        """
        try:
            failure = ingest_failure(raw)
            result = self.classify_failure(failure, retry_count)
        except Exception as exc:
            _logger.exception(
                "classification_failed",
                raw_type=type(raw).__name__,
                error=str(exc),
            )
            return self.default_details(retry_count)

        _logger.warning(
            "error_classified",
            error_code=result.error_code,
            category=result.error_category.value,
            retryable=result.retryable,
            retry_count=retry_count,
            message=result.error_message,
        )
        return result

    def classify_failure(self, failure: GatewayFailure, retry_count: int = 0) -> ErrorDetails:
        """Classify an already-ingested failure."""
        if isinstance(failure, StructuredFailure):
            mapping = lookup_error_code(failure.code)
            if mapping is not None:
                return self._from_mapping(failure, mapping, retry_count)
            # Unknown code: the structured metadata carries no more signal
            # than the unstructured reading of the same failure.
            return self.classify_failure(failure.fallback, retry_count)

        if isinstance(failure, NetworkFailure):
            return ErrorDetails(
                error_code=NETWORK_ERROR_CODE,
                error_category=ErrorCategory.TECHNICAL_ERROR,
                error_message="Network error occurred",
                user_message="Network connection failed. Please check your internet and try again.",
                suggested_action=ErrorAction.RETRY,
                retryable=True,
                retry_count=retry_count,
            )

        if isinstance(failure, MessageFailure):
            if "timeout" in failure.text.lower():
                return ErrorDetails(
                    error_code=GATEWAY_TIMEOUT_CODE,
                    error_category=ErrorCategory.TECHNICAL_ERROR,
                    error_message="Request timed out",
                    user_message="The request timed out. Please try again.",
                    suggested_action=ErrorAction.RETRY,
                    retryable=True,
                    retry_count=retry_count,
                )
            return ErrorDetails(
                error_code=UNKNOWN_ERROR_CODE,
                error_category=ErrorCategory.UNKNOWN_ERROR,
                error_message=failure.text,
                user_message=get_user_friendly_message(failure.text),
                suggested_action=ErrorAction.RETRY,
                retryable=True,
                retry_count=retry_count,
            )

        if isinstance(failure, OpaqueFailure):
            return self.default_details(retry_count)

        raise TypeError(f"Unhandled failure variant: {type(failure).__name__}")

    def default_details(self, retry_count: int = 0) -> ErrorDetails:
        """The UNKNOWN_ERROR result used when nothing better is known."""
        return ErrorDetails(
            error_code=UNKNOWN_ERROR_CODE,
            error_category=ErrorCategory.UNKNOWN_ERROR,
            error_message=DEFAULT_ERROR_MESSAGE,
            user_message=DEFAULT_USER_MESSAGE,
            suggested_action=ErrorAction.RETRY,
            retryable=True,
            retry_count=retry_count,
        )

    def from_code(
        self,
        code: str,
        error_message: str | None = None,
        retry_count: int = 0,
    ) -> ErrorDetails:
        """Build details for a code from the table, for locally detected failures.

        Unknown codes produce the default result.
        """
        mapping = lookup_error_code(code)
        if mapping is None:
            return self.default_details(retry_count)
        return ErrorDetails(
            error_code=code,
            error_category=mapping.category,
            error_message=error_message or mapping.user_message,
            user_message=mapping.user_message,
            suggested_action=mapping.action,
            retryable=mapping.retryable,
            retry_count=retry_count,
        )

    def _from_mapping(
        self,
        failure: StructuredFailure,
        mapping: ErrorMapping,
        retry_count: int,
    ) -> ErrorDetails:
        extensions = failure.extensions
        extension_message = extensions.get("message")
        error_message = (
            failure.message
            or (extension_message if isinstance(extension_message, str) else None)
            or mapping.user_message
        )
        return ErrorDetails(
            error_code=failure.code,
            error_category=mapping.category,
            error_message=error_message,
            user_message=mapping.user_message,
            suggested_action=mapping.action,
            retryable=mapping.retryable,
            retry_count=retry_count,
            technical_details=_format_technical_details(extensions),
            gateway_response_code=_optional_str(extensions.get("juspayResponseCode")),
            gateway_response_message=_optional_str(extensions.get("juspayResponseMessage")),
        )


_default_classifier = ErrorClassifier()


def classify(raw: Any, retry_count: int = 0) -> ErrorDetails:
    """Classify a raw failure with the module-level classifier."""
    return _default_classifier.classify(raw, retry_count)
