"""Data models for error classification.

This module provides:
- ErrorDetails: Classified, display-ready description of one failure
- ErrorSummary: Title/message/action projection for the display layer
- StructuredFailure, NetworkFailure, MessageFailure, OpaqueFailure:
  the shapes a raw gateway failure is reduced to at ingestion
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

from .codes import ErrorAction, ErrorCategory, Severity


@dataclass(frozen=True)
class ErrorDetails:
    """A payment failure with its classification and display text.

    Created fresh by the classifier for every failure. The orchestration
    layer derives an escalated copy with with_escalation() before display;
    the original instance is never modified.
    """

    error_code: str
    error_category: ErrorCategory
    error_message: str
    """Technical message, for logs and diagnostics."""

    user_message: str
    """Message shown to the shopper."""

    suggested_action: ErrorAction
    retryable: bool
    retry_count: int | None = None
    gateway_response_code: str | None = None
    gateway_response_message: str | None = None
    technical_details: str | None = None

    @property
    def is_technical(self) -> bool:
        return self.error_category == ErrorCategory.TECHNICAL_ERROR

    def with_escalation(
        self,
        user_message: str | None = None,
        retry_count: int | None = None,
    ) -> ErrorDetails:
        """Return a copy with an escalated user message and/or retry count."""
        changes: dict[str, Any] = {}
        if user_message is not None:
            changes["user_message"] = user_message
        if retry_count is not None:
            changes["retry_count"] = retry_count
        return replace(self, **changes)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "error_category": self.error_category.value,
            "error_message": self.error_message,
            "user_message": self.user_message,
            "suggested_action": self.suggested_action.value,
            "retryable": self.retryable,
            "retry_count": self.retry_count,
            "gateway_response_code": self.gateway_response_code,
            "gateway_response_message": self.gateway_response_message,
            "technical_details": self.technical_details,
        }


@dataclass(frozen=True)
class ErrorSummary:
    """Display projection of ErrorDetails."""

    title: str
    message: str
    action_text: str
    severity: Severity

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "message": self.message,
            "action_text": self.action_text,
            "severity": self.severity.value,
        }


# =============================================================================
# Ingested failure shapes
# =============================================================================


@dataclass(frozen=True)
class NetworkFailure:
    """Failure below the HTTP layer (connection refused, DNS, offline)."""

    message: str = ""


@dataclass(frozen=True)
class MessageFailure:
    """Failure that only carries free text."""

    text: str


@dataclass(frozen=True)
class OpaqueFailure:
    """Failure with nothing usable to classify."""


@dataclass(frozen=True)
class StructuredFailure:
    """Failure carrying a gateway error code in its extensions.

    Attributes:
        code: Gateway error code (``juspayErrorCode`` or ``code``).
        extensions: The full extensions mapping, for diagnostics.
        message: Raw message, if the error carried one.
        fallback: Unstructured reading of the same failure, used when the
            code is not in the error-code table.
    """

    code: str
    extensions: dict[str, Any] = field(default_factory=dict)
    message: str | None = None
    fallback: UnstructuredFailure = field(default_factory=OpaqueFailure)


UnstructuredFailure = Union[NetworkFailure, MessageFailure, OpaqueFailure]
GatewayFailure = Union[StructuredFailure, NetworkFailure, MessageFailure, OpaqueFailure]
