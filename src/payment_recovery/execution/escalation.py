"""Progressive messaging and escalation across repeated payment failures.

Repeated failures should not show the shopper the same text again and
again. This module derives the displayed message from the failure count,
decides when an unattended retry is allowed, and maps categories and
actions to display strings.

Escalation ladder:
- 1st failure: the classified user message
- 2nd failure: the user message plus a second-attempt notice
- 3rd failure onwards: a generic message steering to another method or
  support, worded for technical vs. other failures
"""

from __future__ import annotations

from dataclasses import dataclass

from payment_recovery.core.config import EscalationConfig
from payment_recovery.core.constants import MAX_AUTO_RETRIES
from payment_recovery.core.errors import (
    ErrorAction,
    ErrorCategory,
    ErrorDetails,
    ErrorSummary,
    Severity,
)

SECOND_ATTEMPT_NOTICE = "This is your second attempt."

TECHNICAL_ESCALATION_MESSAGE = (
    "We're experiencing technical difficulties. "
    "Please try a different payment method or contact support."
)

GENERIC_ESCALATION_MESSAGE = (
    "Multiple attempts failed. "
    "Please try a different payment method or contact support for assistance."
)

# Every ErrorAction must have an entry (checked by tests).
ACTION_LABELS: dict[ErrorAction, str] = {
    ErrorAction.RETRY: "Try Again",
    ErrorAction.RE_ENTER_DETAILS: "Re-enter Details",
    ErrorAction.TRY_ANOTHER_METHOD: "Choose Another Payment Method",
    ErrorAction.CHECK_BALANCE: "Choose Another Payment Method",
    ErrorAction.CONTACT_BANK: "Contact Bank",
    ErrorAction.CONTACT_SUPPORT: "Contact Support",
    ErrorAction.NONE: "Continue",
}

DEFAULT_ACTION_LABEL = "Continue"

# Every ErrorCategory must have an entry (checked by tests).
CATEGORY_SUMMARIES: dict[ErrorCategory, tuple[str, Severity]] = {
    ErrorCategory.USER_ERROR: ("Please Check Your Details", Severity.WARNING),
    ErrorCategory.BUSINESS_ERROR: ("Payment Not Authorized", Severity.ERROR),
    ErrorCategory.TECHNICAL_ERROR: ("Technical Error", Severity.WARNING),
    ErrorCategory.USER_DROPPED: ("Payment Cancelled", Severity.INFO),
    ErrorCategory.VALIDATION_ERROR: ("Validation Error", Severity.ERROR),
    ErrorCategory.UNKNOWN_ERROR: ("Payment Error", Severity.ERROR),
}


def get_progressive_message(details: ErrorDetails, failure_count: int) -> str:
    """Message to display for the ``failure_count``-th failure."""
    if failure_count <= 1:
        return details.user_message
    if failure_count == 2:
        return f"{details.user_message} {SECOND_ATTEMPT_NOTICE}"
    if details.error_category == ErrorCategory.TECHNICAL_ERROR:
        return TECHNICAL_ESCALATION_MESSAGE
    return GENERIC_ESCALATION_MESSAGE


def should_auto_retry(details: ErrorDetails, max_auto_retries: int = MAX_AUTO_RETRIES) -> bool:
    """Whether an unattended retry may be scheduled for this failure.

    Only retryable technical failures qualify, and only while fewer than
    ``max_auto_retries`` retries have been made.
    """
    return (
        details.retryable
        and details.error_category == ErrorCategory.TECHNICAL_ERROR
        and (details.retry_count or 0) < max_auto_retries
    )


def get_action_label(action: ErrorAction) -> str:
    """Button text for a suggested action."""
    return ACTION_LABELS.get(action, DEFAULT_ACTION_LABEL)


def create_error_summary(details: ErrorDetails) -> ErrorSummary:
    """Title, message, action text and severity for display."""
    title, severity = CATEGORY_SUMMARIES[details.error_category]
    return ErrorSummary(
        title=title,
        message=details.user_message,
        action_text=get_action_label(details.suggested_action),
        severity=severity,
    )


@dataclass(frozen=True)
class EscalationDecision:
    """What to show and do after a failure.

    Attributes:
        details: Error details carrying the escalated message and retry count.
        message: The escalated user message.
        show_alternatives: Whether to offer other payment methods.
        auto_retry: Whether to schedule an unattended retry.
        summary: Display summary built from the escalated details.
    """

    details: ErrorDetails
    message: str
    show_alternatives: bool
    auto_retry: bool
    summary: ErrorSummary


class EscalationPolicy:
    """Applies the escalation rules with configured thresholds."""

    def __init__(self, config: EscalationConfig | None = None) -> None:
        self.config = config or EscalationConfig()

    def decide(self, details: ErrorDetails, failure_count: int) -> EscalationDecision:
        """Escalate ``details`` for the ``failure_count``-th failure.

        The retry count overlaid on the details is ``failure_count - 1``:
        the first failure has had no retries yet.
        """
        message = get_progressive_message(details, failure_count)
        escalated = details.with_escalation(
            user_message=message,
            retry_count=max(failure_count - 1, 0),
        )
        return EscalationDecision(
            details=escalated,
            message=message,
            show_alternatives=failure_count >= self.config.alternatives_threshold,
            auto_retry=should_auto_retry(escalated, self.config.max_auto_retries),
            summary=create_error_summary(escalated),
        )
