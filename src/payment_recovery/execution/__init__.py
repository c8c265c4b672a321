"""Execution layer for payment recovery.

Contains the backoff retry engine, the per-session attempt tracker,
progressive messaging and escalation, and error analytics.
"""

from payment_recovery.execution.analytics import ErrorAnalyticsEvent, track_error_analytics
from payment_recovery.execution.escalation import (
    EscalationDecision,
    EscalationPolicy,
    create_error_summary,
    get_action_label,
    get_progressive_message,
    should_auto_retry,
)
from payment_recovery.execution.retry import (
    calculate_backoff_delay,
    is_retryable_payment_error,
    make_retryable,
    retry_payment_operation,
    retry_with_backoff,
)
from payment_recovery.execution.tracker import AttemptRecord, RetryTracker

__all__ = [
    "AttemptRecord",
    "ErrorAnalyticsEvent",
    "EscalationDecision",
    "EscalationPolicy",
    "RetryTracker",
    "calculate_backoff_delay",
    "create_error_summary",
    "get_action_label",
    "get_progressive_message",
    "is_retryable_payment_error",
    "make_retryable",
    "retry_payment_operation",
    "retry_with_backoff",
    "should_auto_retry",
    "track_error_analytics",
]
