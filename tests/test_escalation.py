"""Tests for progressive messaging and escalation."""

from dataclasses import replace

import pytest

from payment_recovery.core.config import EscalationConfig
from payment_recovery.core.errors import (
    ErrorAction,
    ErrorCategory,
    ErrorClassifier,
    ErrorDetails,
    Severity,
)
from payment_recovery.execution.escalation import (
    ACTION_LABELS,
    CATEGORY_SUMMARIES,
    GENERIC_ESCALATION_MESSAGE,
    SECOND_ATTEMPT_NOTICE,
    TECHNICAL_ESCALATION_MESSAGE,
    EscalationPolicy,
    create_error_summary,
    get_action_label,
    get_progressive_message,
    should_auto_retry,
)


@pytest.fixture
def classifier() -> ErrorClassifier:
    return ErrorClassifier()


@pytest.fixture
def timeout_details(classifier: ErrorClassifier) -> ErrorDetails:
    return classifier.from_code("GATEWAY_TIMEOUT")


@pytest.fixture
def cvv_details(classifier: ErrorClassifier) -> ErrorDetails:
    return classifier.from_code("INVALID_CVV")


class TestProgressiveMessage:
    """Tests for get_progressive_message()."""

    def test_first_failure_shows_user_message(self, cvv_details: ErrorDetails) -> None:
        assert get_progressive_message(cvv_details, 1) == cvv_details.user_message

    def test_second_failure_appends_notice(self, cvv_details: ErrorDetails) -> None:
        message = get_progressive_message(cvv_details, 2)
        assert message == f"{cvv_details.user_message} {SECOND_ATTEMPT_NOTICE}"

    @pytest.mark.parametrize("count", [3, 4, 10])
    def test_technical_escalation(self, timeout_details: ErrorDetails, count: int) -> None:
        assert get_progressive_message(timeout_details, count) == TECHNICAL_ESCALATION_MESSAGE

    def test_generic_escalation(self, cvv_details: ErrorDetails) -> None:
        assert get_progressive_message(cvv_details, 3) == GENERIC_ESCALATION_MESSAGE

    def test_zero_count_treated_as_first(self, cvv_details: ErrorDetails) -> None:
        assert get_progressive_message(cvv_details, 0) == cvv_details.user_message


class TestShouldAutoRetry:
    """Tests for should_auto_retry()."""

    @pytest.mark.parametrize(("retry_count", "expected"), [(None, True), (0, True), (1, True), (2, False)])
    def test_technical_retry_budget(
        self,
        timeout_details: ErrorDetails,
        retry_count: int | None,
        expected: bool,
    ) -> None:
        details = replace(timeout_details, retry_count=retry_count)
        assert should_auto_retry(details) is expected

    def test_non_technical_never_auto_retries(self, cvv_details: ErrorDetails) -> None:
        assert cvv_details.retryable
        assert should_auto_retry(cvv_details) is False

    def test_non_retryable_technical_never_auto_retries(self, timeout_details: ErrorDetails) -> None:
        details = replace(timeout_details, retryable=False)
        assert should_auto_retry(details) is False

    def test_custom_budget(self, timeout_details: ErrorDetails) -> None:
        details = timeout_details.with_escalation(retry_count=3)
        assert should_auto_retry(details, max_auto_retries=5) is True
        assert should_auto_retry(details, max_auto_retries=0) is False


class TestDisplayTables:
    """Tests for action labels and error summaries."""

    def test_every_action_has_label(self) -> None:
        assert set(ACTION_LABELS) == set(ErrorAction)

    def test_every_category_has_summary(self) -> None:
        assert set(CATEGORY_SUMMARIES) == set(ErrorCategory)

    @pytest.mark.parametrize(
        ("action", "label"),
        [
            (ErrorAction.RETRY, "Try Again"),
            (ErrorAction.RE_ENTER_DETAILS, "Re-enter Details"),
            (ErrorAction.CHECK_BALANCE, "Choose Another Payment Method"),
            (ErrorAction.CONTACT_BANK, "Contact Bank"),
            (ErrorAction.NONE, "Continue"),
        ],
    )
    def test_action_labels(self, action: ErrorAction, label: str) -> None:
        assert get_action_label(action) == label

    def test_summary_for_business_error(self, classifier: ErrorClassifier) -> None:
        summary = create_error_summary(classifier.from_code("BANK_DECLINED"))
        assert summary.title == "Payment Not Authorized"
        assert summary.action_text == "Contact Bank"
        assert summary.severity == Severity.ERROR

    def test_summary_for_cancelled_payment(self, classifier: ErrorClassifier) -> None:
        summary = create_error_summary(classifier.from_code("TRANSACTION_CANCELLED"))
        assert summary.title == "Payment Cancelled"
        assert summary.severity == Severity.INFO
        assert summary.to_dict()["severity"] == "info"


class TestEscalationPolicy:
    """Tests for EscalationPolicy.decide()."""

    def test_first_failure(self, timeout_details: ErrorDetails) -> None:
        decision = EscalationPolicy().decide(timeout_details, 1)
        assert decision.details.retry_count == 0
        assert decision.message == timeout_details.user_message
        assert decision.auto_retry is True
        assert decision.show_alternatives is False
        assert decision.summary.title == "Technical Error"

    def test_third_failure(self, timeout_details: ErrorDetails) -> None:
        decision = EscalationPolicy().decide(timeout_details, 3)
        assert decision.details.retry_count == 2
        assert decision.details.user_message == TECHNICAL_ESCALATION_MESSAGE
        assert decision.summary.message == TECHNICAL_ESCALATION_MESSAGE
        assert decision.auto_retry is False
        assert decision.show_alternatives is True

    def test_original_details_untouched(self, timeout_details: ErrorDetails) -> None:
        EscalationPolicy().decide(timeout_details, 2)
        assert SECOND_ATTEMPT_NOTICE not in timeout_details.user_message

    def test_configured_thresholds(self, timeout_details: ErrorDetails) -> None:
        policy = EscalationPolicy(EscalationConfig(alternatives_threshold=2, max_auto_retries=0))
        decision = policy.decide(timeout_details, 2)
        assert decision.show_alternatives is True
        assert decision.auto_retry is False
