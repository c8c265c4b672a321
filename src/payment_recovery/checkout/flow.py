"""Payment orchestration for one checkout session.

Ties the classifier, backoff engine, attempt tracker and escalation policy
together around a single payment attempt sequence.

State transitions:
- IDLE -> VALIDATING: shopper submits; the attempt is recorded
- VALIDATING -> FAILED: no method selected, or UPI id not verified
  (the gateway is never called)
- VALIDATING -> REQUESTING_LINK: validation passed
- REQUESTING_LINK -> FAILED: link creation raised or returned nothing
- REQUESTING_LINK -> REDIRECTING: link obtained (terminal success)
- FAILED -> VALIDATING: shopper retries, or a scheduled auto-retry fires
- any -> IDLE: a different payment method or stored card is selected

Example usage:
    flow = PaymentFlow("ORD-1", amount=49900, gateway=client)
    await flow.load_payment_options()
    flow.select_method("CARD")
    outcome = await flow.submit_payment()
    if outcome.state is PaymentState.FAILED:
        show(outcome.summary)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol, runtime_checkable

from payment_recovery.core.config import CheckoutConfig
from payment_recovery.core.constants import METHOD_CARD, METHOD_UPI
from payment_recovery.core.errors import (
    GATEWAY_ERROR_CODE,
    INVALID_VPA_CODE,
    PAYMENT_METHOD_REQUIRED_CODE,
    ErrorAction,
    ErrorCategory,
    ErrorClassifier,
    ErrorDetails,
    ErrorSummary,
)
from payment_recovery.core.logging import CheckoutContext, get_logger, with_context
from payment_recovery.execution.analytics import track_error_analytics
from payment_recovery.execution.escalation import EscalationPolicy
from payment_recovery.execution.retry import retry_payment_operation
from payment_recovery.execution.tracker import RetryTracker

from .gateway import (
    PaymentGateway,
    PaymentMethod,
    StoredCard,
    parse_payment_methods,
    parse_stored_cards,
    parse_vpa_verification,
)
from .session import InMemorySessionStore, ResumptionContext, SessionStore, save_resumption_context

_logger = get_logger("checkout")

INVALID_VPA_FORMAT_MESSAGE = "Please enter a valid UPI ID (format: username@bank)"
SELECT_METHOD_MESSAGE = "Please select a payment method"


def _running_task() -> asyncio.Task[object] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class PaymentState(str, Enum):
    """State of one payment attempt sequence."""

    IDLE = "idle"
    VALIDATING = "validating"
    REQUESTING_LINK = "requesting_link"
    REDIRECTING = "redirecting"
    """Terminal: the shopper was handed to the gateway's payment page."""

    FAILED = "failed"
    """Not terminal: the shopper or an auto-retry may submit again."""


@runtime_checkable
class Redirector(Protocol):
    """Hands the shopper over to the gateway's hosted payment page."""

    async def redirect(self, url: str) -> None: ...


class AutoRetryHandle:
    """Handle on a scheduled automatic re-submission.

    Returned when a failure qualifies for an unattended retry. The flow
    cancels it when the shopper submits again, changes payment method or
    card, and on close().
    """

    def __init__(self, task: asyncio.Task[PaymentOutcome], delay_seconds: float) -> None:
        self._task = task
        self.delay_seconds = delay_seconds

    @property
    def task(self) -> asyncio.Task[PaymentOutcome]:
        return self._task

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled()

    def done(self) -> bool:
        return self._task.done()

    def cancel(self) -> bool:
        """Cancel the retry. Returns False if it already ran or was cancelled."""
        return self._task.cancel()

    async def wait(self) -> PaymentOutcome | None:
        """Wait for the retry to finish.

        Returns:
            The retry's outcome, or None if it was cancelled.
        """
        await asyncio.wait({self._task})
        if self._task.cancelled():
            return None
        return self._task.result()

    def __repr__(self) -> str:
        status = "cancelled" if self.cancelled else "done" if self.done() else "pending"
        return f"AutoRetryHandle(delay_seconds={self.delay_seconds}, status={status})"


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of one submit, as handed to the display layer."""

    state: PaymentState
    error: ErrorDetails | None = None
    summary: ErrorSummary | None = None
    redirect_url: str | None = None
    show_alternatives: bool = False
    auto_retry: AutoRetryHandle | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is PaymentState.REDIRECTING


class PaymentFlow:
    """Payment orchestration for one order in one checkout session.

    The attempt tracker is injected so each session owns an isolated
    instance; pass one in to share counts across flows of the same session.
    Calls are expected from a single task; concurrent submits must be
    prevented by the caller (see ``is_processing``).
    """

    def __init__(
        self,
        order_code: str,
        amount: int,
        gateway: PaymentGateway,
        *,
        customer_id: str | None = None,
        tracker: RetryTracker | None = None,
        session: SessionStore | None = None,
        redirector: Redirector | None = None,
        config: CheckoutConfig | None = None,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        self.order_code = order_code
        self.amount = amount
        self.customer_id = customer_id
        self._gateway = gateway
        self._tracker = tracker if tracker is not None else RetryTracker()
        self._session = session if session is not None else InMemorySessionStore()
        self._redirector = redirector
        self._config = config or CheckoutConfig()
        self._classifier = classifier or ErrorClassifier()
        self._policy = EscalationPolicy(self._config.escalation)
        self._context = CheckoutContext(
            order_code=order_code, customer_id=customer_id, component="checkout"
        )

        self._state = PaymentState.IDLE
        self._auto_retry: AutoRetryHandle | None = None

        self.selected_method: str | None = None
        self.selected_card: StoredCard | None = None
        self.upi_id = ""
        self.upi_verified = False
        self.payment_methods: list[PaymentMethod] = []
        self.stored_cards: list[StoredCard] = []
        self.last_error: ErrorDetails | None = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> PaymentState:
        return self._state

    @property
    def tracker(self) -> RetryTracker:
        return self._tracker

    @property
    def is_processing(self) -> bool:
        return self._state in (PaymentState.VALIDATING, PaymentState.REQUESTING_LINK)

    @property
    def attempt_count(self) -> int:
        return self._tracker.get_attempt_count(self.order_code)

    @property
    def show_alternatives(self) -> bool:
        return self._tracker.should_show_alternatives(
            self.order_code, self._config.escalation.alternatives_threshold
        )

    @property
    def show_saved_cards(self) -> bool:
        return bool(self.stored_cards)

    @property
    def pending_auto_retry(self) -> AutoRetryHandle | None:
        if self._auto_retry is None or self._auto_retry.done():
            return None
        return self._auto_retry

    def can_retry_now(self) -> bool:
        """Whether enough time passed since the last attempt for a manual retry."""
        return self._tracker.should_allow_retry(
            self.order_code, self._config.escalation.min_retry_interval_seconds
        )

    # ------------------------------------------------------------------
    # Loading and selection
    # ------------------------------------------------------------------

    async def load_payment_options(self) -> ErrorDetails | None:
        """Load enabled payment methods and, for known customers, stored cards.

        Returns:
            None on success, otherwise the classified failure.
        """
        with with_context(self._context):
            try:
                payload = await retry_payment_operation(
                    lambda: self._gateway.fetch_payment_methods(self.customer_id),
                    self._config.retry,
                )
                self.payment_methods = [m for m in parse_payment_methods(payload) if m.enabled]

                if self.customer_id:
                    customer_id = self.customer_id
                    cards = await retry_payment_operation(
                        lambda: self._gateway.fetch_stored_cards(customer_id),
                        self._config.retry,
                    )
                    self.stored_cards = parse_stored_cards(cards)
            except Exception as e:
                details = self._classifier.classify(e)
                self.last_error = details
                _logger.warning("payment_options_load_failed", error_code=details.error_code)
                return details

            _logger.info(
                "payment_options_loaded",
                methods=[m.payment_method_type for m in self.payment_methods],
                stored_cards=len(self.stored_cards),
            )
            return None

    def select_method(self, method_type: str) -> None:
        """Switch payment method; discards card, UPI state, error and attempts."""
        self._reset_selection()
        self.selected_method = method_type
        self.selected_card = None
        self.upi_id = ""
        self.upi_verified = False
        _logger.debug("payment_method_selected", order_code=self.order_code, method=method_type)

    def select_card(self, card: StoredCard) -> None:
        """Pay with a stored card; discards error and attempts."""
        self._reset_selection()
        self.selected_card = card
        self.selected_method = METHOD_CARD
        _logger.debug("stored_card_selected", order_code=self.order_code, last4=card.last4)

    def set_upi_id(self, vpa: str) -> None:
        """Record the UPI id typed by the shopper; it must be verified again."""
        self.upi_id = vpa
        self.upi_verified = False

    async def verify_vpa(self, vpa: str | None = None) -> ErrorDetails | None:
        """Verify the UPI id with the gateway.

        Ids without ``@`` are rejected without calling the gateway.

        Returns:
            None when verified, otherwise the failure to display.
        """
        if vpa is not None:
            self.set_upi_id(vpa)
        candidate = self.upi_id

        if not candidate or "@" not in candidate:
            details = self._classifier.from_code(INVALID_VPA_CODE, INVALID_VPA_FORMAT_MESSAGE)
            self.last_error = replace(details, user_message=INVALID_VPA_FORMAT_MESSAGE)
            return self.last_error

        with with_context(self._context):
            try:
                payload = await retry_payment_operation(
                    lambda: self._gateway.verify_vpa(candidate),
                    self._config.retry,
                )
            except Exception as e:
                self.upi_verified = False
                self.last_error = self._classifier.classify(e)
                return self.last_error

        if candidate != self.upi_id:
            # The shopper edited the id while it was being verified.
            return None

        verification = parse_vpa_verification(candidate, payload)
        if verification.is_valid:
            self.upi_verified = True
            self.last_error = None
            return None

        self.upi_verified = False
        self.last_error = self._classifier.from_code(
            INVALID_VPA_CODE, f"VPA verification status: {verification.status}"
        )
        return self.last_error

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit_payment(self) -> PaymentOutcome:
        """Validate, request a payment link and redirect, or fail with escalation.

        Never raises for payment failures; every failure resolves to a
        PaymentOutcome carrying displayable ErrorDetails.
        """
        with with_context(self._context):
            return await self._submit()

    async def _submit(self) -> PaymentOutcome:
        # A manual submit supersedes a pending auto-retry; a retry that is
        # itself running is left alone by cancel_auto_retry().
        self.cancel_auto_retry()
        self._transition(PaymentState.VALIDATING)
        attempt = self._tracker.record_attempt(self.order_code)
        self.last_error = None

        validation_error = self._validate(attempt - 1)
        if validation_error is not None:
            return self._fail(validation_error, attempt)

        self._transition(PaymentState.REQUESTING_LINK)
        try:
            link = await retry_payment_operation(
                lambda: self._gateway.fetch_payment_link(self.order_code),
                self._config.retry,
            )
        except Exception as e:
            return self._fail(self._classifier.classify(e, retry_count=attempt - 1), attempt)

        if not link:
            details = self._classifier.from_code(
                GATEWAY_ERROR_CODE, "Failed to create payment link", retry_count=attempt - 1
            )
            return self._fail(details, attempt)

        return await self._redirect(link, attempt)

    def _validate(self, retry_count: int) -> ErrorDetails | None:
        if not self.selected_method:
            return ErrorDetails(
                error_code=PAYMENT_METHOD_REQUIRED_CODE,
                error_category=ErrorCategory.VALIDATION_ERROR,
                error_message=SELECT_METHOD_MESSAGE,
                user_message=SELECT_METHOD_MESSAGE,
                suggested_action=ErrorAction.TRY_ANOTHER_METHOD,
                retryable=True,
                retry_count=retry_count,
            )
        if self.selected_method == METHOD_UPI and not self.upi_verified:
            return self._classifier.from_code(
                INVALID_VPA_CODE, "Please verify your UPI ID", retry_count=retry_count
            )
        return None

    async def _redirect(self, link: str, attempt: int) -> PaymentOutcome:
        self._transition(PaymentState.REDIRECTING)
        is_upi = self.selected_method == METHOD_UPI
        save_resumption_context(
            self._session,
            ResumptionContext(
                order_code=self.order_code,
                amount=self.amount,
                payment_method=self.selected_method,
                vpa=self.upi_id if is_upi else None,
            ),
        )

        if self._redirector is not None:
            try:
                await self._redirector.redirect(link)
            except Exception as e:
                return self._fail(self._classifier.classify(e, retry_count=attempt - 1), attempt)

        self._tracker.reset(self.order_code)
        self.cancel_auto_retry()
        _logger.info("payment_redirecting", attempts=attempt)
        return PaymentOutcome(state=PaymentState.REDIRECTING, redirect_url=link)

    def _fail(self, details: ErrorDetails, attempt: int) -> PaymentOutcome:
        self._transition(PaymentState.FAILED)
        decision = self._policy.decide(details, attempt)
        self.last_error = decision.details

        track_error_analytics(
            decision.details,
            order_id=self.order_code,
            customer_id=self.customer_id,
            payment_method=self.selected_method,
        )

        handle = self._schedule_auto_retry() if decision.auto_retry else None
        _logger.warning(
            "payment_failed",
            error_code=details.error_code,
            category=details.error_category.value,
            attempt=attempt,
            show_alternatives=decision.show_alternatives,
            auto_retry=handle is not None,
        )
        return PaymentOutcome(
            state=PaymentState.FAILED,
            error=decision.details,
            summary=decision.summary,
            show_alternatives=decision.show_alternatives,
            auto_retry=handle,
        )

    # ------------------------------------------------------------------
    # Auto-retry
    # ------------------------------------------------------------------

    def _schedule_auto_retry(self) -> AutoRetryHandle:
        self.cancel_auto_retry()
        delay = self._config.escalation.auto_retry_delay_seconds
        task = asyncio.get_running_loop().create_task(
            self._run_auto_retry(delay), name=f"auto-retry-{self.order_code}"
        )
        self._auto_retry = AutoRetryHandle(task, delay)
        _logger.info("auto_retry_scheduled", delay_seconds=delay)
        return self._auto_retry

    async def _run_auto_retry(self, delay: float) -> PaymentOutcome:
        await asyncio.sleep(delay)
        _logger.info("auto_retry_started", order_code=self.order_code)
        return await self.submit_payment()

    def cancel_auto_retry(self) -> bool:
        """Cancel a pending auto-retry. Returns True if one was cancelled."""
        handle = self._auto_retry
        if handle is None or handle.done():
            return False
        # A retry that is running right now reschedules its successor
        # from inside its own task; it must not cancel itself.
        if handle.task is _running_task():
            return False
        self._auto_retry = None
        cancelled = handle.cancel()
        if cancelled:
            _logger.info("auto_retry_cancelled", order_code=self.order_code)
        return cancelled

    async def close(self) -> None:
        """Cancel pending work; call when the checkout view goes away."""
        handle = self._auto_retry
        if self.cancel_auto_retry() and handle is not None:
            await handle.wait()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset_selection(self) -> None:
        self.cancel_auto_retry()
        self._tracker.reset(self.order_code)
        self.last_error = None
        self._transition(PaymentState.IDLE)

    def _transition(self, new_state: PaymentState) -> None:
        if new_state is self._state:
            return
        _logger.debug(
            "payment_state_changed",
            order_code=self.order_code,
            from_state=self._state.value,
            to_state=new_state.value,
        )
        self._state = new_state

    def __repr__(self) -> str:
        return (
            f"PaymentFlow(order_code={self.order_code!r}, state={self._state.value}, "
            f"attempts={self.attempt_count})"
        )
