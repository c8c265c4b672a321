"""Checkout orchestration: the payment flow and its external collaborators."""

from payment_recovery.checkout.flow import (
    AutoRetryHandle,
    PaymentFlow,
    PaymentOutcome,
    PaymentState,
    Redirector,
)
from payment_recovery.checkout.gateway import (
    CardOperationResult,
    PaymentGateway,
    PaymentMethod,
    StoredCard,
    StoredCardManager,
    VpaVerification,
    parse_payment_methods,
    parse_stored_cards,
    parse_vpa_verification,
)
from payment_recovery.checkout.session import (
    InMemorySessionStore,
    ResumptionContext,
    SessionStore,
    load_resumption_context,
    save_resumption_context,
)

__all__ = [
    "AutoRetryHandle",
    "PaymentFlow",
    "PaymentOutcome",
    "PaymentState",
    "Redirector",
    "CardOperationResult",
    "PaymentGateway",
    "PaymentMethod",
    "StoredCard",
    "StoredCardManager",
    "VpaVerification",
    "parse_payment_methods",
    "parse_stored_cards",
    "parse_vpa_verification",
    "InMemorySessionStore",
    "ResumptionContext",
    "SessionStore",
    "load_resumption_context",
    "save_resumption_context",
]
