"""Session-scoped storage of the payment resumption context.

Before handing the shopper to the gateway's hosted page, the checkout flow
writes the minimal context a return handler needs to resume: order code,
amount and, for UPI, the verified id. The storage itself (browser session
storage, server session) is an external collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from payment_recovery.core.constants import (
    METHOD_UPI,
    SESSION_KEY_AMOUNT,
    SESSION_KEY_ORDER_CODE,
    SESSION_KEY_PAYMENT_METHOD,
    SESSION_KEY_VPA,
)


@runtime_checkable
class SessionStore(Protocol):
    """Protocol for string key/value session storage."""

    def set_item(self, key: str, value: str) -> None: ...

    def get_item(self, key: str) -> str | None: ...

    def remove_item(self, key: str) -> None: ...


class InMemorySessionStore:
    """Dict-backed SessionStore, one per checkout session."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)


@dataclass(frozen=True)
class ResumptionContext:
    """What the return handler needs after the gateway redirects back."""

    order_code: str
    amount: int
    """Amount in minor currency units."""

    payment_method: str | None = None
    vpa: str | None = None


def save_resumption_context(store: SessionStore, context: ResumptionContext) -> None:
    """Write the context; method and VPA are only stored for UPI payments."""
    store.set_item(SESSION_KEY_ORDER_CODE, context.order_code)
    store.set_item(SESSION_KEY_AMOUNT, str(context.amount))
    if context.payment_method == METHOD_UPI:
        store.set_item(SESSION_KEY_PAYMENT_METHOD, METHOD_UPI)
        if context.vpa:
            store.set_item(SESSION_KEY_VPA, context.vpa)
    else:
        store.remove_item(SESSION_KEY_PAYMENT_METHOD)
        store.remove_item(SESSION_KEY_VPA)


def load_resumption_context(store: SessionStore) -> ResumptionContext | None:
    """Read the context back; None if no order code or an unparsable amount."""
    order_code = store.get_item(SESSION_KEY_ORDER_CODE)
    amount = store.get_item(SESSION_KEY_AMOUNT)
    if not order_code or amount is None:
        return None
    try:
        parsed_amount = int(amount)
    except ValueError:
        return None
    return ResumptionContext(
        order_code=order_code,
        amount=parsed_amount,
        payment_method=store.get_item(SESSION_KEY_PAYMENT_METHOD),
        vpa=store.get_item(SESSION_KEY_VPA),
    )
