"""Payment gateway collaborator contract and its data shapes.

The gateway client itself (GraphQL transport, schema) lives outside this
package. This module defines what the checkout flow expects from it and
parses the loosely shaped payloads it returns into typed models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from payment_recovery.core.config import RetryConfig
from payment_recovery.core.constants import VPA_STATUS_VALID
from payment_recovery.core.errors import ErrorClassifier, ErrorDetails
from payment_recovery.core.logging import get_logger
from payment_recovery.execution.retry import retry_payment_operation

_logger = get_logger("gateway")


class PaymentMethod(BaseModel):
    """A payment method offered by the gateway (CARD, UPI, NETBANKING, ...)."""

    model_config = ConfigDict(extra="allow")

    payment_method_type: str
    enabled: bool = False


class StoredCard(BaseModel):
    """A card saved for a customer, identified by its gateway token."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    last4: str | None = None
    brand: str | None = None
    expiry_month: str | None = Field(default=None, alias="expiryMonth")
    expiry_year: str | None = Field(default=None, alias="expiryYear")
    nickname: str | None = None


class VpaVerification(BaseModel):
    """Result of verifying a UPI id (VPA)."""

    vpa: str
    status: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == VPA_STATUS_VALID


@dataclass(frozen=True)
class CardOperationResult:
    """Outcome of deleting or renaming a stored card."""

    success: bool
    message: str | None = None
    card: StoredCard | None = None
    error: ErrorDetails | None = None


@runtime_checkable
class PaymentGateway(Protocol):
    """Protocol for payment gateway clients.

    Every method may raise; raised errors are classified by the caller.
    Following the package's Protocol pattern (like SessionStore, Redirector).
    """

    async def fetch_payment_link(self, order_code: str) -> str | None:
        """Create a hosted payment page for the order and return its URL."""
        ...

    async def fetch_payment_methods(self, customer_id: str | None = None) -> Any:
        """Payment methods, as a list or as ``{"payment_methods": [...]}``."""
        ...

    async def verify_vpa(self, vpa: str) -> Mapping[str, Any] | None:
        """Verify a UPI id; the result carries a ``status`` field."""
        ...

    async def fetch_stored_cards(self, customer_id: str) -> list[Mapping[str, Any]]:
        ...

    async def delete_stored_card(self, card_token: str) -> Mapping[str, Any]:
        ...

    async def update_card_nickname(self, card_token: str, nickname: str) -> Mapping[str, Any]:
        ...


def parse_payment_methods(payload: Any) -> list[PaymentMethod]:
    """Parse a payment-methods payload, direct list or nested under ``payment_methods``.

    Entries that are not mappings with a ``payment_method_type`` are skipped.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("payment_methods")
    if not isinstance(payload, list):
        return []

    methods: list[PaymentMethod] = []
    for entry in payload:
        if isinstance(entry, Mapping) and entry.get("payment_method_type"):
            methods.append(PaymentMethod.model_validate(dict(entry)))
        else:
            _logger.debug("payment_method_skipped", entry_type=type(entry).__name__)
    return methods


def parse_stored_cards(payload: Any) -> list[StoredCard]:
    """Parse a stored-cards payload; entries without a token are skipped."""
    if not isinstance(payload, list):
        return []
    return [
        StoredCard.model_validate(dict(entry))
        for entry in payload
        if isinstance(entry, Mapping) and entry.get("token")
    ]


def parse_vpa_verification(vpa: str, payload: Any) -> VpaVerification:
    status = payload.get("status") if isinstance(payload, Mapping) else None
    return VpaVerification(vpa=vpa, status=str(status) if status is not None else None)


class StoredCardManager:
    """Deletes and renames stored cards, classifying any failure.

    Gateway calls go through the payment retry engine. Failures never raise
    out of this class; they come back as ``CardOperationResult(success=False,
    error=...)``.
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        retry_config: RetryConfig | None = None,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        self._gateway = gateway
        self._retry_config = retry_config
        self._classifier = classifier or ErrorClassifier()

    async def delete_card(self, card_token: str) -> CardOperationResult:
        try:
            payload = await retry_payment_operation(
                lambda: self._gateway.delete_stored_card(card_token),
                self._retry_config,
            )
        except Exception as e:
            return self._failed("card_delete_failed", e)
        return self._parse_result(payload)

    async def update_nickname(self, card_token: str, nickname: str) -> CardOperationResult:
        try:
            payload = await retry_payment_operation(
                lambda: self._gateway.update_card_nickname(card_token, nickname),
                self._retry_config,
            )
        except Exception as e:
            return self._failed("card_nickname_update_failed", e)
        return self._parse_result(payload)

    def _failed(self, event: str, error: Exception) -> CardOperationResult:
        details = self._classifier.classify(error)
        _logger.warning(event, error_code=details.error_code)
        return CardOperationResult(success=False, message=details.user_message, error=details)

    @staticmethod
    def _parse_result(payload: Any) -> CardOperationResult:
        if not isinstance(payload, Mapping):
            return CardOperationResult(success=False, message="Empty response from gateway")
        cards = parse_stored_cards([payload.get("card")])
        return CardOperationResult(
            success=bool(payload.get("success")),
            message=payload.get("message"),
            card=cards[0] if cards else None,
        )
