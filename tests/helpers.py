"""Shared test doubles for payment recovery tests."""

import json
import logging
from collections.abc import Mapping
from typing import Any


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway:
    """Scripted PaymentGateway.

    Each ``*_results`` list is consumed in order; an Exception entry is
    raised instead of returned. When a list runs dry its last entry repeats.
    """

    def __init__(self) -> None:
        self.link_results: list[Any] = ["https://pay.example.com/session/abc"]
        self.methods_results: list[Any] = [[
            {"payment_method_type": "CARD", "enabled": True},
            {"payment_method_type": "UPI", "enabled": True},
            {"payment_method_type": "NETBANKING", "enabled": False},
        ]]
        self.vpa_results: list[Any] = [{"status": "VALID"}]
        self.cards_results: list[Any] = [[]]
        self.delete_results: list[Any] = [{"success": True, "message": "Card deleted"}]
        self.nickname_results: list[Any] = [{"success": True, "message": "Nickname updated"}]
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _next(self, name: str, results: list[Any], *args: Any) -> Any:
        self.calls.append((name, args))
        result = results.pop(0) if len(results) > 1 else results[0]
        if isinstance(result, Exception):
            raise result
        return result

    def call_count(self, name: str) -> int:
        return sum(1 for call_name, _ in self.calls if call_name == name)

    async def fetch_payment_link(self, order_code: str) -> str | None:
        return self._next("fetch_payment_link", self.link_results, order_code)

    async def fetch_payment_methods(self, customer_id: str | None = None) -> Any:
        return self._next("fetch_payment_methods", self.methods_results, customer_id)

    async def verify_vpa(self, vpa: str) -> Mapping[str, Any] | None:
        return self._next("verify_vpa", self.vpa_results, vpa)

    async def fetch_stored_cards(self, customer_id: str) -> list[Mapping[str, Any]]:
        return self._next("fetch_stored_cards", self.cards_results, customer_id)

    async def delete_stored_card(self, card_token: str) -> Mapping[str, Any]:
        return self._next("delete_stored_card", self.delete_results, card_token)

    async def update_card_nickname(self, card_token: str, nickname: str) -> Mapping[str, Any]:
        return self._next("update_card_nickname", self.nickname_results, card_token, nickname)


class RecordingRedirector:
    """Redirector that remembers the URLs it was asked to open."""

    def __init__(self) -> None:
        self.urls: list[str] = []

    async def redirect(self, url: str) -> None:
        self.urls.append(url)


class CapturingHandler(logging.Handler):
    """Collects rendered JSON log lines as dicts."""

    def __init__(self) -> None:
        super().__init__()
        self.entries: list[dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        # Plain stdlib records (asyncio, pytest) are not structlog JSON.
        if not message.startswith("{"):
            return
        self.entries.append(json.loads(message))

    def events(self, name: str) -> list[dict[str, Any]]:
        return [entry for entry in self.entries if entry.get("event") == name]
