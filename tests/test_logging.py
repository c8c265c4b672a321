"""Tests for payment_recovery.core.logging module."""

from __future__ import annotations

import asyncio
import logging

import pytest

from payment_recovery.core.logging import (
    SENSITIVE_PATTERNS,
    CheckoutContext,
    PaymentLogger,
    _add_context,
    _sanitize_event_dict,
    _sanitize_value,
    clear_context,
    configure_logging,
    get_current_context,
    get_logger,
    with_context,
)

from helpers import CapturingHandler


class TestSensitivePatterns:
    """Tests for sensitive field detection and sanitization."""

    def test_payment_patterns_included(self) -> None:
        for pattern in ("card_number", "cvv", "vpa", "token"):
            assert pattern in SENSITIVE_PATTERNS

    def test_sanitize_value_redacts_compound_keys(self) -> None:
        assert _sanitize_value("card_token", "tok_123") == "[REDACTED]"
        assert _sanitize_value("CVV", "123") == "[REDACTED]"
        assert _sanitize_value("customer_vpa", "alice@upi") == "[REDACTED]"

    def test_sanitize_value_preserves_safe_values(self) -> None:
        assert _sanitize_value("order_code", "ORD-1") == "ORD-1"
        assert _sanitize_value("attempt", 2) == 2

    def test_sanitize_event_dict_handles_nested_dicts(self) -> None:
        result = _sanitize_event_dict(
            None,
            "info",
            {"event": "card_saved", "card": {"last4": "4242", "card_number": "4242424242424242"}},
        )
        assert result["event"] == "card_saved"
        assert result["card"] == {"last4": "4242", "card_number": "[REDACTED]"}


class TestPaymentLogger:
    """Tests for PaymentLogger."""

    def test_get_logger_creates_payment_logger(self) -> None:
        logger = get_logger("checkout")
        assert isinstance(logger, PaymentLogger)
        assert logger.component == "checkout"

    def test_bind_returns_new_logger(self) -> None:
        logger = get_logger("checkout")
        bound = logger.bind(order_code="ORD-1")
        assert bound is not logger
        assert bound._context["order_code"] == "ORD-1"
        assert "order_code" not in logger._context

    def test_unbind_removes_context(self) -> None:
        logger = get_logger("checkout", order_code="ORD-1", attempt=1)
        unbound = logger.unbind("attempt")
        assert "attempt" not in unbound._context
        assert unbound._context["order_code"] == "ORD-1"

    def test_json_output_contains_component_and_fields(self, json_logs: CapturingHandler) -> None:
        get_logger("retry").info("retry_scheduled", attempt=1, delay_seconds=1.0)
        (entry,) = json_logs.events("retry_scheduled")
        assert entry["component"] == "retry"
        assert entry["attempt"] == 1
        assert entry["level"] == "info"

    def test_json_output_redacts_sensitive_fields(self, json_logs: CapturingHandler) -> None:
        get_logger("checkout").info("vpa_entered", vpa="alice@upi")
        (entry,) = json_logs.events("vpa_entered")
        assert entry["vpa"] == "[REDACTED]"


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_sets_root_level(self) -> None:
        configure_logging(level="WARNING")
        assert logging.getLogger().level == logging.WARNING

    def test_replaces_existing_handlers(self) -> None:
        configure_logging(level="INFO", format="console")
        configure_logging(level="INFO", format="json")
        assert len(logging.getLogger().handlers) == 1

    def test_level_filters_entries(self) -> None:
        configure_logging(level="WARNING", format="json", include_timestamps=False)
        handler = CapturingHandler()
        logging.getLogger().addHandler(handler)
        logger = get_logger("tracker")
        logger.debug("attempt_recorded")
        logger.warning("payment_failed")
        assert [e["event"] for e in handler.entries] == ["payment_failed"]

    def test_capture_ignores_plain_stdlib_records(self, json_logs: CapturingHandler) -> None:
        logging.getLogger("asyncio").debug("Using selector: EpollSelector")
        get_logger("checkout").info("after_plain_record")
        assert [e["event"] for e in json_logs.entries] == ["after_plain_record"]

    def test_timestamps_included_by_default(self) -> None:
        configure_logging(level="INFO", format="json")
        handler = CapturingHandler()
        logging.getLogger().addHandler(handler)
        get_logger("checkout").info("tick")
        assert "timestamp" in handler.entries[0]


class TestCheckoutContext:
    """Tests for CheckoutContext and context propagation."""

    def test_minimal_context(self) -> None:
        ctx = CheckoutContext(order_code="ORD-1")
        assert ctx.component == "unknown"
        assert ctx.customer_id is None
        assert len(ctx.session_id) == 36

    def test_to_dict_excludes_none_values(self) -> None:
        data = CheckoutContext(order_code="ORD-1", session_id="s-1").to_dict()
        assert data == {"order_code": "ORD-1", "session_id": "s-1", "component": "unknown"}

    def test_with_component_creates_new_context(self) -> None:
        ctx = CheckoutContext(order_code="ORD-1", customer_id="cust-1")
        child = ctx.with_component("gateway")
        assert child.component == "gateway"
        assert child.session_id == ctx.session_id
        assert ctx.component == "unknown"

    def test_context_is_immutable(self) -> None:
        ctx = CheckoutContext(order_code="ORD-1")
        with pytest.raises(AttributeError):
            ctx.order_code = "ORD-2"  # type: ignore[misc]

    def test_with_context_sets_and_restores(self) -> None:
        assert get_current_context() is None
        ctx = CheckoutContext(order_code="ORD-1")
        with with_context(ctx) as active:
            assert active is ctx
            assert get_current_context() is ctx
        assert get_current_context() is None

    def test_with_context_restores_on_exception(self) -> None:
        with pytest.raises(RuntimeError):
            with with_context(CheckoutContext(order_code="ORD-1")):
                raise RuntimeError("boom")
        assert get_current_context() is None

    def test_clear_context(self) -> None:
        with with_context(CheckoutContext(order_code="ORD-1")):
            clear_context()
            assert get_current_context() is None

    def test_add_context_preserves_explicit_values(self) -> None:
        with with_context(CheckoutContext(order_code="ORD-1", session_id="s-1")):
            result = _add_context(None, "info", {"event": "x", "order_code": "explicit"})
        assert result["order_code"] == "explicit"
        assert result["session_id"] == "s-1"

    def test_logger_includes_context_fields(self, json_logs: CapturingHandler) -> None:
        ctx = CheckoutContext(order_code="ORD-7", session_id="sess-7", customer_id="cust-7")
        with with_context(ctx):
            get_logger("checkout").info("link_requested")
        (entry,) = json_logs.events("link_requested")
        assert entry["order_code"] == "ORD-7"
        assert entry["session_id"] == "sess-7"
        assert entry["customer_id"] == "cust-7"
        assert entry["component"] == "checkout"

    @pytest.mark.asyncio
    async def test_context_isolation_across_tasks(self) -> None:
        seen: dict[str, str | None] = {}

        async def worker(order_code: str) -> None:
            with with_context(CheckoutContext(order_code=order_code)):
                await asyncio.sleep(0)
                current = get_current_context()
                seen[order_code] = current.order_code if current else None

        await asyncio.gather(worker("ORD-A"), worker("ORD-B"))
        assert seen == {"ORD-A": "ORD-A", "ORD-B": "ORD-B"}
