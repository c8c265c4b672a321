"""Structured logging infrastructure for payment recovery.

Provides structured logging using structlog with checkout-specific context
such as order_code, session_id, and component names. Supports console and
JSON output.

Example usage:
    from payment_recovery.core.logging import get_logger, configure_logging, with_context

    # Configure once at startup
    configure_logging(level="DEBUG", format="console")

    # Get a component-specific logger
    logger = get_logger("checkout")

    # Log with auto-context
    logger.info("payment_submitted", attempt=2)

    # Use checkout context for automatic correlation
    ctx = CheckoutContext(order_code="ORD-1")
    with with_context(ctx):
        logger.info("link_requested")  # Automatically includes order_code, session_id
"""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Field names whose values must never reach a log sink
SENSITIVE_PATTERNS = frozenset({
    "token",
    "card_number",
    "cvv",
    "vpa",
    "upi_id",
    "secret",
    "password",
    "api_key",
    "authorization",
})


@dataclass(frozen=True)
class CheckoutContext:
    """Immutable context for correlating log entries across one checkout.

    Attributes:
        order_code: The order being paid for.
        session_id: Unique id of the checkout session (UUID).
        customer_id: Customer identifier, when known.
        component: Component name for the current operation.
    """

    order_code: str
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    customer_id: str | None = None
    component: str = "unknown"

    def with_component(self, component: str) -> CheckoutContext:
        """Create a new context with the specified component."""
        return replace(self, component=component)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging (excludes None values)."""
        result: dict[str, Any] = {
            "order_code": self.order_code,
            "session_id": self.session_id,
            "component": self.component,
        }
        if self.customer_id is not None:
            result["customer_id"] = self.customer_id
        return result


_current_context: ContextVar[CheckoutContext | None] = ContextVar(
    "payment_recovery_context", default=None
)


def get_current_context() -> CheckoutContext | None:
    """Get the current CheckoutContext if set."""
    return _current_context.get()


def clear_context() -> None:
    """Clear the current CheckoutContext."""
    _current_context.set(None)


@contextmanager
def with_context(ctx: CheckoutContext) -> Iterator[CheckoutContext]:
    """Context manager that sets CheckoutContext for the duration of a block.

    All log calls within the block include the context fields
    (order_code, session_id, ...) when the _add_context processor is active.

    Args:
        ctx: The CheckoutContext to use for the block.

    Yields:
        The CheckoutContext that was set.
    """
    token = _current_context.set(ctx)
    try:
        yield ctx
    finally:
        _current_context.reset(token)


def _sanitize_value(key: str, value: Any) -> Any:
    key_lower = key.lower()
    for pattern in SENSITIVE_PATTERNS:
        if pattern in key_lower:
            return "[REDACTED]"
    return value


def _sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that redacts sensitive fields, one level deep."""
    sanitized: EventDict = {}
    for key, value in event_dict.items():
        if isinstance(value, dict):
            sanitized[key] = {
                k: _sanitize_value(k, v) for k, v in value.items()
            }
        else:
            sanitized[key] = _sanitize_value(key, value)
    return sanitized


def _add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds ISO8601 UTC timestamp."""
    event_dict["timestamp"] = datetime.now(UTC).isoformat()
    return event_dict


def _add_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that merges the active CheckoutContext.

    Explicit bindings take precedence over context fields.
    """
    ctx = get_current_context()
    if ctx is not None:
        for key, value in ctx.to_dict().items():
            if key not in event_dict:
                event_dict[key] = value
    return event_dict


class PaymentLogger:
    """Component logger wrapper around structlog.

    The underlying structlog logger is fetched lazily on every call so that
    loggers created at import time still respect a later configure_logging().
    """

    def __init__(self, component: str, **initial_context: Any) -> None:
        self._component = component
        self._context: dict[str, Any] = {"component": component, **initial_context}

    def _get_logger(self) -> structlog.stdlib.BoundLogger:
        logger: structlog.stdlib.BoundLogger = structlog.get_logger().bind(**self._context)
        return logger

    @property
    def component(self) -> str:
        return self._component

    def _derive(self, context: dict[str, Any]) -> PaymentLogger:
        derived = PaymentLogger(self._component)
        derived._context = context
        return derived

    def bind(self, **context: Any) -> PaymentLogger:
        """Return a logger with additional bound fields."""
        return self._derive({**self._context, **context})

    def unbind(self, *keys: str) -> PaymentLogger:
        """Return a logger without the given fields."""
        return self._derive({k: v for k, v in self._context.items() if k not in keys})

    def debug(self, event: str, **kw: Any) -> None:
        self._get_logger().debug(event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._get_logger().info(event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._get_logger().warning(event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._get_logger().error(event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log an exception with traceback. Call from within an except block."""
        self._get_logger().exception(event, **kw)


def _get_processors(
    renderer: Processor,
    include_timestamps: bool,
    include_context: bool,
) -> list[Processor]:
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        _sanitize_event_dict,
    ]

    if include_context:
        processors.append(_add_context)

    if include_timestamps:
        processors.append(_add_timestamp)

    processors.extend([
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ])
    return processors


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console"] = "console",  # noqa: A002
    include_timestamps: bool = True,
    include_context: bool = True,
) -> None:
    """Configure structured logging.

    Call once at application startup before any logging occurs.

    Args:
        level: Minimum log level to capture.
        format: "json" for structured output on stdout, "console" for
            human-readable output on stderr.
        include_timestamps: Whether to include ISO8601 timestamps.
        include_context: Whether to merge the active CheckoutContext.
    """
    log_level = getattr(logging, level)

    if format == "json":
        handler = logging.StreamHandler(sys.stdout)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        handler = logging.StreamHandler(sys.stderr)
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    # cache_logger_on_first_use=False keeps import-time loggers in sync with
    # whatever configuration is applied later.
    structlog.configure(
        processors=_get_processors(renderer, include_timestamps, include_context),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(component: str, **initial_context: Any) -> PaymentLogger:
    """Get a logger bound to a component.

    Example:
        logger = get_logger("classifier")
        with with_context(CheckoutContext(order_code="ORD-1")):
            logger.warning("error_classified", error_code="GATEWAY_TIMEOUT")
    """
    return PaymentLogger(component, **initial_context)


__all__ = [
    "CheckoutContext",
    "PaymentLogger",
    "SENSITIVE_PATTERNS",
    "clear_context",
    "configure_logging",
    "get_current_context",
    "get_logger",
    "with_context",
]
