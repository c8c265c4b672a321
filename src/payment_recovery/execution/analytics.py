"""Error analytics events for payment failures.

Each classified failure surfaced to a shopper produces one analytics event.
Events are emitted through structured logging so any log pipeline can
aggregate them by code, category, or payment method.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

from payment_recovery.core.errors import ErrorDetails
from payment_recovery.core.logging import get_logger

_logger = get_logger("analytics")


@dataclass(frozen=True)
class ErrorAnalyticsEvent:
    """One payment failure, as reported to analytics."""

    error_code: str
    error_category: str
    order_id: str | None = None
    customer_id: str | None = None
    payment_method: str | None = None
    retry_count: int | None = None
    resolved: bool = False
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def track_error_analytics(
    details: ErrorDetails,
    order_id: str | None = None,
    customer_id: str | None = None,
    payment_method: str | None = None,
) -> ErrorAnalyticsEvent:
    """Build and emit the analytics event for a failure.

    Returns:
        The emitted event.
    """
    event = ErrorAnalyticsEvent(
        error_code=details.error_code,
        error_category=details.error_category.value,
        order_id=order_id,
        customer_id=customer_id,
        payment_method=payment_method,
        retry_count=details.retry_count,
    )
    _logger.info("payment_error_analytics", **event.to_dict())
    return event
