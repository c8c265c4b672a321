"""Per-operation attempt tracking for one checkout session.

Counts payment attempts per operation id (usually the order code) and
remembers when the last one happened. The counts drive the "show
alternatives" affordance and the escalation of displayed messages.

The tracker is owned by a single checkout session and mutated from a single
task, so it takes no locks. Never share an instance across sessions.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from payment_recovery.core.constants import ALTERNATIVES_THRESHOLD, MIN_RETRY_INTERVAL_SECONDS
from payment_recovery.core.logging import get_logger

_logger = get_logger("tracker")


@dataclass
class AttemptRecord:
    """Attempt count and time of the last attempt (clock seconds)."""

    attempts: int = 0
    last_attempt_time: float | None = None


class RetryTracker:
    """In-memory attempt counter keyed by operation id.

    Args:
        clock: Monotonic time source in seconds. Injected for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._records: dict[str, AttemptRecord] = {}

    def record_attempt(self, operation_id: str) -> int:
        """Record an attempt and return the new count (1 for the first)."""
        record = self._records.setdefault(operation_id, AttemptRecord())
        record.attempts += 1
        record.last_attempt_time = self._clock()
        _logger.debug("attempt_recorded", operation_id=operation_id, attempts=record.attempts)
        return record.attempts

    def get_attempt_count(self, operation_id: str) -> int:
        record = self._records.get(operation_id)
        return record.attempts if record else 0

    def last_attempt_time(self, operation_id: str) -> float | None:
        record = self._records.get(operation_id)
        return record.last_attempt_time if record else None

    def should_show_alternatives(
        self,
        operation_id: str,
        threshold: int = ALTERNATIVES_THRESHOLD,
    ) -> bool:
        """True once the attempt count reaches ``threshold``."""
        return self.get_attempt_count(operation_id) >= threshold

    def should_allow_retry(
        self,
        operation_id: str,
        min_delay_seconds: float = MIN_RETRY_INTERVAL_SECONDS,
    ) -> bool:
        """True if no attempt was made yet or the last one is old enough."""
        last = self.last_attempt_time(operation_id)
        if last is None:
            return True
        return self._clock() - last >= min_delay_seconds

    def reset(self, operation_id: str) -> None:
        """Drop all state for ``operation_id``. Safe to call repeatedly."""
        if self._records.pop(operation_id, None) is not None:
            _logger.debug("attempts_reset", operation_id=operation_id)

    def clear(self) -> None:
        """Drop state for every operation id."""
        self._records.clear()

    def __contains__(self, operation_id: object) -> bool:
        return operation_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RetryTracker(operations={len(self._records)})"
