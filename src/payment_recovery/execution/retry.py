"""Exponential backoff retry for gateway operations.

Wraps an async operation and retries it on failure with exponentially
growing delays. Retry eligibility is decided by a predicate; the payment
predicate retries transient failures only (technical category, network,
timeout, 5xx).

Example usage:
    from payment_recovery.execution.retry import retry_payment_operation

    link = await retry_payment_operation(
        lambda: gateway.fetch_payment_link(order_code),
        RetryConfig(max_attempts=3, base_delay_seconds=1.0),
    )
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec, TypeVar

from payment_recovery.core.config import DEFAULT_RETRY_CONFIG, RetryConfig
from payment_recovery.core.errors import (
    ErrorCategory,
    ErrorDetails,
    StructuredFailure,
    extract_category,
    extract_message,
    extract_retryable,
    extract_status_code,
    has_network_indicator,
    ingest_failure,
    lookup_error_code,
)
from payment_recovery.core.logging import get_logger

_logger = get_logger("retry")

T = TypeVar("T")
P = ParamSpec("P")

ShouldRetry = Callable[[BaseException, int], bool]
"""Predicate ``(error, attempt) -> bool``; attempt is 1-indexed."""

OnRetry = Callable[[int, float, BaseException], None]
"""Progress callback ``(attempt, delay_seconds, error)``."""


def calculate_backoff_delay(attempt: int, config: RetryConfig) -> float:
    """Delay to wait after a failure on ``attempt`` (1-indexed).

    ``min(base * multiplier ** (attempt - 1), max)``
    """
    delay = config.base_delay_seconds * (config.backoff_multiplier ** (attempt - 1))
    return min(delay, config.max_delay_seconds)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    should_retry: ShouldRetry | None = None,
    on_retry: OnRetry | None = None,
) -> T:
    """Await ``operation`` with exponential backoff between failed attempts.

    Args:
        operation: Zero-argument callable returning an awaitable.
        config: Backoff parameters. Defaults to DEFAULT_RETRY_CONFIG.
        should_retry: Predicate deciding whether a failure is retried.
            Defaults to retrying every failure.
        on_retry: Called before each backoff sleep. Informational only.

    Returns:
        The operation's result from the first successful attempt.

    Raises:
        The error of the final attempt, or of the first attempt the
        predicate refuses to retry, unchanged.
    """
    config = config or DEFAULT_RETRY_CONFIG

    for attempt in range(1, config.max_attempts + 1):
        try:
            return await operation()
        except asyncio.CancelledError:
            raise
        except Exception as error:
            retry_allowed = should_retry(error, attempt) if should_retry else True
            if attempt >= config.max_attempts or not retry_allowed:
                _logger.debug(
                    "retry_exhausted" if retry_allowed else "retry_refused",
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    error_type=type(error).__name__,
                )
                raise

            delay = calculate_backoff_delay(attempt, config)
            _logger.info(
                "retry_scheduled",
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay_seconds=delay,
                error_type=type(error).__name__,
            )
            if on_retry is not None:
                on_retry(attempt, delay, error)
            await asyncio.sleep(delay)

    # max_attempts >= 1 is enforced by RetryConfig
    raise AssertionError("unreachable: retry loop exited without result")


def is_retryable_payment_error(error: Any, attempt: int = 1) -> bool:
    """Retry predicate for payment operations.

    An explicit ``retryable=False`` always wins. Otherwise the failure is
    retried only if it is a technical error (declared, or by its gateway
    code), a network failure, a timeout, or a 5xx response.
    """
    if isinstance(error, ErrorDetails):
        return error.retryable and error.error_category == ErrorCategory.TECHNICAL_ERROR

    if extract_retryable(error) is False:
        return False

    if extract_category(error) == ErrorCategory.TECHNICAL_ERROR.value:
        return True

    failure = ingest_failure(error)
    if isinstance(failure, StructuredFailure):
        mapping = lookup_error_code(failure.code)
        if mapping is not None and mapping.category == ErrorCategory.TECHNICAL_ERROR:
            return True

    message = extract_message(error)
    if has_network_indicator(error, message):
        return True

    if message is not None and "timeout" in message.lower():
        return True

    status_code = extract_status_code(error)
    return status_code is not None and 500 <= status_code < 600


async def retry_payment_operation(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
    on_retry: OnRetry | None = None,
) -> T:
    """retry_with_backoff() with the payment retry predicate."""
    return await retry_with_backoff(
        operation,
        config,
        should_retry=is_retryable_payment_error,
        on_retry=on_retry,
    )


def make_retryable(
    config: RetryConfig | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator running every call of an async function through
    retry_payment_operation().

    Example:
        @make_retryable(RetryConfig(max_attempts=2))
        async def fetch_link(order_code: str) -> str: ...
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await retry_payment_operation(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator
