"""Pytest fixtures for payment recovery tests."""

import logging
from collections.abc import Generator

import pytest
import structlog

from payment_recovery.core.config import CheckoutConfig, EscalationConfig, RetryConfig
from payment_recovery.core.logging import clear_context, configure_logging

from helpers import CapturingHandler, FakeClock, FakeGateway, RecordingRedirector


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset logging state before and after each test.

    This ensures test isolation for logging configuration.
    """
    structlog.reset_defaults()
    clear_context()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    structlog.reset_defaults()
    clear_context()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def redirector() -> RecordingRedirector:
    return RecordingRedirector()


@pytest.fixture
def instant_retry_config() -> RetryConfig:
    """Backoff configuration with zero delays."""
    return RetryConfig(max_attempts=3, base_delay_seconds=0.0, max_delay_seconds=0.0)


@pytest.fixture
def instant_config(instant_retry_config: RetryConfig) -> CheckoutConfig:
    """Checkout configuration with zero backoff and auto-retry delays."""
    return CheckoutConfig(
        retry=instant_retry_config,
        escalation=EscalationConfig(auto_retry_delay_seconds=0.0),
    )


@pytest.fixture
def json_logs() -> CapturingHandler:
    """Configure JSON logging at DEBUG and capture every entry."""
    configure_logging(level="DEBUG", format="json", include_timestamps=False)
    handler = CapturingHandler()
    logging.getLogger().addHandler(handler)
    return handler
