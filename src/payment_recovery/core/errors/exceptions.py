"""Exception hierarchy for gateway adapters and the package itself.

Gateway adapters raise GatewayError (or a subclass) so the classifier can
read structured metadata without sniffing arbitrary shapes. Package-level
programming and configuration errors derive from PaymentRecoveryError.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class PaymentRecoveryError(Exception):
    """Base class for errors raised by payment_recovery itself."""


class ConfigError(PaymentRecoveryError):
    """Configuration could not be loaded or validated."""


class GatewayError(Exception):
    """Failure reported by a payment gateway adapter.

    Attributes:
        message: Technical message from the gateway or transport.
        extensions: GraphQL-style extensions (``juspayErrorCode``, ``code``,
            ``juspayResponseCode``, ``juspayResponseMessage``, ...).
        status_code: HTTP status of the gateway response, when known.
        retryable: Explicit retryability override from the adapter.
        network: True when the failure happened below the HTTP layer.
    """

    def __init__(
        self,
        message: str = "",
        *,
        extensions: Mapping[str, Any] | None = None,
        status_code: int | None = None,
        retryable: bool | None = None,
        network: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.extensions: dict[str, Any] = dict(extensions or {})
        self.status_code = status_code
        self.retryable = retryable
        self.network = network

    @property
    def error_code(self) -> str | None:
        """Gateway error code carried in the extensions, if any."""
        code = self.extensions.get("juspayErrorCode") or self.extensions.get("code")
        return str(code) if code else None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"error_code={self.error_code!r}, status_code={self.status_code!r})"
        )


class GatewayNetworkError(GatewayError):
    """The gateway could not be reached."""

    def __init__(self, message: str = "network error", **kwargs: Any) -> None:
        kwargs.setdefault("network", True)
        super().__init__(message, **kwargs)


class GatewayTimeoutError(GatewayError):
    """The gateway did not answer in time."""

    def __init__(self, message: str = "gateway timeout", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
