"""Error categories, actions, and the gateway error-code table.

Contains the structured classification enums used throughout payment
recovery.

This module provides:
- ErrorCategory: Closed set of categories surfaced to callers
- ErrorAction: What the shopper is asked to do next
- Severity: Display severity of an error summary
- ErrorMapping: Classification of one known gateway code
- ERROR_CODE_MAP: Read-only table from gateway codes to ErrorMapping

Error Code Table
================

**User errors** - the shopper can fix the input.

    | Code | Action | Retryable |
    |------|--------|-----------|
    | INVALID_CARD_NUMBER | RE_ENTER_DETAILS | Yes |
    | INVALID_CVV | RE_ENTER_DETAILS | Yes |
    | CARD_EXPIRED | TRY_ANOTHER_METHOD | No |
    | INVALID_EXPIRY_DATE | RE_ENTER_DETAILS | Yes |
    | INVALID_VPA | RE_ENTER_DETAILS | Yes |

**Business errors** - the payment was refused by the issuer or merchant rules.

    | Code | Action | Retryable |
    |------|--------|-----------|
    | INSUFFICIENT_FUNDS | CHECK_BALANCE | No |
    | TRANSACTION_LIMIT_EXCEEDED | CONTACT_BANK | No |
    | CARD_NOT_SUPPORTED | TRY_ANOTHER_METHOD | No |
    | PAYMENT_METHOD_NOT_ENABLED | TRY_ANOTHER_METHOD | No |
    | BANK_DECLINED | CONTACT_BANK | No |

**Technical errors** - transient gateway or transport failures.

    | Code | Action | Retryable |
    |------|--------|-----------|
    | GATEWAY_TIMEOUT | RETRY | Yes |
    | GATEWAY_ERROR | RETRY | Yes |
    | NETWORK_ERROR | RETRY | Yes |
    | SERVICE_UNAVAILABLE | RETRY | Yes |

**User dropped** - the shopper abandoned the gateway page.

    | Code | Action | Retryable |
    |------|--------|-----------|
    | TRANSACTION_CANCELLED | NONE | Yes |
    | SESSION_EXPIRED | RETRY | Yes |

**Validation errors** - the order itself is not payable.

    | Code | Action | Retryable |
    |------|--------|-----------|
    | INVALID_ORDER | CONTACT_SUPPORT | No |
    | INVALID_AMOUNT | CONTACT_SUPPORT | No |
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

# =============================================================================
# Error Categories
# =============================================================================


class ErrorCategory(str, Enum):
    """Categories of payment errors.

    Every classified error has exactly one category. The category decides
    default retry eligibility and the tone of the message shown.
    """

    USER_ERROR = "USER_ERROR"
    """Shopper input was wrong - fix the details and retry."""

    BUSINESS_ERROR = "BUSINESS_ERROR"
    """Issuer or merchant rules refused the payment."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Transient gateway or network failure - retriable."""

    USER_DROPPED = "USER_DROPPED"
    """Shopper cancelled or let the session expire."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Checkout state is not payable (no method, bad order)."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    """Could not be classified."""


# =============================================================================
# Error Actions
# =============================================================================


class ErrorAction(str, Enum):
    """Actions suggested to the shopper to resolve an error."""

    RETRY = "RETRY"
    RE_ENTER_DETAILS = "RE_ENTER_DETAILS"
    CONTACT_SUPPORT = "CONTACT_SUPPORT"
    TRY_ANOTHER_METHOD = "TRY_ANOTHER_METHOD"
    CHECK_BALANCE = "CHECK_BALANCE"
    CONTACT_BANK = "CONTACT_BANK"
    NONE = "NONE"


# =============================================================================
# Severity
# =============================================================================


class Severity(str, Enum):
    """Display severity of an error summary."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


# =============================================================================
# Error Code Mapping
# =============================================================================


class ErrorMapping(NamedTuple):
    """Classification of a known gateway error code.

    Attributes:
        category: Category the code belongs to.
        action: Action suggested to the shopper.
        retryable: Whether retrying the same payment can succeed.
        user_message: Display text for the shopper.
    """

    category: ErrorCategory
    action: ErrorAction
    retryable: bool
    user_message: str


UNKNOWN_ERROR_CODE = "UNKNOWN_ERROR"
NETWORK_ERROR_CODE = "NETWORK_ERROR"
GATEWAY_TIMEOUT_CODE = "GATEWAY_TIMEOUT"
GATEWAY_ERROR_CODE = "GATEWAY_ERROR"
INVALID_VPA_CODE = "INVALID_VPA"
PAYMENT_METHOD_REQUIRED_CODE = "PAYMENT_METHOD_REQUIRED"


ERROR_CODE_MAP: MappingProxyType[str, ErrorMapping] = MappingProxyType({
    # User input errors
    "INVALID_CARD_NUMBER": ErrorMapping(
        ErrorCategory.USER_ERROR,
        ErrorAction.RE_ENTER_DETAILS,
        True,
        "The card number you entered is invalid. Please check and try again.",
    ),
    "INVALID_CVV": ErrorMapping(
        ErrorCategory.USER_ERROR,
        ErrorAction.RE_ENTER_DETAILS,
        True,
        "The CVV is incorrect. Please enter the 3-digit code from the back of your card.",
    ),
    "CARD_EXPIRED": ErrorMapping(
        ErrorCategory.USER_ERROR,
        ErrorAction.TRY_ANOTHER_METHOD,
        False,
        "This card has expired. Please use a different card.",
    ),
    "INVALID_EXPIRY_DATE": ErrorMapping(
        ErrorCategory.USER_ERROR,
        ErrorAction.RE_ENTER_DETAILS,
        True,
        "The expiry date is invalid. Please check the date on your card.",
    ),
    INVALID_VPA_CODE: ErrorMapping(
        ErrorCategory.USER_ERROR,
        ErrorAction.RE_ENTER_DETAILS,
        True,
        "The UPI ID you entered is invalid. Please check and try again.",
    ),
    # Business logic errors
    "INSUFFICIENT_FUNDS": ErrorMapping(
        ErrorCategory.BUSINESS_ERROR,
        ErrorAction.CHECK_BALANCE,
        False,
        "Your account has insufficient funds. Please use a different payment method.",
    ),
    "TRANSACTION_LIMIT_EXCEEDED": ErrorMapping(
        ErrorCategory.BUSINESS_ERROR,
        ErrorAction.CONTACT_BANK,
        False,
        "Transaction limit exceeded. Please contact your bank or try a different card.",
    ),
    "CARD_NOT_SUPPORTED": ErrorMapping(
        ErrorCategory.BUSINESS_ERROR,
        ErrorAction.TRY_ANOTHER_METHOD,
        False,
        "This card is not supported. Please try a different payment method.",
    ),
    "PAYMENT_METHOD_NOT_ENABLED": ErrorMapping(
        ErrorCategory.BUSINESS_ERROR,
        ErrorAction.TRY_ANOTHER_METHOD,
        False,
        "This payment method is not available. Please select another option.",
    ),
    "BANK_DECLINED": ErrorMapping(
        ErrorCategory.BUSINESS_ERROR,
        ErrorAction.CONTACT_BANK,
        False,
        "Your bank has declined this transaction. Please contact your bank for details.",
    ),
    # Technical errors
    GATEWAY_TIMEOUT_CODE: ErrorMapping(
        ErrorCategory.TECHNICAL_ERROR,
        ErrorAction.RETRY,
        True,
        "The payment gateway timed out. Please try again.",
    ),
    GATEWAY_ERROR_CODE: ErrorMapping(
        ErrorCategory.TECHNICAL_ERROR,
        ErrorAction.RETRY,
        True,
        "A technical error occurred. Please try again.",
    ),
    NETWORK_ERROR_CODE: ErrorMapping(
        ErrorCategory.TECHNICAL_ERROR,
        ErrorAction.RETRY,
        True,
        "Network connection failed. Please check your internet and try again.",
    ),
    "SERVICE_UNAVAILABLE": ErrorMapping(
        ErrorCategory.TECHNICAL_ERROR,
        ErrorAction.RETRY,
        True,
        "Payment service is temporarily unavailable. Please try again in a moment.",
    ),
    # User dropped
    "TRANSACTION_CANCELLED": ErrorMapping(
        ErrorCategory.USER_DROPPED,
        ErrorAction.NONE,
        True,
        "You cancelled the payment. Click pay again to retry.",
    ),
    "SESSION_EXPIRED": ErrorMapping(
        ErrorCategory.USER_DROPPED,
        ErrorAction.RETRY,
        True,
        "Your session expired. Please try again.",
    ),
    # Validation errors
    "INVALID_ORDER": ErrorMapping(
        ErrorCategory.VALIDATION_ERROR,
        ErrorAction.CONTACT_SUPPORT,
        False,
        "Order validation failed. Please contact support.",
    ),
    "INVALID_AMOUNT": ErrorMapping(
        ErrorCategory.VALIDATION_ERROR,
        ErrorAction.CONTACT_SUPPORT,
        False,
        "Invalid payment amount. Please contact support.",
    ),
})
"""Known gateway error codes. Process-wide constant; never mutated."""


def lookup_error_code(code: str | None) -> ErrorMapping | None:
    """Look up a gateway error code in ERROR_CODE_MAP.

    Returns:
        The mapping, or None for unknown or missing codes.
    """
    if not code:
        return None
    return ERROR_CODE_MAP.get(code)
