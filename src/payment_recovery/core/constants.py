"""Global constants for payment recovery.

Centralizes magic numbers used throughout the codebase,
making them discoverable, consistent, and easy to modify.
"""

# =============================================================================
# Backoff Defaults (seconds)
# =============================================================================

DEFAULT_MAX_ATTEMPTS = 3
"""Attempts made by the backoff engine before giving up."""

DEFAULT_BASE_DELAY_SECONDS = 1.0
"""Delay after the first failed attempt."""

DEFAULT_MAX_DELAY_SECONDS = 10.0
"""Upper bound for any single backoff delay."""

DEFAULT_BACKOFF_MULTIPLIER = 2.0
"""Growth factor between successive backoff delays."""

# =============================================================================
# Escalation Defaults
# =============================================================================

ALTERNATIVES_THRESHOLD = 3
"""Failed attempts for one order before alternative methods are offered."""

MAX_AUTO_RETRIES = 2
"""Unattended re-submissions allowed for one order."""

AUTO_RETRY_DELAY_SECONDS = 2.0
"""Pause before an automatic re-submission."""

MIN_RETRY_INTERVAL_SECONDS = 1.0
"""Minimum spacing between two user-initiated attempts."""

# =============================================================================
# Session Storage Keys
# =============================================================================

SESSION_KEY_ORDER_CODE = "juspay_order_code"
SESSION_KEY_AMOUNT = "juspay_amount"
SESSION_KEY_PAYMENT_METHOD = "juspay_payment_method"
SESSION_KEY_VPA = "juspay_vpa"

# =============================================================================
# Payment Methods
# =============================================================================

METHOD_CARD = "CARD"
METHOD_UPI = "UPI"

VPA_STATUS_VALID = "VALID"
"""Status string the gateway returns for a verified UPI id."""
