"""Payment failure classification and recovery for storefront checkout."""

__version__ = "0.1.0"
