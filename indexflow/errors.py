"""
Exceptions raised by valuation code.

Every failure is a contract violation detected synchronously: it is raised
where it is found and reaches the caller of `initialize()`/`price()`/`amount()`
unchanged. The built-in bases (ValueError, TypeError, ...) let callers that
only know the standard hierarchy catch them as usual.
"""

from __future__ import annotations


class PricingError(Exception):
    """Root of all valuation errors."""


class UnboundHandleError(PricingError, ValueError):
    """A required market-data handle is empty."""


class ReferenceDateMismatchError(PricingError, ValueError):
    """Market-data sources that must agree on the valuation date do not."""


class InvalidDateOrderError(PricingError, ValueError):
    """Dates are in an order the calculation does not support."""


class IndexTypeError(PricingError, TypeError):
    """The cash flow's index is not the specialization the pricer needs."""


class MissingFixingError(PricingError, LookupError):
    """A past fixing is required but was never stored."""


class PricerNotInitializedError(PricingError, RuntimeError):
    """`price()` was called before the pricer was bound to a cash flow."""
