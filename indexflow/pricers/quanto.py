"""Quanto pricer for equity cash flows (equity return paid in another currency)."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from indexflow.curves import FlatForward, QuantoTermStructure
from indexflow.dates import Actual365Fixed, NullCalendar
from indexflow.errors import (
    IndexTypeError,
    InvalidDateOrderError,
    PricerNotInitializedError,
    ReferenceDateMismatchError,
    UnboundHandleError,
)
from indexflow.handles import Handle
from indexflow.indexes.equity import EquityIndex
from indexflow.interfaces import BlackVolSurface, Quote, YieldCurve
from indexflow.pricers.base import EquityCashFlowPricer

if TYPE_CHECKING:
    from indexflow.cashflows.equity import EquityCashFlow

logger = logging.getLogger(__name__)


class EquityQuantoCashFlowPricer(EquityCashFlowPricer):
    r"""
    Prices an equity index return paid in a currency other than the index's.

    The index forward is re-derived under the quanto currency: the
    quanto-currency curve replaces the index's interest curve, and the
    dividend curve is replaced by a `QuantoTermStructure`, shifting the growth
    rate by the equity/FX covariance

        q_quanto = q + r_quanto - r_index + rho * sigma_eq(K) * sigma_fx

    where K is the raw (unadjusted) index level at the fixing date. The price
    is I1/I0 (or I1/I0 - 1 for growth-only payoffs) read from the adjusted
    index.

    Market data are held through shared handles and observed. The correlation
    is read on every `price()` call.
    """

    def __init__(
        self,
        quanto_currency_term_structure: Handle[YieldCurve],
        equity_volatility: Handle[BlackVolSurface],
        fx_volatility: Handle[BlackVolSurface],
        correlation: Handle[Quote],
    ) -> None:
        self._quanto_currency_term_structure = quanto_currency_term_structure
        self._equity_volatility = equity_volatility
        self._fx_volatility = fx_volatility
        self._correlation = correlation
        self.register_with(quanto_currency_term_structure)
        self.register_with(equity_volatility)
        self.register_with(fx_volatility)
        self.register_with(correlation)

        self._index: EquityIndex | None = None
        self._base_date: date | None = None
        self._fixing_date: date | None = None
        self._growth_only = False

    def quanto_currency_term_structure(self) -> Handle[YieldCurve]:
        return self._quanto_currency_term_structure

    def equity_volatility(self) -> Handle[BlackVolSurface]:
        return self._equity_volatility

    def fx_volatility(self) -> Handle[BlackVolSurface]:
        return self._fx_volatility

    def correlation(self) -> Handle[Quote]:
        return self._correlation

    def initialize(self, cash_flow: EquityCashFlow) -> None:
        index = cash_flow.index
        if not isinstance(index, EquityIndex):
            raise IndexTypeError(f"Equity index required, got {type(index).__name__}")
        if cash_flow.fixing_date < cash_flow.base_date:
            raise InvalidDateOrderError("Fixing date cannot fall before base date.")

        if self._quanto_currency_term_structure.empty():
            raise UnboundHandleError("Quanto currency term structure handle cannot be empty.")
        if self._equity_volatility.empty():
            raise UnboundHandleError("Equity volatility term structure handle cannot be empty.")
        if self._fx_volatility.empty():
            raise UnboundHandleError("FX volatility term structure handle cannot be empty.")
        if self._correlation.empty():
            raise UnboundHandleError("Correlation handle cannot be empty.")

        quanto_reference = self._quanto_currency_term_structure().reference_date()
        equity_reference = self._equity_volatility().reference_date()
        fx_reference = self._fx_volatility().reference_date()
        if not quanto_reference == equity_reference == fx_reference:
            raise ReferenceDateMismatchError(
                "Quanto currency term structure, equity and FX volatility need to have "
                f"the same reference date (got {quanto_reference}, {equity_reference}, {fx_reference})."
            )

        self._index = index
        self._base_date = cash_flow.base_date
        self._fixing_date = cash_flow.fixing_date
        self._growth_only = cash_flow.growth_only

    def price(self) -> float:
        if self._index is None:
            raise PricerNotInitializedError("initialize() must be called before price()")
        index = self._index

        # Raw index level: only the volatility strike, not the payoff numerator.
        strike = index.fixing(self._fixing_date)
        dividend = self._dividend_handle(index)
        quanto_term_structure = Handle(
            QuantoTermStructure(
                dividend,
                self._quanto_currency_term_structure,
                index.equity_interest_rate_curve(),
                self._equity_volatility,
                strike,
                self._fx_volatility,
                1.0,
                self._correlation().value(),
            )
        )
        quanto_index = index.clone(self._quanto_currency_term_structure, quanto_term_structure, index.spot())

        i0 = quanto_index.fixing(self._base_date)
        i1 = quanto_index.fixing(self._fixing_date)
        logger.debug(
            "%s quanto fixings %s=%s %s=%s (strike %s)",
            index.name,
            self._base_date,
            i0,
            self._fixing_date,
            i1,
            strike,
        )
        if self._growth_only:
            return i1 / i0 - 1.0
        return i1 / i0

    def _dividend_handle(self, index: EquityIndex) -> Handle[YieldCurve]:
        """The index's dividend curve, or a flat zero curve when it has none."""
        dividend = index.equity_dividend_curve()
        if not dividend.empty():
            return dividend
        return Handle(
            FlatForward(
                0.0,
                reference_date=self._quanto_currency_term_structure().reference_date(),
                calendar=NullCalendar(),
                day_counter=Actual365Fixed(),
            )
        )
