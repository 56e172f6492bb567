"""Equity index: spot level plus interest and dividend curves."""

from __future__ import annotations

from datetime import date

from indexflow.errors import InvalidDateOrderError, MissingFixingError, UnboundHandleError
from indexflow.handles import Handle
from indexflow.indexes.base import Index
from indexflow.interfaces import Calendar, Quote, YieldCurve


class EquityIndex(Index):
    """
    Equity (or total-return) index.

    Forward levels follow cost of carry,

        I(d) = S * D_div(d) / D_int(d),

    with S the spot quote or, when no spot is given, the stored fixing at the
    interest curve's reference date. A missing dividend curve means no
    dividends.
    """

    def __init__(
        self,
        name: str,
        fixing_calendar: Calendar | None = None,
        currency: str | None = None,
        interest: Handle[YieldCurve] | None = None,
        dividend: Handle[YieldCurve] | None = None,
        spot: Handle[Quote] | None = None,
    ) -> None:
        super().__init__(name, fixing_calendar)
        self.currency = currency
        self._interest = interest if interest is not None else Handle(name="interest")
        self._dividend = dividend if dividend is not None else Handle(name="dividend")
        self._spot = spot if spot is not None else Handle(name="spot")
        self.register_with(self._interest)
        self.register_with(self._dividend)
        self.register_with(self._spot)

    def equity_interest_rate_curve(self) -> Handle[YieldCurve]:
        return self._interest

    def equity_dividend_curve(self) -> Handle[YieldCurve]:
        return self._dividend

    def spot(self) -> Handle[Quote]:
        return self._spot

    def forecast_fixing(self, d: date) -> float:
        if self._interest.empty():
            raise UnboundHandleError(
                f"null interest rate term structure set to this instance of {self.name}"
            )
        interest = self._interest()
        reference = interest.reference_date()
        if d < reference:
            raise InvalidDateOrderError(
                f"cannot forecast {self.name} on {d}: before curve reference date {reference}"
            )
        if not self._spot.empty():
            level = self._spot().value()
        else:
            level = self.past_fixing(reference)
            if level is None:
                raise MissingFixingError(
                    f"Cannot forecast {self.name}: missing both spot and fixing for {reference}"
                )
        dividend_discount = 1.0 if self._dividend.empty() else self._dividend().discount(d)
        return level * dividend_discount / interest.discount(d)

    def clone(
        self, interest: Handle[YieldCurve], dividend: Handle[YieldCurve], spot: Handle[Quote]
    ) -> "EquityIndex":
        """Same index (name, calendar, fixings) on different market data."""
        return EquityIndex(
            self.name,
            fixing_calendar=self.fixing_calendar,
            currency=self.currency,
            interest=interest,
            dividend=dividend,
            spot=spot,
        )
