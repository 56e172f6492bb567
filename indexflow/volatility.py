"""Black volatility term structures."""

from __future__ import annotations

from datetime import date

from indexflow.curves import TermStructure
from indexflow.handles import Handle
from indexflow.interfaces import Calendar, DateOrTime, DayCounter, Quote
from indexflow.quotes import SimpleQuote, quote_handle


class BlackVolTermStructure(TermStructure):
    """Base Black volatility surface; subclasses implement `_black_vol(t, strike)`."""

    def black_vol(self, x: DateOrTime, strike: float) -> float:
        return self._black_vol(self._time(x), strike)

    def black_variance(self, x: DateOrTime, strike: float) -> float:
        t = self._time(x)
        vol = self._black_vol(t, strike)
        return vol * vol * t

    def _black_vol(self, t: float, strike: float) -> float:
        raise NotImplementedError


class BlackConstantVol(BlackVolTermStructure):
    """Volatility flat in time and strike."""

    def __init__(
        self,
        volatility: float | SimpleQuote | Handle[Quote],
        reference_date: date | None = None,
        settlement_days: int = 0,
        calendar: Calendar | None = None,
        day_counter: DayCounter | None = None,
    ) -> None:
        super().__init__(reference_date, settlement_days, calendar, day_counter)
        self._volatility = quote_handle(volatility, name="black volatility")
        self.register_with(self._volatility)

    def _black_vol(self, t: float, strike: float) -> float:
        return self._volatility().value()

    def __repr__(self) -> str:
        return f"BlackConstantVol({self._volatility()!r}, reference_date={self.reference_date()})"
