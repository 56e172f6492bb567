"""
Yield term structures.

This module deliberately keeps curve math minimal and explicit:
- Times are **year fractions** from the curve reference date, measured with
  the curve's own day counter; dates are converted on the way in.
- Rates are **continuously compounded zero rates**.
- Curves are observable: a curve built on quotes or handles re-notifies its
  observers when any input moves, and a floating curve (no fixed reference
  date) follows the global evaluation date.

Curve *construction* (bootstrapping) is out of scope; what lives here are the
few concrete curves the valuation core needs (flat curves, a pillar curve for
tests and demos) and the quanto-adjusted composition used by the equity
quanto pricer.
"""

from __future__ import annotations

import math
from datetime import date, timedelta

from indexflow.config import Settings
from indexflow.dates import Actual365Fixed, NullCalendar
from indexflow.errors import InvalidDateOrderError
from indexflow.handles import Handle
from indexflow.interfaces import BlackVolSurface, Calendar, DateOrTime, DayCounter, Quote, YieldCurve
from indexflow.observable import Observable, Observer
from indexflow.quotes import SimpleQuote, quote_handle

# Time step used to turn a discount factor into a zero rate at t = 0.
_ZERO_TIME_STEP = 0.0001


class TermStructure(Observable, Observer):
    """
    Common reference-date and time bookkeeping for curves and surfaces.

    Pass `reference_date` for a curve pinned to a date, or leave it out to
    float `settlement_days` business days after the evaluation date.
    """

    def __init__(
        self,
        reference_date: date | None = None,
        settlement_days: int = 0,
        calendar: Calendar | None = None,
        day_counter: DayCounter | None = None,
    ) -> None:
        self.calendar: Calendar = calendar if calendar is not None else NullCalendar()
        self.day_counter: DayCounter = day_counter if day_counter is not None else Actual365Fixed()
        self.settlement_days = settlement_days
        self._reference_date = reference_date
        if reference_date is None:
            self.register_with(Settings.instance().evaluation_date)

    def reference_date(self) -> date:
        if self._reference_date is not None:
            return self._reference_date
        d = self.calendar.adjust(Settings.instance().today())
        for _ in range(self.settlement_days):
            d = self.calendar.adjust(d + timedelta(days=1))
        return d

    @property
    def floating(self) -> bool:
        return self._reference_date is None

    def time_from_reference(self, d: date) -> float:
        return self.day_counter.year_fraction(self.reference_date(), d)

    def update(self) -> None:
        self.notify_observers()

    def _time(self, x: DateOrTime) -> float:
        t = self.time_from_reference(x) if isinstance(x, date) else float(x)
        if t < 0:
            raise InvalidDateOrderError(
                f"negative time ({t}) given to {type(self).__name__}: "
                f"date is before reference date {self.reference_date()}"
            )
        return t


class YieldTermStructure(TermStructure):
    """
    Base yield curve. Subclasses implement `_zero_rate(t)` or `_discount(t)`
    (each defaults to the other).
    """

    def discount(self, x: DateOrTime) -> float:
        """Discount factor to a date or time; DF(t) = exp(-r(t)*t)."""
        return self._discount(self._time(x))

    def zero_rate(self, x: DateOrTime) -> float:
        """Continuously compounded zero rate to a date or time."""
        return self._zero_rate(self._time(x))

    def _discount(self, t: float) -> float:
        return math.exp(-self._zero_rate(t) * t)

    def _zero_rate(self, t: float) -> float:
        dt = t if t > 0 else _ZERO_TIME_STEP
        return -math.log(self._discount(dt)) / dt


class FlatForward(YieldTermStructure):
    """Flat continuously compounded curve driven by a number, quote or handle."""

    def __init__(
        self,
        rate: float | SimpleQuote | Handle[Quote],
        reference_date: date | None = None,
        settlement_days: int = 0,
        calendar: Calendar | None = None,
        day_counter: DayCounter | None = None,
    ) -> None:
        super().__init__(reference_date, settlement_days, calendar, day_counter)
        self._rate = quote_handle(rate, name="flat forward rate")
        self.register_with(self._rate)

    def _zero_rate(self, t: float) -> float:
        return self._rate().value()

    def _discount(self, t: float) -> float:
        return math.exp(-self._rate().value() * t)

    def __repr__(self) -> str:
        rate = self._rate() if not self._rate.empty() else None
        return f"FlatForward({rate!r}, reference_date={self.reference_date()})"


class ZeroRateCurve(YieldTermStructure):
    """
    Zero rate curve (continuously compounded) with linear interpolation.

    - **Pillars** are increasing times (year fractions from the reference date).
    - `zero_rates_cc[i]` is the CC zero rate at `pillars[i]`.
    - Flat extrapolation on both ends.
    """

    def __init__(
        self,
        name: str,
        pillars: list[float],
        zero_rates_cc: list[float],
        reference_date: date | None = None,
        settlement_days: int = 0,
        calendar: Calendar | None = None,
        day_counter: DayCounter | None = None,
    ) -> None:
        super().__init__(reference_date, settlement_days, calendar, day_counter)
        self.name = name
        self.pillars = list(pillars)
        self.zero_rates_cc = list(zero_rates_cc)
        self._validate()

    def _validate(self) -> None:
        if len(self.pillars) != len(self.zero_rates_cc):
            raise ValueError("pillars and zero_rates_cc must have the same length")
        if not self.pillars:
            raise ValueError("curve has no pillars")
        for i in range(1, len(self.pillars)):
            if self.pillars[i] <= self.pillars[i - 1]:
                raise ValueError("pillars must be strictly increasing")

    def _zero_rate(self, t: float) -> float:
        if t <= self.pillars[0]:
            return self.zero_rates_cc[0]
        if t >= self.pillars[-1]:
            return self.zero_rates_cc[-1]
        for i in range(len(self.pillars) - 1):
            if self.pillars[i] <= t <= self.pillars[i + 1]:
                t0, t1 = self.pillars[i], self.pillars[i + 1]
                r0, r1 = self.zero_rates_cc[i], self.zero_rates_cc[i + 1]
                # Linear interpolation in *rates* (not discount factors).
                return r0 + (r1 - r0) * (t - t0) / (t1 - t0)
        return self.zero_rates_cc[-1]

    def bumped(self, bump: float) -> "ZeroRateCurve":
        """
        Return a new curve with a *parallel* additive shift to all zero rates.

        Relinking a handle to the bumped curve reprices everything that
        observes the handle. `bump` is absolute (1bp = 0.0001).
        """
        return ZeroRateCurve(
            name=self.name,
            pillars=list(self.pillars),
            zero_rates_cc=[r + bump for r in self.zero_rates_cc],
            reference_date=self._reference_date,
            settlement_days=self.settlement_days,
            calendar=self.calendar,
            day_counter=self.day_counter,
        )

    def __repr__(self) -> str:
        return f"ZeroRateCurve({self.name!r}, pillars={self.pillars})"


class QuantoTermStructure(YieldTermStructure):
    r"""
    Dividend-yield curve of an asset quoted in a foreign currency but paid in
    the domestic (quanto) currency.

    With the zero rates of the asset's dividend curve q, the domestic curve r,
    the asset's own (foreign) rate curve r_f, the asset volatility at `strike`
    sigma_S and the FX volatility at `fx_atm_level` sigma_X:

        q_quanto(t) = q(t) + r(t) - r_f(t) + rho * sigma_S(t) * sigma_X(t)

    Using q_quanto as dividend curve and r as rate curve gives the asset's
    forward measured in the quanto currency. Reference date and day counter
    are those of the dividend curve.
    """

    def __init__(
        self,
        dividend: Handle[YieldCurve],
        riskfree: Handle[YieldCurve],
        foreign_riskfree: Handle[YieldCurve],
        underlying_volatility: Handle[BlackVolSurface],
        strike: float,
        fx_volatility: Handle[BlackVolSurface],
        fx_atm_level: float,
        correlation: float,
    ) -> None:
        super().__init__(
            calendar=getattr(dividend(), "calendar", None),
            day_counter=getattr(dividend(), "day_counter", None),
        )
        self._dividend = dividend
        self._riskfree = riskfree
        self._foreign_riskfree = foreign_riskfree
        self._underlying_volatility = underlying_volatility
        self._fx_volatility = fx_volatility
        self.strike = strike
        self.fx_atm_level = fx_atm_level
        self.correlation = correlation
        for handle in (dividend, riskfree, foreign_riskfree, underlying_volatility, fx_volatility):
            self.register_with(handle)

    def reference_date(self) -> date:
        return self._dividend().reference_date()

    def _zero_rate(self, t: float) -> float:
        return (
            self._dividend().zero_rate(t)
            + self._riskfree().zero_rate(t)
            - self._foreign_riskfree().zero_rate(t)
            + self.correlation
            * self._underlying_volatility().black_vol(t, self.strike)
            * self._fx_volatility().black_vol(t, self.fx_atm_level)
        )
