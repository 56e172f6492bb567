"""
Protocol-based interfaces for the market data the valuation core consumes.

Using typing.Protocol enables structural subtyping: any curve, surface or
calendar implementing these methods can be plugged in without inheriting from
the classes shipped here. The core only *queries* market data; how a curve or
surface was built is none of its business.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, Union, runtime_checkable

DateOrTime = Union[date, float]


@runtime_checkable
class Quote(Protocol):
    """A single observable market value (spot, correlation, flat rate)."""

    def value(self) -> float:
        ...

    def is_valid(self) -> bool:
        ...


@runtime_checkable
class DayCounter(Protocol):
    def year_fraction(self, start: date, end: date) -> float:
        ...


@runtime_checkable
class Calendar(Protocol):
    """Business-day predicate; holiday tables live outside this package."""

    def is_business_day(self, d: date) -> bool:
        ...

    def adjust(self, d: date) -> date:
        ...


@runtime_checkable
class YieldCurve(Protocol):
    """Query side of a yield term structure.

    Dates or times (year fractions from the reference date) are accepted.
    """

    def reference_date(self) -> date:
        ...

    def discount(self, x: DateOrTime) -> float:
        ...

    def zero_rate(self, x: DateOrTime) -> float:
        """Continuously compounded zero rate."""
        ...


@runtime_checkable
class BlackVolSurface(Protocol):
    """Query side of a Black volatility term structure."""

    def reference_date(self) -> date:
        ...

    def black_vol(self, x: DateOrTime, strike: float) -> float:
        ...


@runtime_checkable
class ZeroInflationCurve(Protocol):
    """Query side of a zero-coupon inflation term structure.

    `base_date()` is the period whose fixing anchors the forecast;
    `zero_rate(d)` is the annually compounded zero inflation rate to `d`.
    """

    day_counter: DayCounter

    def base_date(self) -> date:
        ...

    def zero_rate(self, d: date) -> float:
        ...
