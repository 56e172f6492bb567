"""
Date helpers consumed by the valuation core.

Only the conventions the core itself needs live here: periods (for observation
lags), Actual/365 Fixed (for the synthetic flat curves) and a null calendar.
Holiday calendars and the wider family of day counters are provided by the
caller through the `Calendar`/`DayCounter` protocols in `indexflow.interfaces`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta


class TimeUnit(Enum):
    DAYS = "D"
    WEEKS = "W"
    MONTHS = "M"
    YEARS = "Y"


class Frequency(Enum):
    """Publication frequency of an index (value = periods per year)."""

    ANNUAL = 1
    SEMIANNUAL = 2
    QUARTERLY = 4
    MONTHLY = 12


_PERIOD_RE = re.compile(r"^\s*(-?\d+)\s*([DWMY])\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Period:
    """
    A length of calendar time such as 3M or 1Y.

    `date + Period` and `date - Period` use calendar arithmetic (month ends are
    clipped, e.g. 31 May - 3M = 28/29 Feb).
    """

    length: int
    unit: TimeUnit

    @classmethod
    def parse(cls, text: str) -> "Period":
        """Parse tenors like '3M', '1y', '10D'."""
        match = _PERIOD_RE.match(text)
        if match is None:
            raise ValueError(f"cannot parse period {text!r}")
        return cls(int(match.group(1)), TimeUnit(match.group(2).upper()))

    def as_relativedelta(self) -> relativedelta:
        if self.unit is TimeUnit.DAYS:
            return relativedelta(days=self.length)
        if self.unit is TimeUnit.WEEKS:
            return relativedelta(weeks=self.length)
        if self.unit is TimeUnit.MONTHS:
            return relativedelta(months=self.length)
        return relativedelta(years=self.length)

    def __neg__(self) -> "Period":
        return Period(-self.length, self.unit)

    def __radd__(self, other: date) -> date:
        if isinstance(other, date):
            return other + self.as_relativedelta()
        return NotImplemented

    def __rsub__(self, other: date) -> date:
        if isinstance(other, date):
            return other - self.as_relativedelta()
        return NotImplemented

    def __str__(self) -> str:
        return f"{self.length}{self.unit.value}"


class Actual365Fixed:
    """Actual/365 (Fixed) day count."""

    name = "Actual/365 (Fixed)"

    def day_count(self, start: date, end: date) -> int:
        return (end - start).days

    def year_fraction(self, start: date, end: date) -> float:
        return self.day_count(start, end) / 365.0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Actual365Fixed)

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return "Actual365Fixed()"


class NullCalendar:
    """Calendar with no holidays and no weekends."""

    name = "Null"

    def is_business_day(self, d: date) -> bool:
        return True

    def adjust(self, d: date) -> date:
        return d

    def advance(self, d: date, days: int) -> date:
        return d + timedelta(days=days)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NullCalendar)

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return "NullCalendar()"
