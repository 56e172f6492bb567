"""
Zero-coupon inflation index and the lagged, interpolated fixing lookup.

Inflation fixings are published once per period (monthly for most CPIs) and
some time after the period ends. A contract therefore observes the index
`observation_lag` before its own dates and, with linear interpolation, blends
two consecutive publications according to where the contractual date falls
inside its (unlagged) period.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from enum import Enum

from dateutil.relativedelta import relativedelta

from indexflow.config import Settings
from indexflow.dates import Frequency, Period, TimeUnit
from indexflow.errors import MissingFixingError, UnboundHandleError
from indexflow.handles import Handle
from indexflow.indexes.base import Index
from indexflow.interfaces import ZeroInflationCurve

logger = logging.getLogger(__name__)


class CPIInterpolation(Enum):
    AS_INDEX = "as_index"
    FLAT = "flat"
    LINEAR = "linear"


def inflation_period(d: date, frequency: Frequency) -> tuple[date, date]:
    """First and last day of the publication period containing `d`."""
    months = 12 // frequency.value
    first_month = ((d.month - 1) // months) * months + 1
    start = date(d.year, first_month, 1)
    end = start + relativedelta(months=months) - timedelta(days=1)
    return start, end


class ZeroInflationIndex(Index):
    """
    Price index (CPI, HICP, ...) with one fixing per publication period.

    Fixings are stored against the first day of their period. Periods that
    should already be published (given `availability_lag`) must have a stored
    fixing; later ones are forecast from the zero inflation curve as
    `I(base) * (1 + z)^t`.
    """

    def __init__(
        self,
        name: str,
        frequency: Frequency = Frequency.MONTHLY,
        availability_lag: Period = Period(1, TimeUnit.MONTHS),
        zero_inflation: Handle[ZeroInflationCurve] | None = None,
        currency: str | None = None,
    ) -> None:
        super().__init__(name)
        self.frequency = frequency
        self.availability_lag = availability_lag
        self.currency = currency
        self._zero_inflation = (
            zero_inflation if zero_inflation is not None else Handle(name="zero inflation")
        )
        self.register_with(self._zero_inflation)

    def zero_inflation_term_structure(self) -> Handle[ZeroInflationCurve]:
        return self._zero_inflation

    def fixing(self, d: date, forecast_todays_fixing: bool = False) -> float:
        """
        Stored fixing of the period containing `d`, or a forecast for periods
        not published yet. With `forecast_todays_fixing`, the period containing
        the evaluation date is forecast even when a fixing is stored for it.
        """
        if not self.is_valid_fixing_date(d):
            raise ValueError(f"Fixing date {d} is not valid for {self.name}")
        start, end = inflation_period(d, self.frequency)
        today = Settings.instance().today()
        if forecast_todays_fixing and start <= today <= end:
            return self.forecast_fixing(d)
        stored = self.past_fixing(start)
        if stored is not None:
            return stored
        if not self.needs_forecast(start):
            raise MissingFixingError(f"Missing {self.name} fixing for {start}")
        return self.forecast_fixing(d)

    def needs_forecast(self, d: date) -> bool:
        """Whether the period starting at or containing `d` cannot be published yet."""
        start = inflation_period(d, self.frequency)[0]
        today = Settings.instance().today()
        last_known = inflation_period(today - self.availability_lag, self.frequency)[0] - timedelta(days=1)
        if start <= last_known:
            return False
        if start > today:
            return True
        return self.past_fixing(start) is None

    def forecast_fixing(self, d: date) -> float:
        if self._zero_inflation.empty():
            raise UnboundHandleError(f"no zero inflation term structure set to {self.name}")
        curve = self._zero_inflation()
        start = inflation_period(d, self.frequency)[0]
        base = curve.base_date()
        if self.needs_forecast(base):
            raise MissingFixingError(f"{self.name} index fixing at base date {base} is not available")
        base_fixing = self.fixing(base)
        t = curve.day_counter.year_fraction(base, start)
        return base_fixing * (1.0 + curve.zero_rate(start)) ** t

    def _storage_date(self, d: date) -> date:
        return inflation_period(d, self.frequency)[0]


def lagged_fixing(
    index: ZeroInflationIndex,
    d: date,
    observation_lag: Period,
    interpolation: CPIInterpolation,
) -> float:
    """
    Index value observed for the contractual date `d`.

    Flat (and as-index) reads the period containing `d - observation_lag`.
    Linear interpolates between that period's fixing and the next one, with
    weight given by the position of `d` in its own period; on a period start
    the first fixing is returned as is.
    """
    fixing_period = inflation_period(d - observation_lag, index.frequency)
    if interpolation in (CPIInterpolation.AS_INDEX, CPIInterpolation.FLAT):
        value = index.fixing(fixing_period[0])
        logger.debug("%s lagged fixing for %s (flat): %s", index.name, d, value)
        return value

    interpolation_period = inflation_period(d, index.frequency)
    i0 = index.fixing(fixing_period[0])
    if d == interpolation_period[0]:
        return i0
    i1 = index.fixing(fixing_period[1] + timedelta(days=1))
    elapsed = (d - interpolation_period[0]).days
    length = (interpolation_period[1] + timedelta(days=1) - interpolation_period[0]).days
    value = i0 + (i1 - i0) * elapsed / length
    logger.debug("%s lagged fixing for %s (linear %s/%s): %s", index.name, d, elapsed, length, value)
    return value
