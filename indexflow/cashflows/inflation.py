"""Zero-coupon inflation cash flow observed with a lag."""

from __future__ import annotations

from datetime import date

from indexflow.cashflows.indexed import IndexedCashFlow
from indexflow.dates import Period
from indexflow.indexes.inflation import CPIInterpolation, ZeroInflationIndex, lagged_fixing


class ZeroInflationCashFlow(IndexedCashFlow):
    """
    Pays `notional * I(end) / I(start)` (minus notional if growth-only), with
    both index values read through `lagged_fixing`.

    The inherited base/fixing dates are the lagged ones, `start - lag` and
    `end - lag`, kept for bookkeeping. The fixings themselves are looked up
    from the contractual `start_date`/`end_date`: `lagged_fixing` applies the
    lag on its own, so passing it the already lagged dates would read the
    wrong publication period.
    """

    def __init__(
        self,
        notional: float,
        index: ZeroInflationIndex,
        observation_interpolation: CPIInterpolation,
        start_date: date,
        end_date: date,
        observation_lag: Period,
        payment_date: date,
        growth_only: bool = False,
    ) -> None:
        super().__init__(
            notional,
            index,
            start_date - observation_lag,
            end_date - observation_lag,
            payment_date,
            growth_only,
        )
        self._zero_inflation_index = index
        self._interpolation = observation_interpolation
        self._start_date = start_date
        self._end_date = end_date
        self._observation_lag = observation_lag

    @property
    def zero_inflation_index(self) -> ZeroInflationIndex:
        return self._zero_inflation_index

    @property
    def observation_interpolation(self) -> CPIInterpolation:
        return self._interpolation

    @property
    def observation_lag(self) -> Period:
        return self._observation_lag

    @property
    def start_date(self) -> date:
        return self._start_date

    @property
    def end_date(self) -> date:
        return self._end_date

    def base_fixing(self) -> float:
        return lagged_fixing(
            self._zero_inflation_index, self._start_date, self._observation_lag, self._interpolation
        )

    def index_fixing(self) -> float:
        return lagged_fixing(
            self._zero_inflation_index, self._end_date, self._observation_lag, self._interpolation
        )
