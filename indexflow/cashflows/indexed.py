"""Cash flow paying the performance of an index between two dates."""

from __future__ import annotations

from datetime import date

from indexflow.cashflows.base import CashFlow
from indexflow.indexes.base import Index
from indexflow.observable import LazyObject


class IndexedCashFlow(CashFlow, LazyObject):
    """
    Pays `notional * (I(fixing_date) / I(base_date))`, or the growth part
    `notional * (I(fixing_date) / I(base_date) - 1)` when `growth_only` is set.

    The index is shared, not owned: the cash flow observes it and caches its
    amount until the index (or anything upstream) notifies a change.
    """

    def __init__(
        self,
        notional: float,
        index: Index,
        base_date: date,
        fixing_date: date,
        payment_date: date,
        growth_only: bool = False,
    ) -> None:
        super().__init__()
        self._notional = notional
        self._index = index
        self._base_date = base_date
        self._fixing_date = fixing_date
        self._payment_date = payment_date
        self._growth_only = growth_only
        self._amount: float | None = None
        self.register_with(index)

    @property
    def notional(self) -> float:
        return self._notional

    @property
    def index(self) -> Index:
        return self._index

    @property
    def base_date(self) -> date:
        return self._base_date

    @property
    def fixing_date(self) -> date:
        return self._fixing_date

    @property
    def growth_only(self) -> bool:
        return self._growth_only

    def date(self) -> date:
        return self._payment_date

    def base_fixing(self) -> float:
        return self._index.fixing(self._base_date)

    def index_fixing(self) -> float:
        return self._index.fixing(self._fixing_date)

    def amount(self) -> float:
        self.calculate()
        return self._amount

    def perform_calculations(self) -> None:
        adjustment = 1.0 if self._growth_only else 0.0
        self._amount = self._notional * (self.index_fixing() / self.base_fixing() - adjustment)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(notional={self._notional!r}, index={self._index.name!r}, "
            f"base_date={self._base_date}, fixing_date={self._fixing_date}, "
            f"payment_date={self._payment_date}, growth_only={self._growth_only})"
        )
