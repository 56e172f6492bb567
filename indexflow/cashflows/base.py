"""Cash flow base types (payment data only; amounts may come from market data)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TypeAlias

from indexflow.config import Settings
from indexflow.observable import Observable


class CashFlow(Observable, ABC):
    """A single payment: a date and an amount."""

    @abstractmethod
    def date(self) -> date:
        """Payment date."""
        ...

    @abstractmethod
    def amount(self) -> float:
        """Amount paid on `date()`, not discounted."""
        ...

    def has_occurred(self, ref_date: date | None = None, include_ref_date: bool = False) -> bool:
        """Whether the payment is in the past relative to `ref_date` (default: today)."""
        ref = ref_date if ref_date is not None else Settings.instance().today()
        paid = self.date()
        return paid < ref or (paid == ref and not include_ref_date)


class SimpleCashFlow(CashFlow):
    """Predetermined amount paid on a given date."""

    def __init__(self, amount: float, payment_date: date) -> None:
        self._amount = amount
        self._payment_date = payment_date

    def date(self) -> date:
        return self._payment_date

    def amount(self) -> float:
        return self._amount

    def __repr__(self) -> str:
        return f"SimpleCashFlow({self._amount!r}, {self._payment_date})"


# Ordered sequence of payments of one leg.
Leg: TypeAlias = list[CashFlow]
