"""Base pricer abstract class for equity cash flows."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from indexflow.observable import Observable, Observer

if TYPE_CHECKING:
    from indexflow.cashflows.equity import EquityCashFlow


class EquityCashFlowPricer(Observable, Observer, ABC):
    """
    Valuation strategy attached to equity cash flows.

    The contract is two-step so that one pricer can serve every cash flow of a
    leg without being rebuilt:

    - `initialize(cash_flow)` binds the pricer to a cash flow, reading and
      validating its dates, flag and index (and the pricer's market data);
    - `price()` returns the dimensionless multiplier for the cash flow last
      bound. It is only meaningful after `initialize()`; implementations raise
      PricerNotInitializedError otherwise.

    Pricers observe their market data and forward notifications to the cash
    flows they are attached to.
    """

    @abstractmethod
    def initialize(self, cash_flow: EquityCashFlow) -> None:
        ...

    @abstractmethod
    def price(self) -> float:
        ...

    def update(self) -> None:
        self.notify_observers()
