"""Equity-linked cash flow with a pluggable pricer."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import TYPE_CHECKING

from indexflow.cashflows.base import CashFlow
from indexflow.cashflows.indexed import IndexedCashFlow
from indexflow.indexes.equity import EquityIndex

if TYPE_CHECKING:
    from indexflow.pricers.base import EquityCashFlowPricer

logger = logging.getLogger(__name__)


class EquityCashFlow(IndexedCashFlow):
    """
    Indexed cash flow on an equity index.

    Without a pricer the amount is the plain index ratio read from the index's
    own fixings and forecasts. With a pricer, the pricer is bound to this cash
    flow and returns the multiplier (e.g. quanto-adjusted) applied to the
    notional. One pricer may serve every cash flow of a leg.
    """

    def __init__(
        self,
        notional: float,
        index: EquityIndex,
        base_date: date,
        fixing_date: date,
        payment_date: date,
        growth_only: bool = False,
    ) -> None:
        super().__init__(notional, index, base_date, fixing_date, payment_date, growth_only)
        self._pricer: EquityCashFlowPricer | None = None

    @property
    def pricer(self) -> EquityCashFlowPricer | None:
        return self._pricer

    def set_pricer(self, pricer: EquityCashFlowPricer | None) -> None:
        """Attach `pricer` (or detach with None); always invalidates the amount."""
        if self._pricer is not None:
            self.unregister_with(self._pricer)
        self._pricer = pricer
        if pricer is not None:
            self.register_with(pricer)
        logger.debug("%r pricer set to %s", self, type(pricer).__name__ if pricer else None)
        self.update()

    def perform_calculations(self) -> None:
        if self._pricer is None:
            super().perform_calculations()
            return
        self._pricer.initialize(self)
        self._amount = self._notional * self._pricer.price()


def set_coupon_pricer(leg: Iterable[CashFlow], pricer: EquityCashFlowPricer | None) -> None:
    """Set `pricer` on every equity cash flow of `leg`; other payments are skipped."""
    for cash_flow in leg:
        if isinstance(cash_flow, EquityCashFlow):
            cash_flow.set_pricer(pricer)
