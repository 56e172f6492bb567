"""Cash flows: payment entities whose amounts may depend on market data."""

from indexflow.cashflows.base import CashFlow, Leg, SimpleCashFlow
from indexflow.cashflows.equity import EquityCashFlow, set_coupon_pricer
from indexflow.cashflows.indexed import IndexedCashFlow
from indexflow.cashflows.inflation import ZeroInflationCashFlow
from indexflow.cashflows.processing import (
    PayoffKind,
    cashflow_summary,
    leg_summary,
    payoff_kind,
)

__all__ = [
    "CashFlow",
    "EquityCashFlow",
    "IndexedCashFlow",
    "Leg",
    "PayoffKind",
    "SimpleCashFlow",
    "ZeroInflationCashFlow",
    "cashflow_summary",
    "leg_summary",
    "payoff_kind",
    "set_coupon_pricer",
]
