"""
Generic processing over the closed set of payoff kinds.

Code that walks a leg and needs to treat some payoff shapes specially
dispatches on `payoff_kind` (or matches on the classes, as below) instead of
probing each cash flow with isinstance chains.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from indexflow.cashflows.base import CashFlow
from indexflow.cashflows.equity import EquityCashFlow
from indexflow.cashflows.indexed import IndexedCashFlow
from indexflow.cashflows.inflation import ZeroInflationCashFlow


class PayoffKind(Enum):
    FIXED = "fixed"
    INDEXED = "indexed"
    EQUITY = "equity"
    ZERO_INFLATION = "zero_inflation"


def payoff_kind(cash_flow: CashFlow) -> PayoffKind:
    # Most specific classes first.
    match cash_flow:
        case ZeroInflationCashFlow():
            return PayoffKind.ZERO_INFLATION
        case EquityCashFlow():
            return PayoffKind.EQUITY
        case IndexedCashFlow():
            return PayoffKind.INDEXED
        case CashFlow():
            return PayoffKind.FIXED
        case _:
            raise TypeError(f"not a cash flow: {cash_flow!r}")


def cashflow_summary(cash_flow: CashFlow, with_amount: bool = True) -> dict[str, Any]:
    """
    Flat description of a cash flow, with the fields relevant to its kind.

    Amount evaluation errors propagate; pass `with_amount=False` to describe
    cash flows whose market data is not available yet.
    """
    summary: dict[str, Any] = {
        "kind": payoff_kind(cash_flow).value,
        "date": cash_flow.date(),
    }
    match cash_flow:
        case ZeroInflationCashFlow():
            summary.update(_indexed_fields(cash_flow))
            summary.update(
                start_date=cash_flow.start_date,
                end_date=cash_flow.end_date,
                observation_lag=str(cash_flow.observation_lag),
                interpolation=cash_flow.observation_interpolation.value,
            )
        case EquityCashFlow():
            summary.update(_indexed_fields(cash_flow))
            pricer = cash_flow.pricer
            summary["pricer"] = type(pricer).__name__ if pricer is not None else None
        case IndexedCashFlow():
            summary.update(_indexed_fields(cash_flow))
    if with_amount:
        summary["amount"] = cash_flow.amount()
    return summary


def leg_summary(leg: Iterable[CashFlow], with_amount: bool = True) -> list[dict[str, Any]]:
    return [cashflow_summary(cf, with_amount) for cf in leg]


def _indexed_fields(cash_flow: IndexedCashFlow) -> dict[str, Any]:
    return {
        "notional": cash_flow.notional,
        "index": cash_flow.index.name,
        "base_date": cash_flow.base_date,
        "fixing_date": cash_flow.fixing_date,
        "growth_only": cash_flow.growth_only,
    }
