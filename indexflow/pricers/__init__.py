"""Pricer implementations attachable to equity cash flows."""

from indexflow.pricers.base import EquityCashFlowPricer
from indexflow.pricers.quanto import EquityQuantoCashFlowPricer

__all__ = [
    "EquityCashFlowPricer",
    "EquityQuantoCashFlowPricer",
]
