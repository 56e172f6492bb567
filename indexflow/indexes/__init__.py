"""Indexes and their fixings."""

from indexflow.indexes.base import FixingHistory, Index, IndexManager
from indexflow.indexes.equity import EquityIndex
from indexflow.indexes.inflation import (
    CPIInterpolation,
    ZeroInflationIndex,
    inflation_period,
    lagged_fixing,
)

__all__ = [
    "CPIInterpolation",
    "EquityIndex",
    "FixingHistory",
    "Index",
    "IndexManager",
    "ZeroInflationIndex",
    "inflation_period",
    "lagged_fixing",
]
