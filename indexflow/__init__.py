"""Indexed cash flows, pricers and the market-data notification graph."""

import logging

from indexflow.cashflows import (
    CashFlow,
    EquityCashFlow,
    IndexedCashFlow,
    Leg,
    PayoffKind,
    SimpleCashFlow,
    ZeroInflationCashFlow,
    cashflow_summary,
    leg_summary,
    payoff_kind,
    set_coupon_pricer,
)
from indexflow.config import SavedSettings, Settings
from indexflow.curves import FlatForward, QuantoTermStructure, YieldTermStructure, ZeroRateCurve
from indexflow.dates import Actual365Fixed, Frequency, NullCalendar, Period, TimeUnit
from indexflow.errors import (
    IndexTypeError,
    InvalidDateOrderError,
    MissingFixingError,
    PricerNotInitializedError,
    PricingError,
    ReferenceDateMismatchError,
    UnboundHandleError,
)
from indexflow.handles import Handle, RelinkableHandle
from indexflow.indexes import (
    CPIInterpolation,
    EquityIndex,
    Index,
    IndexManager,
    ZeroInflationIndex,
    inflation_period,
    lagged_fixing,
)
from indexflow.interfaces import BlackVolSurface, Calendar, Quote, YieldCurve, ZeroInflationCurve
from indexflow.observable import (
    LazyObject,
    NotificationRegistry,
    Observable,
    ObservableValue,
    Observer,
    default_registry,
)
from indexflow.pricers import EquityCashFlowPricer, EquityQuantoCashFlowPricer
from indexflow.quotes import SimpleQuote
from indexflow.volatility import BlackConstantVol, BlackVolTermStructure

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Actual365Fixed",
    "BlackConstantVol",
    "BlackVolSurface",
    "BlackVolTermStructure",
    "CPIInterpolation",
    "Calendar",
    "CashFlow",
    "EquityCashFlow",
    "EquityCashFlowPricer",
    "EquityIndex",
    "EquityQuantoCashFlowPricer",
    "FlatForward",
    "Frequency",
    "Handle",
    "Index",
    "IndexManager",
    "IndexTypeError",
    "IndexedCashFlow",
    "InvalidDateOrderError",
    "LazyObject",
    "Leg",
    "MissingFixingError",
    "NotificationRegistry",
    "NullCalendar",
    "Observable",
    "ObservableValue",
    "Observer",
    "PayoffKind",
    "Period",
    "PricerNotInitializedError",
    "PricingError",
    "QuantoTermStructure",
    "Quote",
    "ReferenceDateMismatchError",
    "RelinkableHandle",
    "SavedSettings",
    "Settings",
    "SimpleCashFlow",
    "SimpleQuote",
    "TimeUnit",
    "UnboundHandleError",
    "YieldCurve",
    "YieldTermStructure",
    "ZeroInflationCashFlow",
    "ZeroInflationCurve",
    "ZeroInflationIndex",
    "ZeroRateCurve",
    "cashflow_summary",
    "default_registry",
    "inflation_period",
    "lagged_fixing",
    "leg_summary",
    "payoff_kind",
    "set_coupon_pricer",
]
