"""Tests for IndexedCashFlow / EquityCashFlow and pricer attachment."""

import math
from datetime import date, timedelta

import pytest

from indexflow.cashflows import EquityCashFlow, IndexedCashFlow, SimpleCashFlow, set_coupon_pricer
from indexflow.curves import FlatForward
from indexflow.handles import Handle, RelinkableHandle
from indexflow.indexes import EquityIndex
from indexflow.observable import Observer, default_registry
from indexflow.pricers import EquityQuantoCashFlowPricer
from indexflow.quotes import SimpleQuote
from indexflow.volatility import BlackConstantVol

BASE = date(2022, 1, 14)
FIXING = date(2022, 12, 30)
PAYMENT = date(2023, 1, 5)


class Counter(Observer):
    def __init__(self) -> None:
        self.count = 0

    def update(self) -> None:
        self.count += 1


def _index(today) -> EquityIndex:
    index = EquityIndex(
        "STOXX",
        currency="EUR",
        interest=Handle(FlatForward(0.02, reference_date=today)),
        spot=Handle(SimpleQuote(4200.0)),
    )
    index.add_fixing(BASE, 4000.0)
    index.add_fixing(FIXING, 4300.0)
    return index


def _pricer(today, rho: float = -0.4):
    correlation = SimpleQuote(rho)
    pricer = EquityQuantoCashFlowPricer(
        Handle(FlatForward(0.05, reference_date=today)),
        Handle(BlackConstantVol(0.25, reference_date=today)),
        Handle(BlackConstantVol(0.1, reference_date=today)),
        Handle(correlation),
    )
    return pricer, correlation


@pytest.mark.parametrize("growth_only, adjustment", [(False, 0.0), (True, 1.0)])
def test_default_amount_is_index_ratio(today, growth_only, adjustment) -> None:
    """notional * (I(fixing)/I(base) - adjustment) with no pricer attached."""
    cf = EquityCashFlow(1_000_000.0, _index(today), BASE, FIXING, PAYMENT, growth_only)
    assert cf.amount() == pytest.approx(1_000_000.0 * (4300.0 / 4000.0 - adjustment))


def test_indexed_cash_flow_forecasts_future_fixing(today) -> None:
    index = _index(today)
    future = today + timedelta(days=365)
    cf = IndexedCashFlow(100.0, index, BASE, future, future)
    assert cf.amount() == pytest.approx(100.0 * (4200.0 / math.exp(-0.02)) / 4000.0, rel=1e-12)


def test_identity_fields(today) -> None:
    index = _index(today)
    cf = EquityCashFlow(10.0, index, BASE, FIXING, PAYMENT, True)
    cf.amount()
    assert cf.notional == 10.0
    assert cf.index is index
    assert cf.base_date == BASE
    assert cf.fixing_date == FIXING
    assert cf.date() == PAYMENT
    assert cf.growth_only is True
    with pytest.raises(AttributeError):
        cf.notional = 20.0


def test_amount_cached_until_fixing_changes(today) -> None:
    index = _index(today)
    cf = EquityCashFlow(1.0, index, BASE, FIXING, PAYMENT)
    assert cf.amount() == pytest.approx(4300.0 / 4000.0)
    assert cf.is_calculated
    index.add_fixing(FIXING, 4400.0, force_overwrite=True)
    assert not cf.is_calculated
    assert cf.amount() == pytest.approx(4400.0 / 4000.0)


def test_set_pricer_fires_invalidation_immediately(today) -> None:
    """Observers hear about a new pricer even before any amount was computed."""
    cf = EquityCashFlow(1.0, _index(today), BASE, FIXING, PAYMENT)
    counter = Counter()
    counter.register_with(cf)
    pricer, _ = _pricer(today)
    cf.set_pricer(pricer)
    assert counter.count == 1
    cf.set_pricer(pricer)
    assert counter.count == 2
    assert cf.pricer is pricer


def test_detaching_pricer_restores_default_bit_for_bit(today) -> None:
    index = _index(today)
    future = today + timedelta(days=365)
    cf = EquityCashFlow(1.0, index, today - timedelta(days=2), future, future, True)
    index.add_fixing(today - timedelta(days=2), 4100.0)
    default = cf.amount()
    pricer, _ = _pricer(today)
    cf.set_pricer(pricer)
    assert cf.amount() != default
    cf.set_pricer(None)
    assert cf.pricer is None
    assert cf.amount() == default


def test_replacing_pricer_unregisters_old_one(today) -> None:
    """Market moves behind the old pricer no longer reach the cash flow."""
    cf = EquityCashFlow(1.0, _index(today), BASE, FIXING, PAYMENT)
    old, old_correlation = _pricer(today)
    new, new_correlation = _pricer(today)
    cf.set_pricer(old)
    cf.set_pricer(new)
    assert not default_registry().is_subscribed(old, cf)
    assert default_registry().is_subscribed(new, cf)

    counter = Counter()
    counter.register_with(cf)
    old_correlation.set_value(0.9)
    assert counter.count == 0
    new_correlation.set_value(0.9)
    assert counter.count == 1


def test_relinking_pricer_curve_invalidates_amount(today) -> None:
    index = _index(today)
    future = today + timedelta(days=365)
    cf = EquityCashFlow(1.0, index, today, future, future)
    index.add_fixing(today, 4200.0)
    equity_vol = RelinkableHandle(BlackConstantVol(0.25, reference_date=today))
    pricer = EquityQuantoCashFlowPricer(
        Handle(FlatForward(0.05, reference_date=today)),
        equity_vol,
        Handle(BlackConstantVol(0.1, reference_date=today)),
        Handle(SimpleQuote(-0.4)),
    )
    cf.set_pricer(pricer)
    before = cf.amount()
    # negative correlation: more equity vol means a higher quanto forward
    equity_vol.link_to(BlackConstantVol(0.35, reference_date=today))
    assert not cf.is_calculated
    assert cf.amount() > before


def test_set_coupon_pricer_skips_other_payments(today) -> None:
    index = _index(today)
    fixed = SimpleCashFlow(100.0, PAYMENT)
    plain = IndexedCashFlow(1.0, index, BASE, FIXING, PAYMENT)
    first = EquityCashFlow(1.0, index, BASE, FIXING, PAYMENT)
    second = EquityCashFlow(2.0, index, BASE, FIXING, PAYMENT)
    pricer, _ = _pricer(today)
    set_coupon_pricer([fixed, first, plain, second], pricer)
    assert first.pricer is pricer
    assert second.pricer is pricer
    assert not hasattr(plain, "pricer")
    assert fixed.amount() == 100.0


def test_set_coupon_pricer_none_detaches(today) -> None:
    index = _index(today)
    leg = [EquityCashFlow(1.0, index, BASE, FIXING, PAYMENT) for _ in range(3)]
    pricer, _ = _pricer(today)
    set_coupon_pricer(leg, pricer)
    set_coupon_pricer(leg, None)
    assert all(cf.pricer is None for cf in leg)


def test_has_occurred(today) -> None:
    """A payment on the reference date counts as paid unless include_ref_date is set."""
    cf = SimpleCashFlow(1.0, today)
    assert cf.has_occurred()
    assert not cf.has_occurred(include_ref_date=True)
    assert not cf.has_occurred(ref_date=today - timedelta(days=1))
    assert SimpleCashFlow(1.0, today - timedelta(days=1)).has_occurred()
