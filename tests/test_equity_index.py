"""Tests for EquityIndex fixings and forecasts."""

import math
from datetime import date, timedelta

import pytest

from indexflow.curves import FlatForward
from indexflow.errors import InvalidDateOrderError, MissingFixingError, UnboundHandleError
from indexflow.handles import Handle
from indexflow.indexes import EquityIndex, IndexManager
from indexflow.observable import Observer
from indexflow.quotes import SimpleQuote


class Counter(Observer):
    def __init__(self) -> None:
        self.count = 0

    def update(self) -> None:
        self.count += 1


def _index(today, spot=100.0, r=0.03, q=0.01) -> EquityIndex:
    return EquityIndex(
        "SPX",
        currency="USD",
        interest=Handle(FlatForward(r, reference_date=today)),
        dividend=Handle(FlatForward(q, reference_date=today)) if q is not None else None,
        spot=Handle(SimpleQuote(spot)) if spot is not None else None,
    )


def test_forecast_uses_cost_of_carry(today) -> None:
    """I(d) = S * D_div(d) / D_int(d)."""
    index = _index(today)
    one_year = today + timedelta(days=365)
    expected = 100.0 * math.exp(-0.01) / math.exp(-0.03)
    assert index.fixing(one_year) == pytest.approx(expected)


def test_missing_dividend_means_no_dividends(today) -> None:
    index = _index(today, q=None)
    one_year = today + timedelta(days=365)
    assert index.fixing(one_year) == pytest.approx(100.0 * math.exp(0.03))


def test_past_fixing_required(today) -> None:
    index = _index(today)
    yesterday = today - timedelta(days=1)
    with pytest.raises(MissingFixingError, match="Missing SPX fixing"):
        index.fixing(yesterday)
    index.add_fixing(yesterday, 99.0)
    assert index.fixing(yesterday) == 99.0


def test_todays_stored_fixing_wins_over_forecast(today) -> None:
    index = _index(today, spot=101.0)
    assert index.fixing(today) == pytest.approx(101.0)
    index.add_fixing(today, 100.0)
    assert index.fixing(today) == 100.0
    assert index.fixing(today, forecast_todays_fixing=True) == pytest.approx(101.0)


def test_enforced_todays_fixing(settings, today) -> None:
    settings.enforce_todays_historic_fixings = True
    index = _index(today)
    with pytest.raises(MissingFixingError):
        index.fixing(today)


def test_forecast_without_spot_uses_stored_fixing(today) -> None:
    index = _index(today, spot=None, q=0.0, r=0.0)
    one_year = today + timedelta(days=365)
    with pytest.raises(MissingFixingError, match="missing both spot"):
        index.fixing(one_year)
    index.add_fixing(today, 95.0)
    assert index.fixing(one_year) == pytest.approx(95.0)


def test_forecast_without_interest_curve_raises(today) -> None:
    index = EquityIndex("SPX", spot=Handle(SimpleQuote(100.0)))
    with pytest.raises(UnboundHandleError, match="null interest rate term structure"):
        index.fixing(today + timedelta(days=10))


def test_forecast_before_curve_reference_raises(settings, today) -> None:
    index = EquityIndex(
        "SPX",
        interest=Handle(FlatForward(0.0, reference_date=today + timedelta(days=5))),
        spot=Handle(SimpleQuote(100.0)),
    )
    with pytest.raises(InvalidDateOrderError):
        index.fixing(today + timedelta(days=1))


def test_duplicated_fixing_rejected_unless_forced(today) -> None:
    index = _index(today)
    d = today - timedelta(days=3)
    index.add_fixing(d, 98.0)
    index.add_fixing(d, 98.0)
    with pytest.raises(ValueError, match="duplicated fixing"):
        index.add_fixing(d, 97.0)
    index.add_fixing(d, 97.0, force_overwrite=True)
    assert index.past_fixing(d) == 97.0


def test_fixings_shared_by_name(today) -> None:
    """Fixings live in the IndexManager under the (case-insensitive) name."""
    index = _index(today)
    d = today - timedelta(days=2)
    index.add_fixing(d, 98.5)
    other = EquityIndex("spx")
    assert other.past_fixing(d) == 98.5
    assert IndexManager.instance().has_history("SPX")
    assert index.time_series() == {d: 98.5}


def test_clone_replaces_market_data_and_keeps_fixings(today) -> None:
    index = _index(today)
    index.add_fixing(today - timedelta(days=1), 99.0)
    new_interest = Handle(FlatForward(0.05, reference_date=today))
    new_dividend = Handle(FlatForward(0.0, reference_date=today))
    clone = index.clone(new_interest, new_dividend, index.spot())
    assert clone.name == index.name
    assert clone.currency == "USD"
    assert clone.equity_interest_rate_curve() is new_interest
    assert clone.equity_dividend_curve() is new_dividend
    assert clone.spot() is index.spot()
    assert clone.past_fixing(today - timedelta(days=1)) == 99.0
    one_year = today + timedelta(days=365)
    assert clone.fixing(one_year) == pytest.approx(100.0 * math.exp(0.05))


def test_index_notifies_on_new_fixing_and_market_moves(today) -> None:
    spot = SimpleQuote(100.0)
    index = EquityIndex(
        "SPX", interest=Handle(FlatForward(0.0, reference_date=today)), spot=Handle(spot)
    )
    counter = Counter()
    counter.register_with(index)
    index.add_fixing(today - timedelta(days=1), 99.0)
    assert counter.count == 1
    spot.set_value(101.0)
    assert counter.count == 2


def test_clear_fixings(today) -> None:
    index = _index(today)
    index.add_fixing(date(2023, 1, 10), 97.0)
    index.clear_fixings()
    assert index.time_series() == {}
