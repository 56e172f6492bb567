"""Shared fixtures: fixed evaluation date and clean fixing histories per test."""

from datetime import date

import pytest

from indexflow.config import SavedSettings
from indexflow.indexes import IndexManager

TODAY = date(2023, 1, 16)


@pytest.fixture(autouse=True)
def settings():
    with SavedSettings() as s:
        s.set_evaluation_date(TODAY)
        s.enforce_todays_historic_fixings = False
        yield s
    IndexManager.instance().clear_histories()


@pytest.fixture
def today() -> date:
    return TODAY
