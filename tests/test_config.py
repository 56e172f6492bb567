"""Tests for the environment-driven settings."""

from datetime import date

import pytest

from indexflow.config import SavedSettings, Settings
from indexflow.observable import Observer


class Counter(Observer):
    def __init__(self) -> None:
        self.count = 0

    def update(self) -> None:
        self.count += 1


def test_evaluation_date_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("INDEXFLOW_EVALUATION_DATE", "2024-02-29")
    assert Settings().today() == date(2024, 2, 29)


def test_evaluation_date_defaults_to_today(monkeypatch) -> None:
    monkeypatch.delenv("INDEXFLOW_EVALUATION_DATE", raising=False)
    assert Settings().today() == date.today()


def test_bad_evaluation_date_rejected(monkeypatch) -> None:
    monkeypatch.setenv("INDEXFLOW_EVALUATION_DATE", "29/02/2024")
    with pytest.raises(ValueError, match="not an ISO date"):
        Settings()


@pytest.mark.parametrize("raw, expected", [("1", True), ("TRUE", True), ("on", True), ("0", False), ("", False)])
def test_enforce_flag_from_environment(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("INDEXFLOW_ENFORCE_TODAYS_HISTORIC_FIXINGS", raw)
    assert Settings().enforce_todays_historic_fixings is expected


def test_enforce_flag_defaults_off(monkeypatch) -> None:
    monkeypatch.delenv("INDEXFLOW_ENFORCE_TODAYS_HISTORIC_FIXINGS", raising=False)
    assert Settings().enforce_todays_historic_fixings is False


def test_instance_is_shared() -> None:
    assert Settings.instance() is Settings.instance()


def test_moving_evaluation_date_notifies(settings) -> None:
    counter = Counter()
    counter.register_with(settings.evaluation_date)
    settings.set_evaluation_date(date(2023, 3, 1))
    assert counter.count == 1
    settings.set_evaluation_date(date(2023, 3, 1))
    assert counter.count == 1


def test_saved_settings_restore_on_exit(settings, today) -> None:
    with SavedSettings():
        settings.set_evaluation_date(date(2030, 1, 1))
        settings.enforce_todays_historic_fixings = True
    assert settings.today() == today
    assert settings.enforce_todays_historic_fixings is False


def test_saved_settings_restore_after_error(settings, today) -> None:
    with pytest.raises(RuntimeError):
        with SavedSettings():
            settings.set_evaluation_date(date(2030, 1, 1))
            raise RuntimeError("boom")
    assert settings.today() == today
