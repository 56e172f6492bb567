"""
Global valuation settings.

The evaluation date is observable: floating term structures and indexes
register with it, so moving "today" invalidates every cached amount that
depended on it. Defaults are read from the environment:

- INDEXFLOW_EVALUATION_DATE: ISO date (YYYY-MM-DD); today when unset.
- INDEXFLOW_ENFORCE_TODAYS_HISTORIC_FIXINGS: "1"/"true" to require a stored
  fixing for today's date instead of forecasting it.
"""

from __future__ import annotations

import os
from datetime import date

from indexflow.observable import ObservableValue

_TRUE = {"1", "true", "yes", "on"}


def _env_evaluation_date() -> date:
    raw = os.environ.get("INDEXFLOW_EVALUATION_DATE", "")
    if not raw:
        return date.today()
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValueError(f"INDEXFLOW_EVALUATION_DATE is not an ISO date: {raw!r}") from exc


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


class Settings:
    """Process-wide settings (singleton; use `Settings.instance()`)."""

    _instance: "Settings | None" = None

    def __init__(self) -> None:
        self.evaluation_date: ObservableValue[date] = ObservableValue(_env_evaluation_date())
        self.enforce_todays_historic_fixings: bool = _env_flag(
            "INDEXFLOW_ENFORCE_TODAYS_HISTORIC_FIXINGS"
        )

    @classmethod
    def instance(cls) -> "Settings":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def today(self) -> date:
        return self.evaluation_date.value

    def set_evaluation_date(self, d: date) -> None:
        self.evaluation_date.set(d)


class SavedSettings:
    """Context manager restoring the settings it found on entry."""

    def __enter__(self) -> Settings:
        settings = Settings.instance()
        self._evaluation_date = settings.today()
        self._enforce = settings.enforce_todays_historic_fixings
        return settings

    def __exit__(self, *exc_info: object) -> None:
        settings = Settings.instance()
        settings.set_evaluation_date(self._evaluation_date)
        settings.enforce_todays_historic_fixings = self._enforce
