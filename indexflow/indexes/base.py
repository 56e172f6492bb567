"""
Index base class and the shared fixing store.

Fixings are stored per index *name* (case-insensitive) in `IndexManager`, so a
cloned index (e.g. the quanto-adjusted copy of an equity index) sees the same
history as the index it was cloned from. Each history is observable: adding a fixing reaches
every index of that name, and through them every cash flow observing them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date

from indexflow.config import Settings
from indexflow.dates import NullCalendar
from indexflow.errors import MissingFixingError
from indexflow.interfaces import Calendar
from indexflow.observable import Observable, Observer

logger = logging.getLogger(__name__)


class FixingHistory(Observable):
    """Past fixings of one index name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._values: dict[date, float] = {}

    def get(self, d: date) -> float | None:
        return self._values.get(d)

    def add(self, values: Iterable[tuple[date, float]], force_overwrite: bool = False) -> None:
        """Store fixings; a different value for a stored date needs `force_overwrite`."""
        pending = list(values)
        if not force_overwrite:
            clashes = [
                (d, v) for d, v in pending if d in self._values and self._values[d] != v
            ]
            if clashes:
                d, v = clashes[0]
                raise ValueError(
                    f"At least one duplicated fixing provided: {self.name} {d} "
                    f"({v} while {self._values[d]} value is already present)"
                )
        for d, v in pending:
            if d in self._values and self._values[d] != v:
                logger.warning("overwriting %s fixing for %s: %s -> %s", self.name, d, self._values[d], v)
            self._values[d] = v
        if pending:
            self.notify_observers()

    def clear(self) -> None:
        if self._values:
            self._values.clear()
            self.notify_observers()

    def as_dict(self) -> dict[date, float]:
        return dict(sorted(self._values.items()))

    def __len__(self) -> int:
        return len(self._values)


class IndexManager:
    """Process-wide store of fixing histories (singleton)."""

    _instance: "IndexManager | None" = None

    def __init__(self) -> None:
        self._histories: dict[str, FixingHistory] = {}

    @classmethod
    def instance(cls) -> "IndexManager":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def history(self, name: str) -> FixingHistory:
        key = name.upper()
        if key not in self._histories:
            self._histories[key] = FixingHistory(key)
        return self._histories[key]

    def has_history(self, name: str) -> bool:
        return len(self._histories.get(name.upper(), ())) > 0

    def histories(self) -> list[str]:
        return sorted(k for k, h in self._histories.items() if len(h))

    def clear_histories(self) -> None:
        for history in self._histories.values():
            history.clear()


class Index(Observable, Observer, ABC):
    """
    Something with fixings: stored ones for the past, forecast ones for the
    future. Subclasses implement `forecast_fixing`.
    """

    def __init__(self, name: str, fixing_calendar: Calendar | None = None) -> None:
        self._name = name
        self.fixing_calendar: Calendar = (
            fixing_calendar if fixing_calendar is not None else NullCalendar()
        )
        self.register_with(self._history())
        self.register_with(Settings.instance().evaluation_date)

    @property
    def name(self) -> str:
        return self._name

    def is_valid_fixing_date(self, d: date) -> bool:
        return self.fixing_calendar.is_business_day(d)

    def update(self) -> None:
        self.notify_observers()

    # stored fixings

    def add_fixing(self, d: date, value: float, force_overwrite: bool = False) -> None:
        self.add_fixings([(d, value)], force_overwrite)

    def add_fixings(self, fixings: Iterable[tuple[date, float]], force_overwrite: bool = False) -> None:
        pending = []
        for d, value in fixings:
            if not self.is_valid_fixing_date(d):
                raise ValueError(f"Fixing date {d} is not valid for {self.name}")
            pending.append((self._storage_date(d), float(value)))
        self._history().add(pending, force_overwrite)

    def past_fixing(self, d: date) -> float | None:
        return self._history().get(self._storage_date(d))

    def time_series(self) -> dict[date, float]:
        return self._history().as_dict()

    def clear_fixings(self) -> None:
        self._history().clear()

    # fixing lookup

    def fixing(self, d: date, forecast_todays_fixing: bool = False) -> float:
        """
        Past dates need a stored fixing. For today's date a stored fixing wins
        unless `forecast_todays_fixing` is set; without one the value is
        forecast (or required, under `enforce_todays_historic_fixings`).
        """
        if not self.is_valid_fixing_date(d):
            raise ValueError(f"Fixing date {d} is not valid for {self.name}")
        settings = Settings.instance()
        today = settings.today()
        if d < today or (d == today and settings.enforce_todays_historic_fixings):
            return self._required_past_fixing(d)
        if d == today and not forecast_todays_fixing:
            stored = self.past_fixing(d)
            if stored is not None:
                return stored
        return self.forecast_fixing(d)

    @abstractmethod
    def forecast_fixing(self, d: date) -> float:
        ...

    def _required_past_fixing(self, d: date) -> float:
        stored = self.past_fixing(d)
        if stored is None:
            raise MissingFixingError(f"Missing {self.name} fixing for {d}")
        return stored

    def _storage_date(self, d: date) -> date:
        return d

    def _history(self) -> FixingHistory:
        return IndexManager.instance().history(self._name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"
