"""Market quotes."""

from __future__ import annotations

import math

from indexflow.handles import Handle
from indexflow.interfaces import Quote
from indexflow.observable import Observable


class SimpleQuote(Observable):
    """Quote whose value is set by hand (correlations, spots, flat rates)."""

    def __init__(self, value: float | None = None) -> None:
        self._value = value

    def value(self) -> float:
        if self._value is None:
            raise ValueError("invalid SimpleQuote: no value set")
        return self._value

    def is_valid(self) -> bool:
        return self._value is not None

    def set_value(self, value: float | None) -> float:
        """Store `value`, notify on change and return the difference."""
        diff = 0.0
        if value is not None and self._value is not None:
            diff = value - self._value
        if value != self._value and not _both_nan(value, self._value):
            self._value = value
            self.notify_observers()
        return diff

    def reset(self) -> None:
        self.set_value(None)

    def __repr__(self) -> str:
        return f"SimpleQuote({self._value!r})"


def _both_nan(a: float | None, b: float | None) -> bool:
    return a is not None and b is not None and math.isnan(a) and math.isnan(b)


def quote_handle(value: float | SimpleQuote | Handle[Quote] | None, name: str = "") -> Handle[Quote]:
    """Wrap a number or a quote into a handle; handles pass through."""
    if isinstance(value, Handle):
        return value
    if isinstance(value, (int, float)):
        value = SimpleQuote(float(value))
    return Handle(value, name=name)
