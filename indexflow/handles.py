"""
Shared, relinkable indirection cells for market data.

A `Handle` is what curves, pricers and indexes hold instead of the market
object itself. Several consumers share one handle; a `RelinkableHandle` lets
the owner swap the target underneath them. Observers register with the handle,
which forwards its target's notifications and notifies on relinking too, so
"the curve moved" and "a different curve was plugged in" travel the same path.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from indexflow.errors import UnboundHandleError
from indexflow.observable import Observable, Observer

T = TypeVar("T")


class Handle(Observable, Observer, Generic[T]):
    """Read-only view of a (possibly empty) market-data link."""

    def __init__(self, target: T | None = None, name: str = "") -> None:
        self._target: T | None = None
        self.name = name
        self._link(target)

    def empty(self) -> bool:
        return self._target is None

    def current_link(self) -> T:
        """Return the target; raises UnboundHandleError on an empty handle."""
        if self._target is None:
            label = f" {self.name!r}" if self.name else ""
            raise UnboundHandleError(f"empty Handle{label} cannot be dereferenced")
        return self._target

    def __call__(self) -> T:
        return self.current_link()

    def update(self) -> None:
        self.notify_observers()

    def _link(self, target: T | None) -> None:
        if target is self._target:
            return
        if isinstance(self._target, Observable):
            self.unregister_with(self._target)
        self._target = target
        if isinstance(target, Observable):
            self.register_with(target)
        self.notify_observers()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._target!r})"


class RelinkableHandle(Handle[T]):
    """Handle whose target can be rebound after construction."""

    def link_to(self, target: T | None) -> None:
        """Point every holder of this handle to `target` and notify them."""
        self._link(target)
