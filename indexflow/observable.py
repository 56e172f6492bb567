"""
Notification graph between market data and the values derived from it.

Subscriptions live in a single owning registry keyed by stable node ids rather
than in links stored on the nodes themselves:

- An **observable** (quote, curve, handle, index, pricer, cash flow) calls
  `notify_observers()` whenever its state changes.
- An **observer** implements `update()`; most observers only mark a cached
  value stale and forward the notification (`LazyObject`), so diamond-shaped
  graphs never trigger redundant recomputation.
- Observers are held through weak references: when either side of a relation
  is garbage-collected the registry drops it, whatever the teardown order.

Notification order is unspecified; no observer may depend on it.
"""

from __future__ import annotations

import itertools
import logging
import weakref
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_node_ids = itertools.count(1)


class GraphNode:
    """Anything that can appear in the notification graph gets a stable id."""

    @property
    def node_id(self) -> int:
        try:
            return self._node_id
        except AttributeError:
            self._node_id = next(_node_ids)
            return self._node_id


class NotificationRegistry:
    """
    Owning registry of observable -> observer relations.

    `_observers[observable_id]` maps observer ids to weak references;
    `_subscriptions[observer_id]` is the reverse index used for bulk
    unsubscription.
    """

    def __init__(self) -> None:
        self._observers: dict[int, dict[int, weakref.ref[Observer]]] = defaultdict(dict)
        self._subscriptions: dict[int, set[int]] = defaultdict(set)
        self._finalizers: dict[int, weakref.finalize] = {}

    def subscribe(self, observable: Observable, observer: Observer) -> None:
        """Create the relation. Subscribing twice is a no-op."""
        obs_id, sub_id = observable.node_id, observer.node_id
        if sub_id in self._observers[obs_id]:
            return
        self._observers[obs_id][sub_id] = weakref.ref(observer, self._purger(obs_id, sub_id))
        self._subscriptions[sub_id].add(obs_id)
        self._track(observable)
        self._track(observer)
        logger.debug("subscribe %s -> %s", _label(observable), _label(observer))

    def unsubscribe(self, observable: Observable, observer: Observer) -> None:
        """Remove the relation; absent relations are ignored."""
        self._drop(observable.node_id, observer.node_id)

    def unsubscribe_all(self, observer: Observer) -> None:
        for obs_id in list(self._subscriptions.get(observer.node_id, ())):
            self._drop(obs_id, observer.node_id)

    def notify(self, observable: Observable) -> None:
        """Call `update()` on every observer currently subscribed."""
        refs = list(self._observers.get(observable.node_id, {}).values())
        if refs:
            logger.debug("notify %s (%d observers)", _label(observable), len(refs))
        for ref in refs:
            observer = ref()
            if observer is not None:
                observer.update()

    def observers_of(self, observable: Observable) -> list[Observer]:
        refs = self._observers.get(observable.node_id, {}).values()
        return [o for o in (r() for r in refs) if o is not None]

    def is_subscribed(self, observable: Observable, observer: Observer) -> bool:
        return observer.node_id in self._observers.get(observable.node_id, {})

    def __len__(self) -> int:
        """Number of live relations."""
        return sum(len(subs) for subs in self._observers.values())

    def _drop(self, obs_id: int, sub_id: int) -> None:
        subs = self._observers.get(obs_id)
        if subs is not None:
            subs.pop(sub_id, None)
            if not subs:
                del self._observers[obs_id]
        targets = self._subscriptions.get(sub_id)
        if targets is not None:
            targets.discard(obs_id)
            if not targets:
                del self._subscriptions[sub_id]

    def _purger(self, obs_id: int, sub_id: int):
        registry = weakref.ref(self)

        def purge(_ref: Any) -> None:
            reg = registry()
            if reg is not None:
                reg._drop(obs_id, sub_id)

        return purge

    def _track(self, node: GraphNode) -> None:
        # Drop every relation touching a node once it is collected.
        if node.node_id in self._finalizers:
            return
        self._finalizers[node.node_id] = weakref.finalize(node, self._forget, node.node_id)

    def _forget(self, node_id: int) -> None:
        self._finalizers.pop(node_id, None)
        for sub_id in list(self._observers.get(node_id, {})):
            self._drop(node_id, sub_id)
        for obs_id in list(self._subscriptions.get(node_id, ())):
            self._drop(obs_id, node_id)


def _label(node: GraphNode) -> str:
    return f"{type(node).__name__}#{node.node_id}"


_registry = NotificationRegistry()


def default_registry() -> NotificationRegistry:
    """Process-wide registry used by every Observable/Observer."""
    return _registry


class Observable(GraphNode):
    """Base for objects whose changes must reach dependent values."""

    def notify_observers(self) -> None:
        _registry.notify(self)


class Observer(GraphNode, ABC):
    """Base for objects that cache something derived from observables."""

    def register_with(self, observable: Any) -> None:
        """Subscribe to `observable`; `None` is accepted and ignored."""
        if observable is not None:
            _registry.subscribe(observable, self)

    def unregister_with(self, observable: Any) -> None:
        if observable is not None:
            _registry.unsubscribe(observable, self)

    def unregister_with_all(self) -> None:
        _registry.unsubscribe_all(self)

    @abstractmethod
    def update(self) -> None:
        """React to a change of one of the observed objects."""
        ...


class LazyObject(Observable, Observer):
    """
    Observer caching the result of `perform_calculations()`.

    A notification marks the cache stale and is forwarded to this object's own
    observers; the result is rebuilt on the next `calculate()`. A frozen object
    keeps its result and stays silent until unfrozen. The re-entrancy
    guard keeps cyclic graphs from looping.
    """

    def __init__(self) -> None:
        super().__init__()
        self._calculated = False
        self._frozen = False
        self._updating = False

    def update(self) -> None:
        if self._updating:
            return
        self._updating = True
        try:
            if not self._frozen:
                self._calculated = False
                self.notify_observers()
        finally:
            self._updating = False

    def calculate(self) -> None:
        if self._calculated:
            return
        self._calculated = True
        try:
            self.perform_calculations()
        except Exception:
            self._calculated = False
            raise

    def recalculate(self) -> None:
        """Force a fresh calculation and tell observers about it."""
        was_frozen = self._frozen
        self._calculated = False
        self._frozen = False
        try:
            self.calculate()
        finally:
            self._frozen = was_frozen
        self.notify_observers()

    def freeze(self) -> None:
        """Keep the current result even when notified."""
        self._frozen = True

    def unfreeze(self) -> None:
        if self._frozen:
            self._frozen = False
            self._calculated = False
            self.notify_observers()

    @property
    def is_calculated(self) -> bool:
        return self._calculated

    @abstractmethod
    def perform_calculations(self) -> None:
        ...


class ObservableValue(Observable, Generic[T]):
    """A value box notifying its observers when the value changes."""

    def __init__(self, value: T) -> None:
        super().__init__()
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value != self._value:
            self._value = value
            self.notify_observers()

    def __repr__(self) -> str:
        return f"ObservableValue({self._value!r})"
