"""Live multi-dimension counters: one scalar counter per observed key."""

from __future__ import annotations

import threading
from typing import Any, Dict, FrozenSet, Hashable, Protocol

from keyed_metrics.counters.keys import display_name
from keyed_metrics.errors import InvalidArgument, UnsupportedOperation
from keyed_metrics.lib.logger import get_logger
from keyed_metrics.lib.metrics import METRICS, MetricsRegistry, Unit


logger = get_logger(__name__)


class Incrementable(Protocol):
    def increment(self, amount: int = 1) -> None: ...

    def value(self) -> int: ...


class CounterContext(Protocol):
    """Anything that can manufacture a scalar counter from a name and unit."""

    def counter(self, name: str, unit: Unit = Unit.COUNT) -> Incrementable: ...


class MultiDimensionCounter:
    """A named metric broken down by key.

    Backing scalar counters are created lazily, at most once per key, and
    are never removed. Reads of existing keys are plain dictionary lookups;
    the lock is only taken to insert a new key or to copy the key set.
    """

    def __init__(self, name: str, unit: Unit, context: CounterContext | None = None) -> None:
        if name is None:
            raise InvalidArgument("Invalid name: None")
        if unit is None:
            raise InvalidArgument("Invalid count unit: None")

        self._name = name
        self._unit = unit
        self._context = context if context is not None else METRICS
        self._lock = threading.Lock()
        self._counters: Dict[Hashable, Incrementable] = {}

    def increment(self, key: Hashable, amount: int = 1) -> None:
        if key is None:
            raise InvalidArgument("Invalid key: None")
        counter = self._counters.get(key)
        if counter is None:
            counter = self._get_or_create(key)
        counter.increment(amount)

    def _get_or_create(self, key: Hashable) -> Incrementable:
        with self._lock:
            counter = self._counters.get(key)
            if counter is None:
                counter_id = self._counter_id(key)
                counter = self._context.counter(counter_id, self._unit)
                self._counters[key] = counter
                logger.debug(
                    "multi_counter_key_created",
                    extra={"counter": self._name, "counter_id": counter_id},
                )
            return counter

    def _counter_id(self, key: Hashable) -> str:
        return f"{self._name.lower()}-{display_name(key).lower()}"

    def value(self, key: Hashable) -> int:
        counter = self._counters.get(key)
        if counter is None:
            return 0
        return counter.value()

    def keys(self) -> FrozenSet[Any]:
        """Return the keys incremented so far.

        Membership may already be stale when the caller looks at it if other
        threads keep incrementing new keys.
        """

        with self._lock:
            return frozenset(self._counters)

    def name(self) -> str:
        return self._name

    def unit(self) -> Unit:
        return self._unit

    def is_noop(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"MultiDimensionCounter(name={self._name!r}, unit={self._unit.display_name})"


class _NoopMultiDimensionCounter(MultiDimensionCounter):
    """Discards increments and refuses introspection."""

    def __init__(self) -> None:
        super().__init__("NOOP-MultiDimensionCounter", Unit.UNDEFINED)

    def increment(self, key: Hashable, amount: int = 1) -> None:
        return None

    def value(self, key: Hashable) -> int:
        raise UnsupportedOperation("NOOP multi-dimension counter has no value")

    def keys(self) -> FrozenSet[Any]:
        raise UnsupportedOperation("NOOP multi-dimension counter does not have keys")

    def name(self) -> str:
        raise UnsupportedOperation("NOOP multi-dimension counter has no name")

    def unit(self) -> Unit:
        return Unit.UNDEFINED

    def is_noop(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "NOOP multi-dimension counter"


NOOP: MultiDimensionCounter = _NoopMultiDimensionCounter()


def multi_counter(name: str, unit: Unit, context: MetricsRegistry | None = None) -> MultiDimensionCounter:
    """Return a live counter, or :data:`NOOP` when metrics collection is disabled."""

    registry = context if context is not None else METRICS
    if not registry.enabled:
        return NOOP
    return MultiDimensionCounter(name, unit, registry)
