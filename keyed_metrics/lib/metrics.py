"""In-memory metrics context: measurement units, scalar counters and the registry."""

from __future__ import annotations

import threading
from collections import Counter
from enum import Enum
from typing import Dict

from keyed_metrics.config import get_settings
from keyed_metrics.errors import InvalidArgument


class Unit(str, Enum):
    """Measurement unit of a counter, serialized by its display name."""

    UNDEFINED = "undefined"
    BYTES = "bytes"
    COUNT = "count"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_display_name(cls, display_name: str) -> "Unit":
        if display_name is None:
            raise InvalidArgument("Invalid unit: None")
        normalized = display_name.strip().lower()
        for unit in cls:
            if unit.value == normalized:
                return unit
        raise InvalidArgument(f"Invalid unit: {display_name}")


class ScalarCounter:
    """A single thread-safe accumulator."""

    __slots__ = ("_name", "_unit", "_lock", "_value")

    def __init__(self, name: str, unit: Unit = Unit.COUNT) -> None:
        self._name = name
        self._unit = unit
        self._lock = threading.Lock()
        self._value = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def unit(self) -> Unit:
        return self._unit

    def increment(self, amount: int = 1) -> None:
        with self._lock:
            self._value += amount

    def value(self) -> int:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"ScalarCounter(name={self._name!r}, unit={self._unit.display_name}, value={self.value()})"


class MetricsRegistry:
    """Manufactures scalar counters and keeps named operational counts.

    Every call to :meth:`counter` returns a fresh instance: two callers asking
    for the same name never share state. The registry only remembers how many
    counters were created per name so that duplicate creation is observable.
    """

    def __init__(self, enabled: bool | None = None) -> None:
        self._lock = threading.Lock()
        self._counters: Counter[str] = Counter()
        self._created: Counter[str] = Counter()
        self._enabled = get_settings().metrics_enabled if enabled is None else enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def counter(self, name: str, unit: Unit = Unit.COUNT) -> ScalarCounter:
        if name is None:
            raise InvalidArgument("Invalid counter name: None")
        with self._lock:
            self._created[name] += 1
        return ScalarCounter(name, unit)

    def created(self, name: str) -> int:
        """Return how many scalar counters were manufactured under ``name``."""

        with self._lock:
            return self._created[name]

    def increment(self, name: str, value: int = 1) -> None:
        with self._lock:
            self._counters[name] += value

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._created.clear()


METRICS = MetricsRegistry()
