"""Immutable snapshots of multi-dimension counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Hashable, Iterable, Iterator, Mapping, Tuple

from keyed_metrics.counters.multi import MultiDimensionCounter
from keyed_metrics.errors import InvalidArgument
from keyed_metrics.lib.metrics import Unit


@dataclass(frozen=True)
class CounterResult:
    """Finalized value of a single scalar counter."""

    unit: Unit
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgument(f"Invalid counter value: {self.value!r}")

    @classmethod
    def of(cls, unit: Unit, value: int) -> "CounterResult":
        return cls(unit=unit, value=value)


@dataclass(frozen=True)
class MultiDimensionCounterResult:
    """Point-in-time copy of a keyed counter's values.

    The entry mapping is copied on construction and exposed read-only, so a
    result never changes after it is built and holds no reference to the live
    counter it came from.
    """

    unit: Unit
    counter_results: Mapping[Hashable, CounterResult] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.unit is None:
            raise InvalidArgument("Invalid count unit: None")
        object.__setattr__(self, "counter_results", MappingProxyType(dict(self.counter_results)))

    def value(self, key: Hashable) -> int:
        result = self.counter_results.get(key)
        if result is None:
            return 0
        return result.value

    def keys(self) -> frozenset:
        return frozenset(self.counter_results)

    def items(self) -> Iterator[Tuple[Hashable, int]]:
        for key, result in self.counter_results.items():
            yield key, result.value

    def __len__(self) -> int:
        return len(self.counter_results)

    def __hash__(self) -> int:
        return hash((self.unit, frozenset(self.counter_results.items())))

    def with_value(self, key: Hashable, value: int) -> "MultiDimensionCounterResult":
        """Return a copy with ``key`` set to ``value``; this result is left untouched."""

        if key is None:
            raise InvalidArgument("Invalid key: None")
        entries = dict(self.counter_results)
        entries[key] = CounterResult.of(self.unit, value)
        return MultiDimensionCounterResult(unit=self.unit, counter_results=entries)

    @classmethod
    def from_counter(cls, counter: MultiDimensionCounter) -> "MultiDimensionCounterResult | None":
        """Snapshot a live counter; returns None for the no-op counter.

        Each key is read independently, so values of different keys may come
        from slightly different instants while other threads keep counting.
        """

        if counter is None:
            raise InvalidArgument("Invalid counter: None")
        if counter.is_noop():
            return None

        unit = counter.unit()
        entries = {key: CounterResult.of(unit, counter.value(key)) for key in counter.keys()}
        return cls(unit=unit, counter_results=entries)

    @classmethod
    def of(cls, unit: Unit, key: Hashable, value: int) -> "MultiDimensionCounterResult":
        return cls.of_pairs(unit, [(key, value)])

    @classmethod
    def of_pairs(cls, unit: Unit, pairs: Iterable[Tuple[Any, int]]) -> "MultiDimensionCounterResult":
        if unit is None:
            raise InvalidArgument("Invalid count unit: None")
        entries: dict[Hashable, CounterResult] = {}
        for key, value in pairs:
            if key is None:
                raise InvalidArgument("Invalid key: None")
            entries[key] = CounterResult.of(unit, value)
        return cls(unit=unit, counter_results=entries)
