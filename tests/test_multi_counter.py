"""Tests for live multi-dimension counters and the no-op counter."""

from __future__ import annotations

import threading
import time
from enum import Enum

import pytest

from keyed_metrics.counters.multi import NOOP, MultiDimensionCounter, multi_counter
from keyed_metrics.errors import InvalidArgument, UnsupportedOperation
from keyed_metrics.lib.metrics import MetricsRegistry, ScalarCounter, Unit

COUNTER_NAME1 = "counter-name1"
COUNTER_NAME2 = "counter-name2"
KEY1 = "key1"


class Operation(Enum):
    APPEND = "append"
    DELETE = "delete"


class RecordingContext:
    """Counter context that records every counter it hands out."""

    def __init__(self, delay: float = 0.0) -> None:
        self._lock = threading.Lock()
        self._delay = delay
        self.created: list[str] = []

    def counter(self, name: str, unit: Unit = Unit.COUNT) -> ScalarCounter:
        if self._delay:
            time.sleep(self._delay)
        with self._lock:
            self.created.append(name)
        return ScalarCounter(name, unit)


def test_null_checks(registry: MetricsRegistry) -> None:
    with pytest.raises(InvalidArgument, match="Invalid name: None"):
        MultiDimensionCounter(None, Unit.COUNT, registry)  # type: ignore[arg-type]

    with pytest.raises(InvalidArgument, match="Invalid count unit: None"):
        MultiDimensionCounter("test", None, registry)  # type: ignore[arg-type]

    counter = MultiDimensionCounter("test", Unit.COUNT, registry)
    with pytest.raises(InvalidArgument, match="Invalid key: None"):
        counter.increment(None)


def test_noop_counter() -> None:
    assert NOOP.unit() is Unit.UNDEFINED
    assert NOOP.is_noop() is True

    NOOP.increment("key")
    NOOP.increment(None)
    NOOP.increment(Operation.APPEND, 42)

    with pytest.raises(UnsupportedOperation) as value_error:
        NOOP.value("key")
    assert str(value_error.value) == "NOOP multi-dimension counter has no value"

    with pytest.raises(UnsupportedOperation) as name_error:
        NOOP.name()
    assert str(name_error.value) == "NOOP multi-dimension counter has no name"

    with pytest.raises(UnsupportedOperation) as keys_error:
        NOOP.keys()
    assert str(keys_error.value) == "NOOP multi-dimension counter does not have keys"


def test_count(registry: MetricsRegistry) -> None:
    counter1 = MultiDimensionCounter(COUNTER_NAME1, Unit.BYTES, registry)
    assert counter1.name() == COUNTER_NAME1
    assert counter1.unit() is Unit.BYTES
    assert counter1.is_noop() is False

    counter1.increment(KEY1)
    counter1.increment(KEY1, 2)
    assert counter1.value(KEY1) == 3

    counter1.increment(KEY1.upper(), 10)
    assert counter1.value(KEY1) == 3
    assert counter1.value(KEY1.upper()) == 10
    assert counter1.keys() == frozenset({KEY1, KEY1.upper()})

    # Different name, same key
    counter2 = MultiDimensionCounter(COUNTER_NAME2, Unit.BYTES, registry)
    counter2.increment(KEY1, 100)
    assert counter2.value(KEY1) == 100
    assert counter1.value(KEY1) == 3

    # Same name, same key: still independent
    counter3 = MultiDimensionCounter(COUNTER_NAME1, Unit.BYTES, registry)
    counter3.increment(KEY1, 1000)
    assert counter3.value(KEY1) == 1000
    assert counter1.value(KEY1) == 3


def test_value_of_unknown_key_is_zero(registry: MetricsRegistry) -> None:
    counter = MultiDimensionCounter("ops", Unit.COUNT, registry)
    assert counter.value(Operation.APPEND) == 0
    assert counter.keys() == frozenset()

    counter.increment(Operation.APPEND)
    assert counter.value(Operation.APPEND) == 1
    assert counter.value(Operation.DELETE) == 0


def test_backing_counters_are_named_after_counter_and_key() -> None:
    context = RecordingContext()
    counter = MultiDimensionCounter("Data-Files", Unit.COUNT, context)

    counter.increment(Operation.APPEND)
    counter.increment(Operation.APPEND, 4)
    counter.increment("Mixed")

    assert context.created == ["data-files-append", "data-files-mixed"]
    assert counter.value(Operation.APPEND) == 5


def test_defaults_to_process_registry() -> None:
    counter = MultiDimensionCounter("default-context", Unit.COUNT)
    counter.increment("a")
    assert counter.value("a") == 1


def test_concurrent_first_use_creates_single_counter() -> None:
    context = RecordingContext(delay=0.001)
    counter = MultiDimensionCounter("concurrent", Unit.COUNT, context)
    threads_count = 8
    increments = 500
    barrier = threading.Barrier(threads_count)

    def worker() -> None:
        barrier.wait()
        for _ in range(increments):
            counter.increment(Operation.APPEND)

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert counter.value(Operation.APPEND) == threads_count * increments
    assert context.created == ["concurrent-append"]


def test_concurrent_distinct_keys_do_not_interfere(registry: MetricsRegistry) -> None:
    counter = MultiDimensionCounter("spread", Unit.COUNT, registry)
    keys = [f"key-{index}" for index in range(16)]

    def worker(key: str) -> None:
        for _ in range(200):
            counter.increment(key, 2)

    threads = [threading.Thread(target=worker, args=(key,)) for key in keys]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert counter.keys() == frozenset(keys)
    assert all(counter.value(key) == 400 for key in keys)
    assert all(registry.created(f"spread-{key}") == 1 for key in keys)


def test_factory_returns_noop_when_disabled() -> None:
    disabled = MetricsRegistry(enabled=False)
    assert multi_counter("files", Unit.COUNT, disabled) is NOOP

    enabled = MetricsRegistry(enabled=True)
    live = multi_counter("files", Unit.COUNT, enabled)
    assert live is not NOOP
    assert live.name() == "files"
    assert live.unit() is Unit.COUNT
