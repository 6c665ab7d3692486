"""Concurrency-safe keyed counters with a replayable JSON form."""

from keyed_metrics.counters import (
    KEY_TYPES,
    NOOP,
    CounterResult,
    FileFormat,
    MultiDimensionCounter,
    MultiDimensionCounterResult,
    from_json,
    multi_counter,
    to_json,
)
from keyed_metrics.errors import InvalidArgument, MalformedData, MetricsError, UnsupportedOperation
from keyed_metrics.lib.metrics import METRICS, MetricsRegistry, ScalarCounter, Unit

__all__ = [
    "KEY_TYPES",
    "METRICS",
    "NOOP",
    "CounterResult",
    "FileFormat",
    "InvalidArgument",
    "MalformedData",
    "MetricsError",
    "MetricsRegistry",
    "MultiDimensionCounter",
    "MultiDimensionCounterResult",
    "ScalarCounter",
    "Unit",
    "UnsupportedOperation",
    "from_json",
    "multi_counter",
    "to_json",
]
