"""Keyed counters, their immutable snapshots and the JSON codec."""

from keyed_metrics.counters.keys import KEY_TYPES, EnumKeyType, FileFormat, KeyType, KeyTypeRegistry
from keyed_metrics.counters.multi import NOOP, MultiDimensionCounter, multi_counter
from keyed_metrics.counters.parser import decode, from_json, to_json, to_json_string
from keyed_metrics.counters.report import REPORTER, CounterReporter, decode_report, parse_report
from keyed_metrics.counters.result import CounterResult, MultiDimensionCounterResult

__all__ = [
    "KEY_TYPES",
    "NOOP",
    "REPORTER",
    "CounterReporter",
    "CounterResult",
    "EnumKeyType",
    "FileFormat",
    "KeyType",
    "KeyTypeRegistry",
    "MultiDimensionCounter",
    "MultiDimensionCounterResult",
    "decode",
    "decode_report",
    "from_json",
    "multi_counter",
    "parse_report",
    "to_json",
    "to_json_string",
]
