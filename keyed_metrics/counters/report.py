"""Collects named keyed counters into one replayable JSON report."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Tuple

from keyed_metrics.counters.keys import KEY_TYPES, KeyType, KeyTypeRegistry
from keyed_metrics.counters.multi import MultiDimensionCounter
from keyed_metrics.counters.parser import decode, to_json
from keyed_metrics.counters.result import MultiDimensionCounterResult
from keyed_metrics.errors import InvalidArgument
from keyed_metrics.lib.logger import get_logger

logger = get_logger(__name__)


class CounterReporter:
    """Tracks live counters by report name and serializes their snapshots."""

    def __init__(self, registry: KeyTypeRegistry = KEY_TYPES) -> None:
        self._registry = registry
        self._lock = threading.Lock()
        self._tracked: Dict[str, Tuple[MultiDimensionCounter, str]] = {}

    def track(self, name: str, counter: MultiDimensionCounter, key_type: type[Enum] | KeyType) -> None:
        if name is None:
            raise InvalidArgument("Invalid name: None")
        if counter is None:
            raise InvalidArgument("Invalid counter: None")
        tag = self._registry.register(key_type).type_tag()
        with self._lock:
            self._tracked[name] = (counter, tag)
        logger.info("multi_counter_tracked", extra={"report_name": name, "type_tag": tag})

    def names(self) -> list[str]:
        with self._lock:
            return list(self._tracked)

    def snapshot(self) -> dict[str, MultiDimensionCounterResult]:
        """Snapshot every tracked counter, skipping no-op counters."""

        with self._lock:
            tracked = list(self._tracked.items())
        results: dict[str, MultiDimensionCounterResult] = {}
        for name, (counter, _tag) in tracked:
            result = MultiDimensionCounterResult.from_counter(counter)
            if result is not None:
                results[name] = result
        return results

    def to_json(self) -> dict[str, Any]:
        with self._lock:
            tracked = list(self._tracked.items())
        report: dict[str, Any] = {}
        for name, (counter, tag) in tracked:
            result = MultiDimensionCounterResult.from_counter(counter)
            if result is not None:
                report.update(to_json(name, tag, result))
        return report

    def reset(self) -> None:
        with self._lock:
            self._tracked.clear()


def parse_report(
    payload: Mapping[str, Any],
    registry: KeyTypeRegistry = KEY_TYPES,
) -> dict[str, MultiDimensionCounterResult]:
    """Decode every top-level field of a report as a counter fragment."""

    return {name: result for name, (_key_type, result) in decode_report(payload, registry).items()}


def decode_report(
    payload: Mapping[str, Any],
    registry: KeyTypeRegistry = KEY_TYPES,
) -> dict[str, Tuple[KeyType, MultiDimensionCounterResult]]:
    """Decode a report, keeping the key type each counter was resolved to."""

    if payload is None:
        raise InvalidArgument("Cannot parse report from null object")
    if not isinstance(payload, Mapping):
        raise InvalidArgument(f"Cannot parse report from non-object: {payload!r}")

    results: dict[str, Tuple[KeyType, MultiDimensionCounterResult]] = {}
    for name in payload:
        decoded = decode(name, payload, registry)
        if decoded is not None:
            results[name] = decoded
    return results


REPORTER = CounterReporter()
