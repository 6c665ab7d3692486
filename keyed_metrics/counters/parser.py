"""JSON encoding and decoding of multi-dimension counter results.

A result is written as a fragment nested under the counter's name::

    "<name>": {
      "unit": "<unit display name>",
      "type": "<key type tag>",
      "counters": [{"name": "<key name>", "value": <int>}, ...]
    }

The decoder rebuilds keys through a :class:`KeyTypeRegistry`, never through
import machinery, so only key types the embedding code registered can be
read back.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from keyed_metrics.counters.keys import KEY_TYPES, KeyType, KeyTypeRegistry, display_name
from keyed_metrics.counters.result import MultiDimensionCounterResult
from keyed_metrics.errors import InvalidArgument, MalformedData
from keyed_metrics.lib.logger import get_logger
from keyed_metrics.lib.metrics import METRICS, Unit

logger = get_logger(__name__)

MISSING_FIELD_ERROR_MSG = "Cannot parse counter from '{}': Missing field '{}'"
UNIT = "unit"
TYPE = "type"
VALUE = "value"
NAME = "name"
COUNTERS = "counters"


class CounterEntryPayload(BaseModel):
    """One ``{"name", "value"}`` element of the ``counters`` array."""

    model_config = ConfigDict(extra="ignore")

    name: StrictStr
    value: StrictInt


class MultiCounterPayload(BaseModel):
    """Wire shape of a serialized multi-dimension counter."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    unit: StrictStr
    type_tag: StrictStr = Field(..., alias=TYPE)
    counters: list[CounterEntryPayload] = Field(default_factory=list)


def to_json(name: str, key_type_tag: str, result: MultiDimensionCounterResult) -> dict[str, Any]:
    """Return ``{name: fragment}`` for the given result."""

    if result is None:
        raise InvalidArgument("Invalid counter: None")
    if name is None:
        raise InvalidArgument("Invalid name: None")
    if key_type_tag is None:
        raise InvalidArgument("Invalid key type: None")

    try:
        payload = MultiCounterPayload(
            unit=result.unit.display_name,
            type_tag=key_type_tag,
            counters=[
                CounterEntryPayload(name=display_name(key), value=value) for key, value in result.items()
            ],
        )
    except ValidationError as exc:
        raise InvalidArgument(f"Cannot write counter '{name}': {_describe(exc)}") from exc
    return {name: payload.model_dump(by_alias=True)}


def to_json_string(name: str, key_type_tag: str, result: MultiDimensionCounterResult) -> str:
    return json.dumps(to_json(name, key_type_tag, result))


def from_json(
    name: str,
    document: Mapping[str, Any],
    registry: KeyTypeRegistry = KEY_TYPES,
) -> MultiDimensionCounterResult | None:
    """Rebuild the result stored under ``name``; None when the field is absent."""

    decoded = decode(name, document, registry)
    if decoded is None:
        return None
    return decoded[1]


def decode(
    name: str,
    document: Mapping[str, Any],
    registry: KeyTypeRegistry = KEY_TYPES,
) -> tuple[KeyType, MultiDimensionCounterResult] | None:
    """Like :func:`from_json`, also returning the key type the tag resolved to."""

    if document is None:
        raise InvalidArgument("Cannot parse counter from null object")
    if not isinstance(document, Mapping):
        raise InvalidArgument(f"Cannot parse counter from non-object: {document!r}")

    if name not in document:
        return None

    try:
        return _parse(name, document[name], registry)
    except MalformedData as exc:
        METRICS.increment("codec.decode.error")
        logger.warning("multi_counter_decode_failed", extra={"counter": name, "error": str(exc)})
        raise


def _parse(
    name: str, node: Any, registry: KeyTypeRegistry
) -> tuple[KeyType, MultiDimensionCounterResult]:
    if not isinstance(node, Mapping):
        raise MalformedData(f"Cannot parse counter from '{name}': not an object")
    for field_name in (UNIT, TYPE, COUNTERS):
        if field_name not in node:
            raise MalformedData(MISSING_FIELD_ERROR_MSG.format(name, field_name))

    counters = node[COUNTERS]
    if not isinstance(counters, list):
        raise MalformedData(f"{COUNTERS} should be an array in '{name}'")
    for item in counters:
        if not isinstance(item, Mapping):
            raise MalformedData(f"Cannot parse {COUNTERS} entry in '{name}': not an object")
        for field_name in (NAME, VALUE):
            if field_name not in item:
                raise MalformedData(MISSING_FIELD_ERROR_MSG.format(name, f"{COUNTERS}.{field_name}"))

    try:
        payload = MultiCounterPayload.model_validate(node)
    except ValidationError as exc:
        raise MalformedData(f"Cannot parse counter from '{name}': {_describe(exc)}") from exc

    try:
        unit = Unit.from_display_name(payload.unit)
    except InvalidArgument as exc:
        raise MalformedData(f"Cannot parse counter from '{name}': {exc}") from exc

    try:
        key_type = registry.resolve(payload.type_tag)
        pairs = [(key_type.parse_key(entry.name), entry.value) for entry in payload.counters]
    except MalformedData as exc:
        raise MalformedData(f"Cannot parse counter from '{name}': {exc}") from exc
    return key_type, MultiDimensionCounterResult.of_pairs(unit, pairs)


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)
