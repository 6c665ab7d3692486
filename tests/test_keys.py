"""Tests for key type adapters and the type tag registry."""

from __future__ import annotations

from enum import Enum

import pytest

from keyed_metrics.counters.keys import (
    KEY_TYPES,
    EnumKeyType,
    FileFormat,
    KeyType,
    KeyTypeRegistry,
    display_name,
)
from keyed_metrics.errors import InvalidArgument, MalformedData


class Region(Enum):
    EU = 1
    us_east = 2


class Tier(Enum):
    GOLD = "gold"


def test_display_name_uses_member_name_for_enums() -> None:
    assert display_name(Region.us_east) == "us_east"
    assert display_name(FileFormat.METADATA) == "METADATA"
    assert display_name("plain") == "plain"


def test_enum_key_type_tag_and_parse() -> None:
    key_type = EnumKeyType(Region)

    assert key_type.type_tag() == f"{__name__}.Region"
    assert key_type.parse_key("us_east") is Region.us_east
    assert isinstance(key_type, KeyType)

    with pytest.raises(MalformedData, match="US_EAST"):
        key_type.parse_key("US_EAST")


def test_enum_key_type_rejects_non_enum() -> None:
    with pytest.raises(InvalidArgument, match="is not an enum"):
        EnumKeyType(str)  # type: ignore[arg-type]


def test_registry_register_and_resolve(key_types: KeyTypeRegistry) -> None:
    registered = key_types.register(Region)

    assert registered.type_tag() in key_types
    assert key_types.resolve(registered.type_tag()) == registered
    assert key_types.tag_for(Region) == registered.type_tag()
    # Registering the same enum again is harmless
    assert key_types.register(Region) == registered


def test_registry_custom_tag_and_conflicts(key_types: KeyTypeRegistry) -> None:
    key_types.register(Region, tag="region")
    assert key_types.resolve("region").parse_key("EU") is Region.EU

    with pytest.raises(InvalidArgument, match="already registered"):
        key_types.register(Tier, tag="region")


def test_registry_unknown_tag(key_types: KeyTypeRegistry) -> None:
    with pytest.raises(MalformedData, match="Unregistered key type: missing.Type"):
        key_types.resolve("missing.Type")
    with pytest.raises(InvalidArgument):
        key_types.tag_for(Region)
    with pytest.raises(InvalidArgument):
        key_types.register(None)  # type: ignore[arg-type]


def test_registry_clear(key_types: KeyTypeRegistry) -> None:
    tag = key_types.register(Tier).type_tag()
    key_types.clear()
    assert tag not in key_types


def test_file_format_is_registered_by_default() -> None:
    tag = KEY_TYPES.tag_for(FileFormat)
    assert tag == "keyed_metrics.counters.keys.FileFormat"
    assert KEY_TYPES.resolve(tag).parse_key("PARQUET") is FileFormat.PARQUET
