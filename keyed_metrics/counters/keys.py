"""Key types for keyed counters and the registry that resolves them from type tags."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Dict, Protocol, runtime_checkable

from keyed_metrics.errors import InvalidArgument, MalformedData


def display_name(key: Any) -> str:
    """Return the stable name of a key, as used for counter ids and JSON."""

    if isinstance(key, Enum):
        return key.name
    return str(key)


@runtime_checkable
class KeyType(Protocol):
    """Knows how to name and rebuild the keys of one key domain."""

    def type_tag(self) -> str: ...

    def parse_key(self, name: str) -> Any: ...

    def display_name(self, key: Any) -> str: ...


class EnumKeyType:
    """Key type backed by an ``Enum`` class; members are addressed by name."""

    def __init__(self, enum_cls: type[Enum], tag: str | None = None) -> None:
        if not (isinstance(enum_cls, type) and issubclass(enum_cls, Enum)):
            raise InvalidArgument(f"Invalid key type: {enum_cls!r} is not an enum")
        self._enum_cls = enum_cls
        self._tag = tag or f"{enum_cls.__module__}.{enum_cls.__qualname__}"

    @property
    def enum_cls(self) -> type[Enum]:
        return self._enum_cls

    def type_tag(self) -> str:
        return self._tag

    def parse_key(self, name: str) -> Enum:
        try:
            return self._enum_cls[name]
        except KeyError as exc:
            raise MalformedData(f"Invalid {self._tag} key: {name}") from exc

    def display_name(self, key: Any) -> str:
        return display_name(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnumKeyType):
            return NotImplemented
        return self._enum_cls is other._enum_cls and self._tag == other._tag

    def __hash__(self) -> int:
        return hash((self._enum_cls, self._tag))

    def __repr__(self) -> str:
        return f"EnumKeyType({self._enum_cls.__qualname__}, tag={self._tag!r})"


class KeyTypeRegistry:
    """Maps type tags to key types for decoding serialized counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._types: Dict[str, KeyType] = {}

    def register(self, key_type: type[Enum] | KeyType, tag: str | None = None) -> KeyType:
        """Register an enum class or a ready-made key type and return the key type."""

        if key_type is None:
            raise InvalidArgument("Invalid key type: None")
        if isinstance(key_type, type):
            resolved: KeyType = EnumKeyType(key_type, tag)
        elif isinstance(key_type, KeyType):
            resolved = key_type
        else:
            raise InvalidArgument(f"Invalid key type: {key_type!r}")

        type_tag = resolved.type_tag()
        with self._lock:
            existing = self._types.get(type_tag)
            if existing is not None and existing != resolved:
                raise InvalidArgument(f"Type tag already registered: {type_tag}")
            self._types[type_tag] = resolved
        return resolved

    def resolve(self, tag: str) -> KeyType:
        with self._lock:
            key_type = self._types.get(tag)
        if key_type is None:
            raise MalformedData(f"Unregistered key type: {tag}")
        return key_type

    def tag_for(self, enum_cls: type[Enum]) -> str:
        """Return the tag an enum class is registered under."""

        with self._lock:
            for tag, key_type in self._types.items():
                if isinstance(key_type, EnumKeyType) and key_type.enum_cls is enum_cls:
                    return tag
        raise InvalidArgument(f"Key type not registered: {enum_cls.__qualname__}")

    def __contains__(self, tag: object) -> bool:
        with self._lock:
            return tag in self._types

    def clear(self) -> None:
        with self._lock:
            self._types.clear()


class FileFormat(Enum):
    """Formats of files written by a job, the usual breakdown key."""

    AVRO = "avro"
    ORC = "orc"
    PARQUET = "parquet"
    METADATA = "metadata.json"
    PUFFIN = "puffin"


KEY_TYPES = KeyTypeRegistry()
KEY_TYPES.register(FileFormat)
