"""Value-kind enum and the typed value union returned by store adapters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ValueKind(Enum):
    """Closed set of value kinds a key can hold."""

    STRING = "string"
    LIST = "list"
    SET = "set"
    ZSET = "zset"
    HASH = "hash"
    STREAM = "stream"
    UNKNOWN = "unknown"

    @classmethod
    def from_type_name(cls, type_name: str) -> "ValueKind":
        """Map a ``TYPE`` reply to a kind; unrecognized names become ``UNKNOWN``."""
        for kind in cls:
            if kind.value == type_name:
                return kind
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return "-" if self is ValueKind.UNKNOWN else self.value.upper()


@dataclass(frozen=True)
class StringValue:
    text: str

    def raw_bytes(self) -> bytes:
        """Original payload bytes (keys and values are decoded with surrogateescape)."""
        return self.text.encode("utf-8", "surrogateescape")


@dataclass(frozen=True)
class ListValue:
    items: tuple[str, ...]


@dataclass(frozen=True)
class SetValue:
    members: tuple[str, ...]


@dataclass(frozen=True)
class SortedSetValue:
    entries: tuple[tuple[str, float], ...]


@dataclass(frozen=True)
class HashValue:
    fields: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class NoValue:
    """Placeholder for streams, unknown kinds, and keys that disappeared."""


TypedValue = Union[StringValue, ListValue, SetValue, SortedSetValue, HashValue, NoValue]


def value_size(value: TypedValue | None) -> int | None:
    """Byte size shown in the info bar; only strings report one."""
    if isinstance(value, StringValue):
        return len(value.raw_bytes())
    return None


__all__ = [
    "ValueKind",
    "StringValue",
    "ListValue",
    "SetValue",
    "SortedSetValue",
    "HashValue",
    "NoValue",
    "TypedValue",
    "value_size",
]
