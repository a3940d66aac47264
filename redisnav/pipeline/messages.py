"""Commands sent to the store worker and events it reports back."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..store.types import TypedValue, ValueKind

FULL_SCAN_PATTERN = "*"


@dataclass(frozen=True)
class ScanKeys:
    pattern: str = FULL_SCAN_PATTERN


@dataclass(frozen=True)
class GetValue:
    key: str


@dataclass(frozen=True)
class SetValue:
    key: str
    payload: bytes


@dataclass(frozen=True)
class DeleteKey:
    key: str


Command = Union[ScanKeys, GetValue, SetValue, DeleteKey]


@dataclass(frozen=True)
class KeysLoaded:
    keys: tuple[tuple[str, ValueKind], ...]


@dataclass(frozen=True)
class ValueLoaded:
    key: str
    value: TypedValue
    ttl: int
    value_kind: ValueKind


@dataclass(frozen=True)
class OperationFailed:
    message: str


@dataclass(frozen=True)
class WriteSucceeded:
    key: str


@dataclass(frozen=True)
class DeleteSucceeded:
    key: str


Event = Union[KeysLoaded, ValueLoaded, OperationFailed, WriteSucceeded, DeleteSucceeded]

__all__ = [
    "FULL_SCAN_PATTERN",
    "ScanKeys",
    "GetValue",
    "SetValue",
    "DeleteKey",
    "Command",
    "KeysLoaded",
    "ValueLoaded",
    "OperationFailed",
    "WriteSucceeded",
    "DeleteSucceeded",
    "Event",
]
