"""Store access: value kinds, typed values, errors, and the redis adapter."""

from __future__ import annotations

from .adapter import DEFAULT_SCAN_PAGE_SIZE, RedisStoreAdapter, StoreAdapter
from .errors import KeyNotFoundError, StoreConnectionError, StoreError, StoreOperationError
from .types import (
    HashValue,
    ListValue,
    NoValue,
    SetValue,
    SortedSetValue,
    StringValue,
    TypedValue,
    ValueKind,
    value_size,
)

__all__ = [
    "DEFAULT_SCAN_PAGE_SIZE",
    "StoreAdapter",
    "RedisStoreAdapter",
    "StoreError",
    "StoreConnectionError",
    "StoreOperationError",
    "KeyNotFoundError",
    "ValueKind",
    "TypedValue",
    "StringValue",
    "ListValue",
    "SetValue",
    "SortedSetValue",
    "HashValue",
    "NoValue",
    "value_size",
]
