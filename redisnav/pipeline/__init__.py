"""Command/event pipeline serializing all store access on one worker thread."""

from __future__ import annotations

from .messages import (
    FULL_SCAN_PATTERN,
    Command,
    DeleteKey,
    DeleteSucceeded,
    Event,
    GetValue,
    KeysLoaded,
    OperationFailed,
    ScanKeys,
    SetValue,
    ValueLoaded,
    WriteSucceeded,
)
from .worker import DEFAULT_QUEUE_CAPACITY, StorePipeline

__all__ = [
    "DEFAULT_QUEUE_CAPACITY",
    "FULL_SCAN_PATTERN",
    "StorePipeline",
    "Command",
    "ScanKeys",
    "GetValue",
    "SetValue",
    "DeleteKey",
    "Event",
    "KeysLoaded",
    "ValueLoaded",
    "OperationFailed",
    "WriteSucceeded",
    "DeleteSucceeded",
]
