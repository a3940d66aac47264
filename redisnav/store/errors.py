"""Exception hierarchy raised at the store-adapter seam."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every store-side failure."""


class StoreConnectionError(StoreError):
    """Connecting to the store failed; fatal before the interactive loop starts."""


class StoreOperationError(StoreError):
    """One store call failed; reported to the UI and the worker moves on."""


class KeyNotFoundError(StoreOperationError):
    """The key does not exist (any more)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"key not found: {key}")
        self.key = key


__all__ = [
    "StoreError",
    "StoreConnectionError",
    "StoreOperationError",
    "KeyNotFoundError",
]
