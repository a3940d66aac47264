"""Store adapter contract and its redis-py implementation.

The worker thread is the only caller. Every redis-py failure is translated to
``StoreOperationError`` so the worker can report it without knowing the client.
Keys and values are decoded with ``surrogateescape`` so arbitrary key bytes
survive the round trip back to the server.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterator, Protocol

import redis

from .errors import KeyNotFoundError, StoreConnectionError, StoreOperationError
from .types import (
    HashValue,
    ListValue,
    NoValue,
    SetValue,
    SortedSetValue,
    StringValue,
    TypedValue,
    ValueKind,
)

logger = logging.getLogger(__name__)

DEFAULT_SCAN_PAGE_SIZE = 1000
CONNECT_TIMEOUT_SECONDS = 5.0


class StoreAdapter(Protocol):
    """Primitives the pipeline worker needs from a key-value store."""

    def scan_keys(self, pattern: str, page_size: int = DEFAULT_SCAN_PAGE_SIZE) -> list[str]: ...

    def get_type(self, key: str) -> ValueKind: ...

    def get_value(self, key: str) -> TypedValue: ...

    def get_ttl(self, key: str) -> int: ...

    def set_string(self, key: str, text: str) -> None: ...

    def delete(self, key: str) -> None: ...


@contextlib.contextmanager
def _translate_errors(operation: str, key: str | None = None) -> Iterator[None]:
    try:
        yield
    except redis.exceptions.RedisError as exc:
        target = f" {key}" if key is not None else ""
        raise StoreOperationError(f"{operation}{target} failed: {exc}") from exc


class RedisStoreAdapter:
    """``StoreAdapter`` backed by one synchronous redis-py client."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def connect(cls, url: str) -> "RedisStoreAdapter":
        """Open a client for ``url`` and verify the server answers ``PING``."""
        try:
            client = redis.Redis.from_url(
                url,
                decode_responses=True,
                encoding_errors="surrogateescape",
                socket_connect_timeout=CONNECT_TIMEOUT_SECONDS,
            )
            client.ping()
        except (redis.exceptions.RedisError, ValueError) as exc:
            raise StoreConnectionError(str(exc)) from exc
        return cls(client)

    def scan_keys(self, pattern: str, page_size: int = DEFAULT_SCAN_PAGE_SIZE) -> list[str]:
        """Run ``SCAN`` until the cursor wraps to 0.

        ``SCAN`` may report a key more than once; duplicates are dropped while
        keeping first-seen order.
        """
        seen: dict[str, None] = {}
        cursor = 0
        with _translate_errors("scan", pattern):
            while True:
                cursor, batch = self._client.scan(cursor=cursor, match=pattern, count=page_size)
                for key in batch:
                    seen.setdefault(key, None)
                if int(cursor) == 0:
                    break
        logger.debug("scan %r returned %d keys", pattern, len(seen))
        return list(seen)

    def _type_name(self, key: str) -> str:
        with _translate_errors("type", key):
            return str(self._client.type(key))

    def get_type(self, key: str) -> ValueKind:
        type_name = self._type_name(key)
        if type_name == "none":
            raise KeyNotFoundError(key)
        return ValueKind.from_type_name(type_name)

    def get_value(self, key: str) -> TypedValue:
        kind = ValueKind.from_type_name(self._type_name(key))
        client = self._client
        with _translate_errors("read", key):
            if kind is ValueKind.STRING:
                text = client.get(key)
                return NoValue() if text is None else StringValue(text)
            if kind is ValueKind.LIST:
                return ListValue(tuple(client.lrange(key, 0, -1)))
            if kind is ValueKind.SET:
                return SetValue(tuple(sorted(client.smembers(key))))
            if kind is ValueKind.ZSET:
                entries = client.zrange(key, 0, -1, withscores=True)
                return SortedSetValue(tuple((member, float(score)) for member, score in entries))
            if kind is ValueKind.HASH:
                return HashValue(tuple(client.hgetall(key).items()))
        return NoValue()

    def get_ttl(self, key: str) -> int:
        """Remaining seconds; negative means no expiry (``-2`` for a missing key)."""
        with _translate_errors("ttl", key):
            return int(self._client.ttl(key))

    def set_string(self, key: str, text: str) -> None:
        with _translate_errors("write", key):
            self._client.set(key, text)

    def delete(self, key: str) -> None:
        with _translate_errors("delete", key):
            self._client.delete(key)

    def close(self) -> None:
        self._client.close()


__all__ = [
    "DEFAULT_SCAN_PAGE_SIZE",
    "StoreAdapter",
    "RedisStoreAdapter",
]
