"""Single-flight background worker between the UI loop and the store.

The UI thread puts commands on one bounded queue; one daemon thread takes
them in order, runs every store call a command needs, and puts the outcome on
a second bounded queue that the UI drains once per tick. Nothing else crosses
the thread boundary.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from queue import Empty, Full, Queue
from typing import TypeVar

from ..store.adapter import DEFAULT_SCAN_PAGE_SIZE, StoreAdapter
from ..store.errors import KeyNotFoundError, StoreError
from ..store.types import ValueKind
from .messages import (
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

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_CAPACITY = 100
_EVENT_PUT_POLL_SECONDS = 0.1

T = TypeVar("T")


class _Shutdown:
    """Sentinel telling the worker to exit."""


_SHUTDOWN = _Shutdown()


def _attempt(call: Callable[[str], T], key: str) -> tuple[T | None, StoreError | None]:
    try:
        return call(key), None
    except StoreError as exc:
        return None, exc


class StorePipeline:
    """Own the command/event queues and the one worker thread draining them."""

    def __init__(
        self,
        adapter: StoreAdapter,
        capacity: int = DEFAULT_QUEUE_CAPACITY,
        scan_page_size: int = DEFAULT_SCAN_PAGE_SIZE,
    ) -> None:
        self._adapter = adapter
        self._scan_page_size = scan_page_size
        self._commands: Queue[Command | _Shutdown] = Queue(maxsize=capacity)
        self._events: Queue[Event] = Queue(maxsize=capacity)
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stopping.clear()
        self._thread = threading.Thread(
            target=self._worker,
            name="redisnav-store-worker",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        """Ask the worker to exit after its current command and wait briefly."""
        self._stopping.set()
        try:
            self._commands.put_nowait(_SHUTDOWN)
        except Full:
            pass
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def submit(self, command: Command) -> None:
        """Enqueue a user-triggered command, blocking while the queue is full."""
        self._commands.put(command)

    def submit_nowait(self, command: Command) -> bool:
        """Enqueue a follow-up command; returns ``False`` when it was dropped."""
        try:
            self._commands.put_nowait(command)
        except Full:
            logger.debug("command queue full, dropped %r", command)
            return False
        return True

    def drain_events(self) -> list[Event]:
        """Return every pending event in arrival order."""
        out: list[Event] = []
        while True:
            try:
                out.append(self._events.get_nowait())
            except Empty:
                break
        return out

    def _emit(self, event: Event) -> None:
        while True:
            try:
                self._events.put(event, timeout=_EVENT_PUT_POLL_SECONDS)
                return
            except Full:
                if self._stopping.is_set():
                    logger.debug("dropping %r during shutdown", event)
                    return

    def _worker(self) -> None:
        while True:
            command = self._commands.get()
            if isinstance(command, _Shutdown) or self._stopping.is_set():
                return
            logger.debug("running %r", command)
            try:
                event = self.execute(command)
            except Exception as exc:
                logger.exception("unexpected failure while running %r", command)
                event = OperationFailed(f"unexpected error: {exc}")
            if isinstance(event, OperationFailed):
                logger.warning("%s", event.message)
            self._emit(event)

    def execute(self, command: Command) -> Event:
        """Run one command to completion and return the event describing it."""
        if isinstance(command, ScanKeys):
            return self._scan_keys(command)
        if isinstance(command, GetValue):
            return self._get_value(command)
        if isinstance(command, SetValue):
            return self._set_value(command)
        if isinstance(command, DeleteKey):
            return self._delete_key(command)
        raise TypeError(f"unsupported command: {command!r}")

    def _scan_keys(self, command: ScanKeys) -> Event:
        adapter = self._adapter
        try:
            keys = adapter.scan_keys(command.pattern, self._scan_page_size)
            typed: list[tuple[str, ValueKind]] = []
            for key in keys:
                try:
                    typed.append((key, adapter.get_type(key)))
                except KeyNotFoundError:
                    # Expired or deleted between SCAN and TYPE.
                    logger.debug("key %r vanished during scan", key)
        except StoreError as exc:
            return OperationFailed(str(exc))
        return KeysLoaded(tuple(typed))

    def _get_value(self, command: GetValue) -> Event:
        adapter = self._adapter
        key = command.key
        kind, kind_error = _attempt(adapter.get_type, key)
        value, value_error = _attempt(adapter.get_value, key)
        ttl, ttl_error = _attempt(adapter.get_ttl, key)
        # Report one failure only, by priority value -> ttl -> type.
        for error in (value_error, ttl_error, kind_error):
            if error is not None:
                return OperationFailed(str(error))
        assert value is not None and ttl is not None and kind is not None
        return ValueLoaded(key=key, value=value, ttl=ttl, value_kind=kind)

    def _set_value(self, command: SetValue) -> Event:
        # Lossy by contract: invalid UTF-8 becomes U+FFFD before the write.
        text = command.payload.decode("utf-8", errors="replace")
        try:
            self._adapter.set_string(command.key, text)
        except StoreError as exc:
            return OperationFailed(str(exc))
        return WriteSucceeded(command.key)

    def _delete_key(self, command: DeleteKey) -> Event:
        try:
            self._adapter.delete(command.key)
        except StoreError as exc:
            return OperationFailed(str(exc))
        return DeleteSucceeded(command.key)


__all__ = [
    "DEFAULT_QUEUE_CAPACITY",
    "StorePipeline",
]
