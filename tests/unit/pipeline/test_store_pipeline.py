"""Tests for the store worker pipeline.

``execute`` is exercised synchronously for per-command semantics; the
threaded tests check ordering, backpressure, and shutdown.
"""

from __future__ import annotations

import threading
import time
import unittest

from redisnav.pipeline import (
    DeleteKey,
    DeleteSucceeded,
    GetValue,
    KeysLoaded,
    OperationFailed,
    ScanKeys,
    SetValue,
    StorePipeline,
    ValueLoaded,
    WriteSucceeded,
)
from redisnav.store.types import HashValue, StringValue, ValueKind
from tests.fake_store import FakeStoreAdapter


def _wait_for_events(pipeline: StorePipeline, *, expected_count: int, timeout_seconds: float = 2.0) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(pipeline.drain_events())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


class ExecuteCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FakeStoreAdapter(
            {
                "user:1": HashValue((("name", "ada"),)),
                "user:1:name": StringValue("ada"),
            }
        )
        self.pipeline = StorePipeline(self.store)

    def test_scan_reports_keys_with_kinds(self) -> None:
        event = self.pipeline.execute(ScanKeys())
        self.assertEqual(
            event,
            KeysLoaded((("user:1", ValueKind.HASH), ("user:1:name", ValueKind.STRING))),
        )
        self.assertEqual(self.store.calls[0], ("scan", "*"))

    def test_scan_skips_keys_that_vanish_before_type(self) -> None:
        self.store.vanish_on_type.add("user:1")
        event = self.pipeline.execute(ScanKeys())
        self.assertEqual(event, KeysLoaded((("user:1:name", ValueKind.STRING),)))

    def test_scan_failure_reports_operation_failed(self) -> None:
        self.store.fail["scan"] = "scan broke"
        self.assertEqual(self.pipeline.execute(ScanKeys()), OperationFailed("scan broke"))

    def test_scan_fails_when_type_lookup_errors(self) -> None:
        self.store.fail["type"] = "type broke"
        self.assertEqual(self.pipeline.execute(ScanKeys()), OperationFailed("type broke"))

    def test_get_value_issues_type_value_ttl_in_order(self) -> None:
        self.store.ttls["user:1:name"] = 90
        event = self.pipeline.execute(GetValue("user:1:name"))
        self.assertEqual(
            event,
            ValueLoaded(key="user:1:name", value=StringValue("ada"), ttl=90, value_kind=ValueKind.STRING),
        )
        self.assertEqual(
            [op for op, _key in self.store.calls],
            ["type", "value", "ttl"],
        )

    def test_get_value_error_priority_is_value_then_ttl_then_type(self) -> None:
        self.store.fail.update({"type": "type err", "value": "value err", "ttl": "ttl err"})
        self.assertEqual(self.pipeline.execute(GetValue("user:1")), OperationFailed("value err"))

        del self.store.fail["value"]
        self.assertEqual(self.pipeline.execute(GetValue("user:1")), OperationFailed("ttl err"))

        del self.store.fail["ttl"]
        self.assertEqual(self.pipeline.execute(GetValue("user:1")), OperationFailed("type err"))

    def test_get_value_of_missing_key_fails(self) -> None:
        event = self.pipeline.execute(GetValue("nope"))
        self.assertIsInstance(event, OperationFailed)
        self.assertIn("nope", event.message)

    def test_set_value_decodes_payload_lossily(self) -> None:
        event = self.pipeline.execute(SetValue("blob", b"ok\xff"))
        self.assertEqual(event, WriteSucceeded("blob"))
        self.assertEqual(self.store.values["blob"], StringValue("ok�"))

    def test_set_value_failure(self) -> None:
        self.store.fail["set"] = "READONLY"
        self.assertEqual(self.pipeline.execute(SetValue("k", b"v")), OperationFailed("READONLY"))

    def test_delete(self) -> None:
        self.assertEqual(self.pipeline.execute(DeleteKey("user:1")), DeleteSucceeded("user:1"))
        self.assertNotIn("user:1", self.store.values)

        self.store.fail["delete"] = "denied"
        self.assertEqual(self.pipeline.execute(DeleteKey("user:1:name")), OperationFailed("denied"))


class StorePipelineThreadTests(unittest.TestCase):
    def test_events_arrive_in_command_order(self) -> None:
        store = FakeStoreAdapter({"a": StringValue("1")})
        pipeline = StorePipeline(store)
        pipeline.start()
        try:
            pipeline.submit(ScanKeys())
            pipeline.submit(SetValue("a", b"2"))
            pipeline.submit(GetValue("a"))
            pipeline.submit(DeleteKey("a"))
            events = _wait_for_events(pipeline, expected_count=4)
        finally:
            pipeline.stop()

        self.assertEqual(
            [type(event) for event in events],
            [KeysLoaded, WriteSucceeded, ValueLoaded, DeleteSucceeded],
        )
        self.assertEqual(events[2].value, StringValue("2"))

    def test_worker_keeps_running_after_a_failure(self) -> None:
        store = FakeStoreAdapter({"a": StringValue("1")})
        store.fail["delete"] = "nope"
        pipeline = StorePipeline(store)
        pipeline.start()
        try:
            pipeline.submit(DeleteKey("a"))
            pipeline.submit(GetValue("a"))
            events = _wait_for_events(pipeline, expected_count=2)
        finally:
            pipeline.stop()

        self.assertEqual(events[0], OperationFailed("nope"))
        self.assertIsInstance(events[1], ValueLoaded)

    def test_unexpected_exception_becomes_operation_failed(self) -> None:
        store = FakeStoreAdapter({"a": StringValue("1")})

        def explode(_key: str) -> int:
            raise RuntimeError("boom")

        store.get_ttl = explode  # type: ignore[method-assign]
        pipeline = StorePipeline(store)
        pipeline.start()
        try:
            pipeline.submit(GetValue("a"))
            events = _wait_for_events(pipeline, expected_count=1)
        finally:
            pipeline.stop()

        self.assertEqual(events, [OperationFailed("unexpected error: boom")])

    def test_submit_nowait_drops_when_queue_is_full(self) -> None:
        store = FakeStoreAdapter({"a": StringValue("1")})
        store.gate = threading.Event()
        pipeline = StorePipeline(store, capacity=2)
        pipeline.start()
        try:
            pipeline.submit(GetValue("a"))
            # Let the worker take the first command and block on the gate.
            deadline = time.monotonic() + 2.0
            while pipeline._commands.qsize() and time.monotonic() < deadline:
                time.sleep(0.01)
            self.assertTrue(pipeline.submit_nowait(GetValue("a")))
            self.assertTrue(pipeline.submit_nowait(GetValue("a")))
            self.assertFalse(pipeline.submit_nowait(GetValue("a")))
        finally:
            store.gate.set()
            pipeline.stop()

    def test_stop_joins_worker(self) -> None:
        pipeline = StorePipeline(FakeStoreAdapter())
        pipeline.start()
        self.assertTrue(pipeline.running)
        pipeline.stop()
        self.assertFalse(pipeline.running)

    def test_drain_events_is_empty_when_nothing_happened(self) -> None:
        self.assertEqual(StorePipeline(FakeStoreAdapter()).drain_events(), [])


if __name__ == "__main__":
    unittest.main()
