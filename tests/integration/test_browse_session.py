"""View model and real pipeline thread working together against a fake store."""

from __future__ import annotations

import time
import unittest

from redisnav.pipeline import ScanKeys, StorePipeline
from redisnav.runtime.state import AppState, ConfirmDeleteDialog
from redisnav.runtime.view_model import BrowserViewModel
from redisnav.store.types import HashValue, StringValue
from tests.fake_store import FakeStoreAdapter


def _pump_until(pipeline: StorePipeline, vm: BrowserViewModel, predicate, timeout_seconds: float = 2.0) -> None:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        vm.apply_events(pipeline.drain_events())
        if predicate():
            return
        time.sleep(0.01)
    raise AssertionError("condition not reached before timeout")


class BrowseSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = FakeStoreAdapter(
            {
                "app:config": StringValue('{"debug": false}'),
                "app:users:1": HashValue((("name", "ada"),)),
                "app:users:2": HashValue((("name", "bob"),)),
                "lonely": StringValue("x"),
            }
        )
        self.pipeline = StorePipeline(self.store)
        self.pipeline.start()
        self.addCleanup(self.pipeline.stop)
        self.state = AppState()
        self.vm = BrowserViewModel(self.state, self.pipeline, delimiters=(":",))

    def test_scan_select_edit_and_delete(self) -> None:
        self.pipeline.submit(ScanKeys())
        _pump_until(self.pipeline, self.vm, lambda: self.state.key_count == 4)
        self.assertEqual([row.name for row in self.state.rows], ["app", "lonely"])

        self.vm.activate_selected()
        self.assertEqual([row.name for row in self.state.rows], ["app", "users", "config", "lonely"])

        self.vm.select_index(2)
        _pump_until(self.pipeline, self.vm, lambda: self.state.value is not None)
        self.assertEqual(self.state.value, StringValue('{"debug": false}'))
        self.assertEqual(self.state.ttl, -1)

        self.vm._edit_value = lambda key, payload: b'{"debug": true}'
        self.vm.begin_edit()
        self.vm.handle_dialog_key("ENTER")
        _pump_until(
            self.pipeline,
            self.vm,
            lambda: self.state.value == StringValue('{"debug": true}'),
        )
        self.assertEqual(self.store.values["app:config"], StringValue('{"debug": true}'))

        self.vm.begin_delete()
        self.assertEqual(self.state.dialog, ConfirmDeleteDialog("app:config"))
        self.vm.handle_dialog_key("y")
        _pump_until(self.pipeline, self.vm, lambda: self.state.key_count == 3)
        self.assertNotIn("app:config", self.store.values)
        self.assertEqual([row.name for row in self.state.rows], ["app", "users", "lonely"])

    def test_rapid_selection_shows_only_the_latest_value(self) -> None:
        self.pipeline.submit(ScanKeys())
        _pump_until(self.pipeline, self.vm, lambda: self.state.key_count == 4)
        self.vm.activate_selected()
        self.vm.select_index(2)
        self.vm.select_index(3)
        _pump_until(self.pipeline, self.vm, lambda: self.state.value is not None)
        time.sleep(0.1)
        self.vm.apply_events(self.pipeline.drain_events())
        self.assertEqual(self.state.value_key, "lonely")
        self.assertEqual(self.state.value, StringValue("x"))


if __name__ == "__main__":
    unittest.main()
