from __future__ import annotations

import os
import unittest
from contextlib import contextmanager
from unittest import mock

from redisnav.pipeline import KeysLoaded
from redisnav.render import RenderContext
from redisnav.runtime import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from redisnav.runtime.loop import adjust_tree_start
from redisnav.runtime.state import AppState
from redisnav.runtime.view_model import BrowserViewModel
from redisnav.store.types import ValueKind


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        yield


class _Sink:
    def submit(self, command) -> None:
        pass

    def submit_nowait(self, command) -> bool:
        return True


class AdjustTreeStartTests(unittest.TestCase):
    def test_scrolls_down_to_show_selection(self) -> None:
        self.assertEqual(adjust_tree_start(0, 12, 40, 10), 3)

    def test_scrolls_up_to_show_selection(self) -> None:
        self.assertEqual(adjust_tree_start(8, 2, 40, 10), 2)

    def test_clamps_to_available_rows(self) -> None:
        self.assertEqual(adjust_tree_start(30, None, 12, 10), 2)
        self.assertEqual(adjust_tree_start(5, 0, 0, 10), 0)


class RunMainLoopTests(unittest.TestCase):
    def test_drains_events_renders_and_quits(self) -> None:
        state = AppState()
        vm = BrowserViewModel(state, _Sink(), delimiters=(":",))
        context = RenderContext(state=state, url="redis://127.0.0.1:6379", width=80, height=24)
        pending = [[KeysLoaded((("a", ValueKind.STRING), ("b", ValueKind.STRING)))]]
        keys = iter(["", "j", "q"])
        renders: list[int | None] = []

        callbacks = RuntimeLoopCallbacks(
            drain_events=lambda: pending.pop(0) if pending else [],
            render=lambda ctx: renders.append(ctx.state.selected_idx),
            read_key=lambda _fd, _timeout: next(keys),
        )
        terminal = _FakeTerminal()
        with mock.patch("redisnav.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))):
            run_main_loop(vm, context, terminal, 0, RuntimeLoopTiming(), callbacks)

        self.assertEqual(terminal.entered, 1)
        self.assertTrue(state.should_quit)
        self.assertEqual(state.selected_idx, 1)
        self.assertEqual(renders, [0, 1])
        self.assertFalse(state.dirty)

    def test_resize_updates_context(self) -> None:
        state = AppState()
        vm = BrowserViewModel(state, _Sink(), delimiters=(":",))
        context = RenderContext(state=state, url="redis://h:1", width=80, height=24)
        callbacks = RuntimeLoopCallbacks(
            drain_events=lambda: [],
            render=lambda ctx: None,
            read_key=lambda _fd, _timeout: "q",
        )
        with mock.patch("redisnav.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((120, 40))):
            run_main_loop(vm, context, _FakeTerminal(), 0, RuntimeLoopTiming(), callbacks)
        self.assertEqual((context.width, context.height), (120, 40))


if __name__ == "__main__":
    unittest.main()
