"""Main interactive event loop for the terminal UI.

Each tick drains pipeline events, keeps scroll offsets in range, renders
when something changed, and dispatches at most one key. The loop never
talks to the store; all store work goes through the pipeline queues.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from ..pipeline.messages import Event
from ..render import RenderContext, pane_layout
from ..render.value_view import clamp_value_scroll
from .keys import KeyHandler
from .terminal import TerminalController
from .view_model import BrowserViewModel


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    poll_ms: int = 33


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    drain_events: Callable[[], list[Event]]
    render: Callable[[RenderContext], None]
    read_key: Callable[[int, int], str] = read_key


def adjust_tree_start(tree_start: int, selected_idx: int | None, row_count: int, visible_rows: int) -> int:
    """Scroll the tree window just enough to keep the selection visible."""
    if selected_idx is not None:
        if selected_idx < tree_start:
            tree_start = selected_idx
        elif selected_idx >= tree_start + visible_rows:
            tree_start = selected_idx - visible_rows + 1
    return max(0, min(tree_start, max(0, row_count - visible_rows)))


def run_main_loop(
    view_model: BrowserViewModel,
    context: RenderContext,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the interactive loop until a quit key is pressed."""
    state = view_model.state

    def page_rows() -> int:
        return max(1, pane_layout(context.width, context.height).tree_rows - 1)

    keys = KeyHandler(view_model, page_rows)

    with terminal.raw_mode():
        while not state.should_quit:
            events = callbacks.drain_events()
            if events:
                view_model.apply_events(events)

            term = shutil.get_terminal_size((80, 24))
            if (term.columns, term.lines) != (context.width, context.height):
                context.width = term.columns
                context.height = term.lines
                state.dirty = True

            layout = pane_layout(context.width, context.height)
            prev_tree_start = state.tree_start
            state.tree_start = adjust_tree_start(
                state.tree_start,
                state.selected_idx,
                len(state.rows),
                layout.tree_rows,
            )
            if state.tree_start != prev_tree_start:
                state.dirty = True

            if state.dirty:
                callbacks.render(context)
                _, value_lines = context.value_cache.lines(
                    state.value,
                    max(1, layout.value_width - 1),
                    theme=context.theme,
                    style=context.style,
                    no_color=context.no_color,
                )
                state.value_scroll = clamp_value_scroll(state.value_scroll, len(value_lines), layout.value_rows)
                state.dirty = False

            key = callbacks.read_key(stdin_fd, timing.poll_ms)
            if not key:
                continue
            if keys.handle(key):
                state.should_quit = True
