"""Runtime composition layer for redis-nav.

Connects to the store, starts the pipeline worker, wires the view model to
the terminal, and runs the loop. This is the only place where the store,
the pipeline, and the UI meet.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from functools import partial

from ..config import AppConfig, redact_url
from ..editor import edit_value
from ..format import DEFAULT_STYLE
from ..pipeline import ScanKeys, StorePipeline
from ..render import RenderContext, render_frame
from ..store import RedisStoreAdapter, StoreConnectionError
from ..ui_theme import resolve_theme
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .state import AppState
from .terminal import TerminalController
from .view_model import BrowserViewModel

logger = logging.getLogger(__name__)


def run_app(config: AppConfig, style: str = DEFAULT_STYLE, no_color: bool = False) -> None:
    """Connect, run the interactive browser, and release every resource on exit."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd) or not os.isatty(stdout_fd):
        raise SystemExit("redis-nav needs an interactive terminal.")

    url = config.connection.url
    display_url = redact_url(url)
    try:
        adapter = RedisStoreAdapter.connect(url)
    except StoreConnectionError as exc:
        raise SystemExit(f"Could not connect to {display_url}: {exc}") from exc
    logger.info("connected to %s", display_url)

    pipeline = StorePipeline(adapter)
    pipeline.start()
    try:
        pipeline.submit(ScanKeys())
        terminal = TerminalController(stdin_fd, stdout_fd)
        state = AppState()
        view_model = BrowserViewModel(
            state,
            pipeline,
            delimiters=config.ui.delimiters,
            readonly=config.connection.readonly,
            protected_namespaces=config.ui.protected_namespaces,
            edit_value=partial(
                edit_value,
                disable_tui_mode=terminal.disable_tui_mode,
                enable_tui_mode=terminal.enable_tui_mode,
            ),
        )
        term = shutil.get_terminal_size((80, 24))
        context = RenderContext(
            state=state,
            url=display_url,
            width=term.columns,
            height=term.lines,
            readonly=config.connection.readonly,
            theme=resolve_theme(config.ui.theme, no_color=no_color),
            style=style,
            no_color=no_color,
        )
        run_main_loop(
            view_model,
            context,
            terminal,
            stdin_fd,
            RuntimeLoopTiming(),
            RuntimeLoopCallbacks(drain_events=pipeline.drain_events, render=render_frame),
        )
    finally:
        pipeline.stop()
        adapter.close()
        logger.info("disconnected from %s", display_url)
