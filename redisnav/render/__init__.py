"""Rendering engine for the split key-tree/value terminal view.

``compose_frame`` builds the full list of screen rows from a ``RenderContext``
without touching runtime state; ``render_frame`` writes them to the terminal.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from ..format import DEFAULT_STYLE, DetectedFormat, sanitize_terminal_text
from ..runtime.state import AppState, Focus
from ..store.types import TypedValue, value_size
from ..tree_model import format_tree_row
from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import fit_ansi_line
from .dialogs import overlay_dialog
from .value_view import clamp_value_scroll, value_lines, value_title, wrap_value_lines

TREE_PANE_RATIO = 0.35
MIN_TREE_WIDTH = 16
MIN_VALUE_WIDTH = 10
STATUS_HELP_HINT = "| ? for help "


@dataclass
class ValuePaneCache:
    """Memoizes the wrapped lines of the currently displayed value.

    Highlighting is the costly part of a frame, so lines are rebuilt only
    when the value object, pane width, or color settings change.
    """

    _cache_key: tuple[object, ...] | None = None
    _fmt: DetectedFormat | None = None
    _lines: list[str] = field(default_factory=list)

    def lines(
        self,
        value: TypedValue | None,
        width: int,
        *,
        theme: UITheme,
        style: str,
        no_color: bool,
    ) -> tuple[DetectedFormat | None, list[str]]:
        cache_key = (value, width, theme.name, style, no_color)
        if cache_key != self._cache_key:
            fmt, raw_lines = value_lines(value, theme=theme, style=style, no_color=no_color)
            self._fmt = fmt
            self._lines = wrap_value_lines(raw_lines, width)
            self._cache_key = cache_key
        return self._fmt, self._lines


@dataclass
class RenderContext:
    state: AppState
    url: str
    width: int
    height: int
    readonly: bool = False
    theme: UITheme = DEFAULT_THEME
    style: str = DEFAULT_STYLE
    no_color: bool = False
    value_cache: ValuePaneCache = field(default_factory=ValuePaneCache)


@dataclass(frozen=True)
class PaneLayout:
    tree_width: int
    value_width: int
    content_rows: int

    @property
    def tree_rows(self) -> int:
        """Rows available to tree entries below the pane header."""
        return max(1, self.content_rows - 1)

    @property
    def value_rows(self) -> int:
        """Rows available to value lines below the title and info bar."""
        return max(1, self.content_rows - 2)


def pane_layout(width: int, height: int) -> PaneLayout:
    tree_width = max(MIN_TREE_WIDTH, round(width * TREE_PANE_RATIO))
    tree_width = max(1, min(tree_width, width - MIN_VALUE_WIDTH - 1))
    value_width = max(1, width - tree_width - 1)
    return PaneLayout(tree_width=tree_width, value_width=value_width, content_rows=max(3, height - 1))


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text
    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def build_status_line(left_text: str, width: int, right_text: str = STATUS_HELP_HINT) -> str:
    usable = max(1, width)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def format_ttl(ttl: int | None, theme: UITheme) -> str:
    """``no expiry`` for persistent keys, otherwise the largest whole unit."""
    reset = theme.reset
    if ttl is None:
        return "-"
    if ttl < 0:
        return f"{theme.ttl_normal}no expiry{reset}"
    if ttl < 60:
        return f"{theme.ttl_critical}{ttl}s{reset}"
    if ttl < 3600:
        return f"{theme.ttl_warning}{ttl // 60}m{reset}"
    return f"{theme.ttl_normal}{ttl // 3600}h{reset}"


def format_size(size: int | None) -> str:
    if size is None:
        return "-"
    if size > 1024 * 1024:
        return f"{size / 1024 / 1024:.1f} MB"
    if size > 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size} B"


def build_info_line(state: AppState, readonly: bool, theme: UITheme) -> str:
    kind = state.value_kind.label if state.value_kind is not None else "-"
    if readonly:
        hint = f"{theme.readonly_badge}[readonly]{theme.reset}"
    else:
        hint = "[e]dit"
    return (
        f" Type: {kind} | TTL: {format_ttl(state.ttl, theme)}"
        f" | Size: {format_size(value_size(state.value))} | {hint}"
    )


def _pane_header(text: str, focused: bool, theme: UITheme) -> str:
    color = theme.title if focused else theme.status
    return f"{color}{text}{theme.reset}"


def _tree_pane_rows(context: RenderContext, layout: PaneLayout) -> list[str]:
    state = context.state
    theme = context.theme
    width = layout.tree_width
    header = _pane_header(f" Keys ({state.key_count})", state.focus is Focus.TREE, theme)
    rows = [fit_ansi_line(header, width, theme.reset)]
    for offset in range(layout.tree_rows):
        idx = state.tree_start + offset
        if idx >= len(state.rows):
            rows.append(" " * width)
            continue
        row = state.rows[idx]
        text = fit_ansi_line(" " + format_tree_row(row, theme), width, theme.reset)
        if idx == state.selected_idx:
            text = selected_with_ansi(text)
        rows.append(text)
    return rows


def _value_pane_rows(context: RenderContext, layout: PaneLayout) -> list[str]:
    state = context.state
    theme = context.theme
    width = layout.value_width
    fmt, lines = context.value_cache.lines(
        state.value,
        max(1, width - 1),
        theme=theme,
        style=context.style,
        no_color=context.no_color,
    )
    key = sanitize_terminal_text(state.value_key) if state.value_key is not None else None
    header = _pane_header(f" {value_title(key, fmt)}", state.focus is Focus.VALUE, theme)
    rows = [
        fit_ansi_line(header, width, theme.reset),
        fit_ansi_line(build_info_line(state, context.readonly, theme), width, theme.reset),
    ]
    start = clamp_value_scroll(state.value_scroll, len(lines), layout.value_rows)
    for offset in range(layout.value_rows):
        idx = start + offset
        line = lines[idx] if idx < len(lines) else ""
        rows.append(fit_ansi_line(" " + line, width, theme.reset))
    return rows


def compose_frame(context: RenderContext) -> list[str]:
    """Build every screen row for the current state, dialog overlay included."""
    theme = context.theme
    layout = pane_layout(context.width, context.height)
    tree_rows = _tree_pane_rows(context, layout)
    value_rows = _value_pane_rows(context, layout)
    divider = f"{theme.divider}│{theme.reset}"
    rows = [f"{tree_rows[idx]}{divider}{value_rows[idx]}" for idx in range(layout.content_rows)]

    if context.state.dialog is not None:
        rows = overlay_dialog(rows, context.state.dialog, context.width, theme)

    status = sanitize_terminal_text(context.state.status_message)
    status_line = build_status_line(f" {context.url} | {status}", context.width)
    rows.append(f"{theme.reverse}{status_line}{theme.reset}")
    return rows


def render_frame(context: RenderContext) -> None:
    out: list[str] = ["\033[H\033[J"]
    out.append("\r\n".join(compose_frame(context)))
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="surrogateescape"))


__all__ = [
    "PaneLayout",
    "RenderContext",
    "ValuePaneCache",
    "build_info_line",
    "build_status_line",
    "compose_frame",
    "format_size",
    "format_ttl",
    "pane_layout",
    "render_frame",
    "selected_with_ansi",
]
