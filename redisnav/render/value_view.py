"""Value-pane line building for every stored value shape."""

from __future__ import annotations

from ..format import DEFAULT_STYLE, DetectedFormat, render_string_payload, sanitize_terminal_text
from ..store.types import (
    HashValue,
    ListValue,
    NoValue,
    SetValue,
    SortedSetValue,
    StringValue,
    TypedValue,
)
from ..ui_theme import UITheme
from .ansi import wrap_ansi_line

EMPTY_VALUE_MESSAGE = "Select a key to view its value"
NO_PREVIEW_MESSAGE = "(no preview for this value type)"


def value_lines(
    value: TypedValue | None,
    *,
    theme: UITheme,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> tuple[DetectedFormat | None, list[str]]:
    """Return the detected string format (if any) and unwrapped display lines."""
    if value is None:
        return None, [EMPTY_VALUE_MESSAGE]
    if isinstance(value, StringValue):
        return render_string_payload(value.raw_bytes(), style=style, no_color=no_color, theme=theme)
    if isinstance(value, ListValue):
        lines = [f"[{idx}] {item}" for idx, item in enumerate(value.items)]
    elif isinstance(value, SetValue):
        lines = list(value.members)
    elif isinstance(value, SortedSetValue):
        lines = [f"{score:.2f}: {member}" for member, score in value.entries]
    elif isinstance(value, HashValue):
        lines = [f"{field}: {field_value}" for field, field_value in value.fields]
    elif isinstance(value, NoValue):
        lines = [NO_PREVIEW_MESSAGE]
    else:
        raise TypeError(f"unsupported value type: {type(value).__name__}")
    return None, [sanitize_terminal_text(line) for line in lines]


def value_title(key: str | None, fmt: DetectedFormat | None) -> str:
    if key is None:
        return "Value"
    if fmt is None:
        return key
    return f"{key} ({fmt.label})"


def wrap_value_lines(lines: list[str], width: int) -> list[str]:
    wrapped: list[str] = []
    for line in lines:
        wrapped.extend(wrap_ansi_line(line.rstrip("\r"), width))
    return wrapped


def clamp_value_scroll(scroll: int, line_count: int, visible_rows: int) -> int:
    return max(0, min(scroll, max(0, line_count - visible_rows)))
