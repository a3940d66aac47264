"""Modal dialog boxes drawn over the composed frame."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import ProtectionLevel
from ..format import sanitize_terminal_text
from ..runtime.state import (
    ConfirmDeleteDialog,
    Dialog,
    DiffPreviewDialog,
    HelpDialog,
    ProtectionDialog,
)
from ..ui_theme import UITheme
from .ansi import clip_ansi_line, display_width, fit_ansi_line
from .help import help_lines

_PROTECTION_HINTS: dict[ProtectionLevel, tuple[str, str]] = {
    ProtectionLevel.WARN: ("WARN", "Press any key to continue, Esc to cancel"),
    ProtectionLevel.CONFIRM: ("CONFIRM", "Press y to confirm, Esc to cancel"),
    ProtectionLevel.BLOCK: ("BLOCKED", "This operation is not allowed. Press Esc to close"),
}


@dataclass(frozen=True)
class DialogBox:
    title: str
    lines: list[str]
    border: str


def diff_lines(old_text: str, new_text: str, theme: UITheme) -> list[str]:
    """Positional line diff: unchanged lines indented, changed pairs as ``-``/``+``."""
    reset = theme.reset
    old_lines = old_text.splitlines()
    new_lines = new_text.splitlines()
    out: list[str] = []
    for idx in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[idx] if idx < len(old_lines) else None
        new_line = new_lines[idx] if idx < len(new_lines) else None
        if old_line is not None and old_line == new_line:
            out.append(f"  {old_line}")
            continue
        if old_line is not None:
            out.append(f"{theme.diff_removed}- {old_line}{reset}")
        if new_line is not None:
            out.append(f"{theme.diff_added}+ {new_line}{reset}")
    return out


def dialog_box(dialog: Dialog, theme: UITheme) -> DialogBox:
    reset = theme.reset
    if isinstance(dialog, HelpDialog):
        return DialogBox("Help", help_lines(theme), theme.dialog_border)
    if isinstance(dialog, ConfirmDeleteDialog):
        return DialogBox(
            "Delete Key",
            [
                "",
                f"Delete {theme.dialog_warning}{sanitize_terminal_text(dialog.key)}{reset}?",
                "",
                f"{theme.help_dim}Press y to confirm, n/Esc to cancel{reset}",
            ],
            theme.dialog_warning,
        )
    if isinstance(dialog, ProtectionDialog):
        level_label, hint = _PROTECTION_HINTS[dialog.namespace.level]
        return DialogBox(
            "Protected Namespace",
            [
                "",
                f"Key: {sanitize_terminal_text(dialog.key)}",
                f"Protected namespace: {dialog.namespace.prefix}",
                f"Protection level: {theme.dialog_warning}{level_label}{reset}",
                f"Action: {dialog.action.value}",
                "",
                f"{theme.help_dim}{hint}{reset}",
            ],
            theme.dialog_warning,
        )
    if isinstance(dialog, DiffPreviewDialog):
        lines = diff_lines(
            sanitize_terminal_text(dialog.old_text),
            sanitize_terminal_text(dialog.new_text),
            theme,
        )
        lines.append("")
        lines.append(f"{theme.help_dim}[Enter] Write to Redis    [Esc] Cancel{reset}")
        return DialogBox(f"Confirm Changes to {sanitize_terminal_text(dialog.key)}", lines, theme.dialog_border)
    raise TypeError(f"unsupported dialog: {type(dialog).__name__}")


def _box_rows(box: DialogBox, inner_width: int, max_body_rows: int, reset: str) -> list[str]:
    title = clip_ansi_line(f" {box.title} ", inner_width)
    top_fill = "─" * max(0, inner_width - display_width(title))
    rows = [f"{box.border}┌{title}{top_fill}┐{reset}"]
    body = box.lines[:max_body_rows]
    for line in body:
        rows.append(f"{box.border}│{reset}{fit_ansi_line(line, inner_width, reset)}{box.border}│{reset}")
    rows.append(f"{box.border}└{'─' * inner_width}┘{reset}")
    return rows


def overlay_dialog(frame_rows: list[str], dialog: Dialog, width: int, theme: UITheme) -> list[str]:
    """Return ``frame_rows`` with the dialog box centered over them."""
    if not frame_rows or width < 8:
        return frame_rows
    box = dialog_box(dialog, theme)
    content_width = max([display_width(box.title) + 2] + [display_width(line) for line in box.lines])
    inner_width = max(20, min(content_width + 2, width - 6))
    max_body_rows = max(1, len(frame_rows) - 4)
    rows = _box_rows(box, inner_width, max_body_rows, theme.reset)

    top = max(0, (len(frame_rows) - len(rows)) // 2)
    left = max(0, (width - inner_width - 2) // 2)
    out = list(frame_rows)
    for offset, box_row in enumerate(rows):
        target = top + offset
        if target >= len(out):
            break
        prefix = fit_ansi_line(out[target], left, theme.reset)
        out[target] = f"{theme.reset}{prefix}{theme.reset}{box_row}"
    return out
