"""Formatting helpers for key-tree rows."""

from __future__ import annotations

from ..format import sanitize_terminal_text
from ..ui_theme import DEFAULT_THEME, UITheme
from .flatten import FlatNode


def tree_marker_for(row: FlatNode) -> str:
    """Expansion marker: ``[-]`` open, ``[+]`` closed, ``[ ]`` empty folder, blank for keys."""
    if row.has_children:
        return "[-] " if row.expanded else "[+] "
    if row.is_folder:
        return "[ ] "
    return "    "


def format_tree_row(row: FlatNode, theme: UITheme | None = None) -> str:
    """Render one tree row as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * row.depth
    color = active_theme.tree_folder if row.has_children else active_theme.tree_key
    marker = tree_marker_for(row)
    suffix = ""
    if row.has_children:
        suffix = f"{active_theme.tree_count} ({row.child_count}){reset}"
    return f"{indent}{active_theme.tree_marker}{marker}{reset}{color}{sanitize_terminal_text(row.name)}{reset}{suffix}"
