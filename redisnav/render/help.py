"""Help dialog content.

Keybinding text is grouped by pane; rendering is presentation-only.
"""

from __future__ import annotations

from ..ui_theme import UITheme

_HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "TREE",
        (
            ("j/k", "move down/up"),
            ("l/Enter", "expand or load value"),
            ("h", "collapse or go to parent"),
            ("g/G", "first/last row"),
            ("PgUp/PgDn", "page"),
        ),
    ),
    (
        "VALUE",
        (
            ("j/k", "scroll"),
            ("Ctrl+D/U", "scroll 10 lines"),
            ("0", "back to top"),
        ),
    ),
    (
        "ACTIONS",
        (
            ("Tab", "switch pane"),
            ("e", "edit string value"),
            ("d", "delete key"),
            ("r", "reload value"),
            ("R", "rescan keys"),
            ("?", "help"),
            ("q", "quit"),
        ),
    ),
)


def help_lines(theme: UITheme) -> list[str]:
    reset = theme.reset
    lines: list[str] = []
    for heading, bindings in _HELP_SECTIONS:
        if lines:
            lines.append("")
        lines.append(f"{theme.help_heading}{heading}{reset}")
        for keys, description in bindings:
            lines.append(f"  {theme.help_key}{keys:<10}{reset} {description}")
    lines.append("")
    lines.append(f"{theme.help_dim}Press Esc to close{reset}")
    return lines
