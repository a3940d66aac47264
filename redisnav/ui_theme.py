"""UI theme definitions and selection helpers.

Themes are ANSI palettes for tree rows, pane chrome, TTL badges, and dialogs.
JSON/XML highlighting in the value pane uses a separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    title: str
    tree_marker: str
    tree_folder: str
    tree_key: str
    tree_count: str
    status: str
    error: str
    ttl_normal: str
    ttl_warning: str
    ttl_critical: str
    readonly_badge: str
    diff_added: str
    diff_removed: str
    hex_offset: str
    hex_bytes: str
    hex_ascii: str
    help_heading: str
    help_key: str
    help_dim: str
    dialog_border: str
    dialog_warning: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;81m",
    tree_marker="\033[38;5;44m",
    tree_folder="\033[1;34m",
    tree_key="\033[38;5;252m",
    tree_count="\033[2;38;5;250m",
    status="\033[38;5;250m",
    error="\033[1;38;5;203m",
    ttl_normal="\033[38;5;42m",
    ttl_warning="\033[38;5;214m",
    ttl_critical="\033[1;38;5;203m",
    readonly_badge="\033[1;38;5;214m",
    diff_added="\033[38;5;42m",
    diff_removed="\033[38;5;203m",
    hex_offset="\033[2;38;5;245m",
    hex_bytes="\033[38;5;229m",
    hex_ascii="\033[38;5;81m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    dialog_border="\033[38;5;45m",
    dialog_warning="\033[1;38;5;214m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;45m",
    tree_marker="\033[38;5;39m",
    tree_folder="\033[1;38;5;45m",
    tree_key="\033[38;5;153m",
    tree_count="\033[2;38;5;110m",
    status="\033[38;5;110m",
    error="\033[1;38;5;210m",
    ttl_normal="\033[38;5;84m",
    ttl_warning="\033[38;5;215m",
    ttl_critical="\033[1;38;5;210m",
    readonly_badge="\033[1;38;5;215m",
    diff_added="\033[38;5;84m",
    diff_removed="\033[38;5;210m",
    hex_offset="\033[2;38;5;67m",
    hex_bytes="\033[38;5;153m",
    hex_ascii="\033[38;5;45m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    dialog_border="\033[38;5;39m",
    dialog_warning="\033[1;38;5;215m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="\033[7m",
    reset="\033[0m",
    title="",
    tree_marker="",
    tree_folder="",
    tree_key="",
    tree_count="",
    status="",
    error="",
    ttl_normal="",
    ttl_warning="",
    ttl_critical="",
    readonly_badge="",
    diff_added="",
    diff_removed="",
    hex_offset="",
    hex_bytes="",
    hex_ascii="",
    help_heading="",
    help_key="",
    help_dim="",
    dialog_border="",
    dialog_warning="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    candidate = str(name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "resolve_theme",
]
