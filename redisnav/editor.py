"""Editor launch helper for editing string values outside the TUI.

Writes the value to a temporary file, runs ``$EDITOR`` (then ``$VISUAL``, then
``vi``) while raw/alternate-screen mode is suspended, and reads the file back.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from collections.abc import Callable, Mapping
from pathlib import Path

from .format import detect_format

FALLBACK_EDITOR = "notepad" if os.name == "nt" else "vi"
MAX_FILENAME_CHARS = 50


class EditorError(Exception):
    """The editor could not be started or exited unsuccessfully."""


def sanitize_filename(key: str) -> str:
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in key)
    return safe[:MAX_FILENAME_CHARS] or "value"


def editor_command(environ: Mapping[str, str] | None = None) -> list[str]:
    env = os.environ if environ is None else environ
    for name in ("EDITOR", "VISUAL"):
        cmd = shlex.split(env.get(name, "").strip())
        if cmd:
            return cmd
    return [FALLBACK_EDITOR]


def edit_value(
    key: str,
    value: bytes,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
    environ: Mapping[str, str] | None = None,
) -> bytes | None:
    """Edit ``value`` externally; returns new bytes, or ``None`` if unchanged."""
    cmd = editor_command(environ)
    suffix = detect_format(value).file_suffix
    with tempfile.TemporaryDirectory(prefix="redis-nav-") as tmp:
        target = Path(tmp) / f"{sanitize_filename(key)}{suffix}"
        target.write_bytes(value)

        disable_tui_mode()
        try:
            result = subprocess.run([*cmd, str(target)], check=False)
        except OSError as exc:
            raise EditorError(f"failed to launch editor {cmd[0]!r}: {exc}") from exc
        finally:
            enable_tui_mode()

        if result.returncode != 0:
            raise EditorError(f"editor exited with status {result.returncode}")
        new_value = target.read_bytes()

    if new_value == value:
        return None
    return new_value
