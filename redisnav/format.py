"""Payload format detection, pretty-printing, and syntax highlighting.

String values are classified as JSON, XML, HTML, binary, or plain text.
JSON is re-indented before display; JSON/XML/HTML are highlighted with
Pygments and binary payloads become a hex dump.
"""

from __future__ import annotations

import json
import re
from enum import Enum

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import HtmlLexer, JsonLexer, XmlLexer
from pygments.util import ClassNotFound

from .ui_theme import DEFAULT_THEME, UITheme

DEFAULT_STYLE = "monokai"
HEX_BYTES_PER_ROW = 16

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_BINARY_SIGNATURES: tuple[bytes, ...] = (
    b"\x89PNG",
    b"\xff\xd8\xff",
    b"GIF8",
    b"%PDF",
)
_LEXERS = {
    "json": JsonLexer,
    "xml": XmlLexer,
    "html": HtmlLexer,
}
_FORMATTERS: dict[str, Terminal256Formatter] = {}


class DetectedFormat(Enum):
    JSON = "json"
    XML = "xml"
    HTML = "html"
    BINARY = "binary"
    TEXT = "text"

    @property
    def label(self) -> str:
        return self.value.upper()

    @property
    def file_suffix(self) -> str:
        if self is DetectedFormat.JSON:
            return ".json"
        if self in (DetectedFormat.XML, DetectedFormat.HTML):
            return ".xml"
        return ".txt"


def _looks_like_text(data: bytes) -> bool:
    if len(data) >= 4 and data.startswith(_BINARY_SIGNATURES):
        return False
    control_count = sum(1 for byte in data if byte < 32 and byte not in (9, 10, 13))
    # Fewer than 10% control bytes.
    return control_count == 0 or control_count * 10 < len(data)


def detect_format(data: bytes) -> DetectedFormat:
    if not _looks_like_text(data):
        return DetectedFormat.BINARY
    try:
        text = data.decode("utf-8").strip()
    except UnicodeDecodeError:
        return DetectedFormat.BINARY

    if (text.startswith("{") and text.endswith("}")) or (text.startswith("[") and text.endswith("]")):
        try:
            json.loads(text)
        except ValueError:
            pass
        else:
            return DetectedFormat.JSON

    if text.startswith("<?xml") or text.startswith("<!DOCTYPE"):
        return DetectedFormat.XML
    if "<html" in text.lower():
        return DetectedFormat.HTML
    if text.startswith("<") and text.endswith(">"):
        return DetectedFormat.XML
    return DetectedFormat.TEXT


def pretty_json(text: str) -> str:
    """Re-indent a JSON document; raises ``ValueError`` if it does not parse."""
    return json.dumps(json.loads(text), indent=2, ensure_ascii=False)


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        formatter = _formatter_for_style(DEFAULT_STYLE) if style != DEFAULT_STYLE else Terminal256Formatter()
    _FORMATTERS[style] = formatter
    return formatter


def highlight_source(text: str, fmt: DetectedFormat, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``text`` for ``fmt``; formats without a lexer are returned unchanged."""
    lexer_cls = _LEXERS.get(fmt.value)
    if lexer_cls is None:
        return text
    highlighted = pygments_highlight(text, lexer_cls(), _formatter_for_style(style))
    if not text.endswith("\n") and highlighted.endswith("\n"):
        highlighted = highlighted[:-1]
    return highlighted


def format_hex_dump(data: bytes, theme: UITheme | None = None) -> list[str]:
    """Classic ``offset  hex bytes  |ascii|`` rows, 16 bytes per row."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    rows: list[str] = []
    for offset in range(0, len(data), HEX_BYTES_PER_ROW):
        chunk = data[offset : offset + HEX_BYTES_PER_ROW]
        left = " ".join(f"{byte:02x}" for byte in chunk[:8])
        right = " ".join(f"{byte:02x}" for byte in chunk[8:])
        hex_part = f"{left:<23}  {right:<23}"
        ascii_part = "".join(chr(byte) if 32 <= byte < 127 else "." for byte in chunk)
        rows.append(
            f"{active_theme.hex_offset}{offset:08x}{reset}  "
            f"{active_theme.hex_bytes}{hex_part}{reset} "
            f"{active_theme.hex_ascii}|{ascii_part}|{reset}"
        )
    return rows


def render_string_payload(
    data: bytes,
    *,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
    theme: UITheme | None = None,
) -> tuple[DetectedFormat, list[str]]:
    """Detect the payload format and return display lines for the value pane."""
    fmt = detect_format(data)
    if fmt is DetectedFormat.BINARY:
        return fmt, format_hex_dump(data, theme)

    text = data.decode("utf-8")
    if fmt is DetectedFormat.JSON:
        try:
            text = pretty_json(text)
        except ValueError:
            fmt = DetectedFormat.TEXT
    text = sanitize_terminal_text(text)
    if not no_color:
        text = highlight_source(text, fmt, style)
    return fmt, text.split("\n")
