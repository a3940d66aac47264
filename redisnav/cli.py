"""Command-line front door for redis-nav.

Parses CLI options, merges them with the optional config file, sets up
logging, and dispatches into the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from .config import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ConfigError,
    load_config_file,
    resolve_app_config,
)
from .format import DEFAULT_STYLE
from .logging_setup import configure_logging
from .runtime import run_app
from .ui_theme import available_theme_names

logger = logging.getLogger(__name__)


def _port(value: str) -> int:
    """argparse type for TCP port numbers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from exc
    if not 0 < parsed < 65536:
        raise argparse.ArgumentTypeError("port must be between 1 and 65535")
    return parsed


def _db_index(value: str) -> int:
    """argparse type for non-negative database numbers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid database number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("database number must be >= 0")
    return parsed


def _delimiter(value: str) -> str:
    """argparse type for single-character key delimiters."""
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"delimiter must be a single character: {value!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redis-nav",
        description="Browse a Redis keyspace as a tree in the terminal.",
    )
    parser.add_argument(
        "connection",
        nargs="?",
        default=None,
        help="redis:// or rediss:// URL, or the name of a profile in the config file.",
    )
    parser.add_argument("-H", "--host", default=DEFAULT_HOST, help=f"Redis host (default: {DEFAULT_HOST}).")
    parser.add_argument("-p", "--port", type=_port, default=DEFAULT_PORT, help=f"Redis port (default: {DEFAULT_PORT}).")
    parser.add_argument("-a", "--password", default=None, help="Redis password (or set REDIS_PASSWORD).")
    parser.add_argument("-n", "--db", type=_db_index, default=0, help="Database number (default: 0).")
    parser.add_argument(
        "-d",
        "--delimiter",
        dest="delimiters",
        type=_delimiter,
        action="append",
        default=[],
        help="Key delimiter; repeat for several (default: ':').",
    )
    parser.add_argument("--profile", default=None, help="Connection profile from the config file.")
    parser.add_argument("--readonly", action="store_true", help="Disable edit and delete.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Config file path (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for value highlighting.")
    parser.add_argument("--no-color", action="store_true", help="Disable colors and highlighting.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at debug level.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and launch the browser.

    ``argv`` is primarily for tests; ``None`` reads ``sys.argv``.
    """
    args = build_parser().parse_args(argv)
    log_path = configure_logging(args.log_file, logging.DEBUG if args.verbose else logging.WARNING)

    file_config = load_config_file(args.config)
    try:
        config = resolve_app_config(
            connection=args.connection,
            host=args.host,
            port=args.port,
            password=args.password,
            db=args.db,
            delimiters=tuple(args.delimiters),
            profile_name=args.profile,
            readonly=args.readonly,
            theme=args.theme,
            file_config=file_config,
        )
    except ConfigError as exc:
        raise SystemExit(f"redis-nav: {exc}") from exc

    logger.debug("starting with delimiters %r, logs in %s", config.ui.delimiters, log_path)
    run_app(config, style=args.style, no_color=args.no_color)


if __name__ == "__main__":
    main()
