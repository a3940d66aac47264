"""Log-file configuration.

The terminal belongs to the UI while it runs, so records go to a rotating
file under the platform log directory instead of stderr.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "redis-nav.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
MAX_LOG_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3


def configure_logging(log_path: Path | None = None, level: int = logging.WARNING) -> Path:
    """Route the ``redisnav`` logger hierarchy to a rotating log file."""
    path = DEFAULT_LOG_PATH if log_path is None else log_path
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("redisnav")
    logger.setLevel(level)
    logger.propagate = False
    # Drop handlers from an earlier call so records are not written twice.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.debug("logging to %s at level %s", path, logging.getLevelName(level))
    return path
