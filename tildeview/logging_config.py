"""Logging setup for the viewer.

The terminal is in raw mode while the viewer runs, so records go to a rotating
file under the user log directory instead of stderr. Key tracing is a separate
logger switched on with ``TILDEVIEW_KEYTRACE``.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
import tempfile
from pathlib import Path

from platformdirs import user_log_dir

logger = logging.getLogger("tildeview")
KEY_LOGGER = logging.getLogger("tildeview.keyevents")

LOG_FILENAME = "tildeview.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAX_LOG_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
KEYTRACE_ENV = "TILDEVIEW_KEYTRACE"


def _log_dir() -> Path:
    preferred = Path(user_log_dir("tildeview", appauthor=False))
    try:
        preferred.mkdir(parents=True, exist_ok=True)
        return preferred
    except OSError:
        return Path(tempfile.gettempdir())


def keytrace_enabled() -> bool:
    return os.environ.get(KEYTRACE_ENV, "").strip().lower() in {"1", "true", "yes"}


def setup_logging(level: str = "WARNING", log_dir: Path | None = None) -> Path | None:
    """Attach a rotating file handler to the ``tildeview`` logger.

    Returns the log file path, or ``None`` when no handler could be created.
    Never raises; problems are reported on stderr before raw mode starts.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False

    target = (log_dir or _log_dir()) / LOG_FILENAME
    try:
        handler = logging.handlers.RotatingFileHandler(
            target,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"tildeview: logging disabled: {exc}", file=sys.stderr)
        logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    KEY_LOGGER.setLevel(logging.DEBUG if keytrace_enabled() else logging.WARNING)
    return target
