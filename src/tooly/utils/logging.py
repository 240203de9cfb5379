"""Logging setup shared by the extension host and the command-line tool.

Records go to ``tooly.log`` inside the log directory, which is
``TOOLY_LOG_DIR`` when set and ``<app dir>/logs`` otherwise, plus an optional
console stream.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from ..services.settings import resolve_app_dir

__all__ = ["LOG_FILENAME", "resolve_log_dir", "setup_logging"]

LOG_FILENAME = "tooly.log"
_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Observer threads and Qt emit chatter at INFO; keep them at WARNING or above.
_QUIET_LOGGERS: tuple[str, ...] = ("watchdog", "PySide6")

_active_log_path: Path | None = None


def resolve_log_dir(log_dir: Path | str | None = None) -> Path:
    """Return the directory for ``tooly.log``: explicit, ``TOOLY_LOG_DIR``, then app dir."""

    if log_dir is not None:
        return Path(log_dir).expanduser()
    env_override = os.environ.get("TOOLY_LOG_DIR")
    if env_override:
        return Path(env_override).expanduser()
    return resolve_app_dir() / "logs"


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path:
    """Install the rotating log file (and console stream) on the root logger.

    Repeated calls are no-ops returning the active log file unless ``force``
    is set.
    """

    global _active_log_path
    if _active_log_path is not None and not force:
        return _active_log_path

    log_path = resolve_log_dir(log_dir) / LOG_FILENAME
    log_path.parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.captureWarnings(True)
    quiet_level = max(level, logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    _active_log_path = log_path
    return log_path
