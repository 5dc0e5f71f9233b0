"""Logging setup for the dance floor tools."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"
LEVEL_ENV = "DANCE_FLOOR_LOG_LEVEL"
DIR_ENV = "DANCE_FLOOR_LOG_DIR"
MAX_LOG_BYTES = 2_000_000
LOG_BACKUPS = 5


def _default_log_dir() -> Path:
    override = os.getenv(DIR_ENV)
    if override:
        return Path(override)
    local_appdata = os.getenv("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / "DanceFloor" / "logs"
    return Path.home() / ".dance_floor" / "logs"


def _resolve_level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _is_console_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(
        handler, logging.FileHandler
    )


def init_logging(app_name: str = "dance_floor") -> Path:
    """Attach a rotating file log and a stderr stream to the root logger.

    Safe to call repeatedly; handlers that already exist are kept. Returns
    the path of the log file.
    """
    log_dir = _default_log_dir()
    log_path = log_dir / f"{app_name}.log"
    level = _resolve_level(os.getenv(LEVEL_ENV))
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=MAX_LOG_BYTES,
                backupCount=LOG_BACKUPS,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
    except OSError:
        # Unwritable log dir: keep console logging only.
        logging.basicConfig(level=level, format=LOG_FORMAT)
    if not any(_is_console_handler(h) for h in root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)
    for handler in root.handlers:
        handler.setLevel(level)

    logging.getLogger(app_name).info("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust console (stderr) handler level."""
    for handler in logging.getLogger().handlers:
        if _is_console_handler(handler):
            handler.setLevel(level)
