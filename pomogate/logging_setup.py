"""Logging for Pomogate.

Records go to a size-rotated file under the state directory, one JSON
object per line, and warnings (or everything with ``--verbose``) to
stderr.  Structured data rides along as ``extra={"fields": {...}}``::

    log.info("break completed", extra={"fields": {"elapsed": 312.0}})
"""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "pomogate.log"
MAX_LOG_BYTES = 512_000
LOG_BACKUPS = 5


class JsonFormatter(logging.Formatter):
    """Formats a record as a single JSON line, merging its ``fields``."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(log_dir: Path, level: int = logging.INFO) -> Path:
    """Install the file and console handlers on the root logger.

    Returns the path of the active log file.  Calling it again replaces
    the handlers instead of stacking them.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    file_handler = RotatingFileHandler(
        log_path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setFormatter(JsonFormatter())

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)
    console.setFormatter(logging.Formatter("pomogate %(levelname)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
