"""Logging setup for the server and CLI.

Console output goes through rich; when ``LOG_DIR`` is set, a copy of every
record is also written to a file rotated at midnight and kept for 14 days.
"""

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FILE_NAME = "capture_hub.log"
LOG_RETENTION_DAYS = 14
FILE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None, log_dir: str | Path | None = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (defaults to LOG_LEVEL env var, then INFO).
        log_dir: Directory for rotated log files (defaults to LOG_DIR env var;
                 no file logging when unset).
    """
    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    log_dir = log_dir or os.environ.get("LOG_DIR")

    handlers: list[logging.Handler] = [
        RichHandler(console=Console(stderr=True), show_path=False, markup=False),
    ]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            directory / LOG_FILE_NAME,
            when="midnight",
            backupCount=LOG_RETENTION_DAYS,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=level_name, format="%(message)s", handlers=handlers, force=True)
