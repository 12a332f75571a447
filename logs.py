# logs.py
"""Logging for the Fale proxy: one ``fale`` logger, children per module."""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME = "fale"


def configure(*, level: int | str = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    """Send the project logger to stdout and, if *log_file* is set, a rotating file."""
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.propagate = False
    return lg


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(LOGGER_NAME).getChild(name)
