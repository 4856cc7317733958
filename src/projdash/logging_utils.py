"""Logging setup for projdash."""

from __future__ import annotations

import logging
from pathlib import Path

from .constants import APP_NAME, LOG_FORMAT

_HANDLER_NAME = f"{APP_NAME}-handler"


def configure_logging(level: str | int = logging.INFO, log_file: Path | None = None) -> logging.Logger:
    """Install one handler on the package logger, replacing any earlier one.

    Logs go to stderr, or to ``log_file`` when given. Safe to call repeatedly.
    """
    app_logger = logging.getLogger(APP_NAME)

    for existing in list(app_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            app_logger.removeHandler(existing)
            existing.close()

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    app_logger.addHandler(handler)
    app_logger.setLevel(level)
    return app_logger
