# === FILE: page_scout/logger.py ===
"""Logging setup for PageScout.

Library modules log through children of the ``PageScout`` logger
(``get_logger("session")`` → ``PageScout.session``). Nothing is configured at
import time; the CLI calls :func:`configure`.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "PageScout"


def _handler(fmt: str, log_file: Path | str | None = None) -> logging.Handler:
    if log_file is None:
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    else:
        handler = RotatingFileHandler(
            filename=str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: Union[int, str] = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Send PageScout logs to stdout, plus a rotating *log_file* when given.

    Existing handlers are replaced, so repeated calls do not duplicate output.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()
    lg.addHandler(_handler(log_format))
    if log_file is not None:
        lg.addHandler(_handler(log_format, log_file))
    lg.propagate = False
    return lg


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger: logging.Logger = logging.getLogger(LOGGER_NAME)

__all__ = ["logger", "configure", "get_logger", "LOGGER_NAME"]
