"""Console logging for the SDK."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "shopify_sdk"
LOG_FORMAT = "[%(levelname)s] %(message)s"


class _BelowLevel(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


class _SdkConsoleHandler(logging.StreamHandler):
    pass


def configure_logging(
    level: int | str = logging.INFO,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> logging.Logger:
    """Route SDK logs to the console.

    Debug and info records go to stdout, warnings and errors to stderr.
    Calling this again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _SdkConsoleHandler):
            logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    out_handler = _SdkConsoleHandler(stdout or sys.stdout)
    out_handler.setLevel(logging.DEBUG)
    out_handler.addFilter(_BelowLevel(logging.WARNING))
    out_handler.setFormatter(formatter)

    err_handler = _SdkConsoleHandler(stderr or sys.stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(formatter)

    logger.addHandler(out_handler)
    logger.addHandler(err_handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


__all__ = ["configure_logging", "LOGGER_NAME"]
