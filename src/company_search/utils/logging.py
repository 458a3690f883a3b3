"""Logging helpers for Company Search."""

from __future__ import annotations

import logging
import sys
from typing import Optional

_ROOT_LOGGER_NAME = "company_search"
_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under the package logger.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    if name != _ROOT_LOGGER_NAME and not name.startswith(f"{_ROOT_LOGGER_NAME}."):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    fmt: Optional[str] = None,
    stream=None,
) -> logging.Logger:
    """Configure the package logger.

    Calling this more than once replaces the previous handler instead of
    stacking a new one.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        fmt: Optional log format string
        stream: Output stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_company_search_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    handler._company_search_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return logger
