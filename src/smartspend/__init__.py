"""Core package for the SmartSpend conversational expense assistant.

Importing the package configures a single ``smartspend`` logger hierarchy so
submodules can call :func:`get_logger` without repeating handler setup.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_ROOT_LOGGER_NAME = "smartspend"


def _bootstrap_logging() -> None:
    """Configure the package-wide logger once."""
    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    if logger.handlers:
        # Already configured (e.g. by the test harness).
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(level if level in logging.getLevelNamesMapping() else "INFO")
    logger.propagate = False


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return a child logger scoped under the package root."""
    name = (
        _ROOT_LOGGER_NAME
        if not component
        else f"{_ROOT_LOGGER_NAME}.{component.strip('.')}"
    )
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Apply a configured level (e.g. ``Settings.log_level``) to the package logger."""
    normalized = (level or "INFO").upper()
    if normalized not in logging.getLevelNamesMapping():
        normalized = "INFO"
    logging.getLogger(_ROOT_LOGGER_NAME).setLevel(normalized)


_bootstrap_logging()

__all__ = ["get_logger", "set_log_level"]
