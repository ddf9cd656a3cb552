"""Logging setup for the command line.

The library itself only emits DEBUG records on the ``git_diff`` logger and
never installs handlers; the CLI attaches a single stderr handler on demand.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "git_diff"


def configure_logging(level: int | str = logging.DEBUG) -> logging.Logger:
    """Configure and return the package logger.

    Repeated calls update the level without duplicating handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level_value = _to_logging_level(level)
    logger.setLevel(level_value)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level_value)

    return logger


def _to_logging_level(value: int | str) -> int:
    if isinstance(value, int):
        return value
    mapping = logging.getLevelNamesMapping()
    return mapping.get(value.upper(), logging.WARNING)
