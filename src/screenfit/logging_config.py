"""
Logging setup.

Modules log through logging.getLogger(__name__); the entry point calls
init_logging() once.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_LOGGING_INITIALIZED = False


def init_logging(level: str | int = "INFO") -> None:
    """
    Configure the root 'screenfit' logger with a single stderr handler.

    Safe to call more than once; later calls only update the level.
    """
    global _LOGGING_INITIALIZED

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("screenfit")
    logger.setLevel(level)

    if _LOGGING_INITIALIZED:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _LOGGING_INITIALIZED = True
