"""Logging setup for the burrow package.

Modules log through ``logging.getLogger(__name__)``; only the ``burrow``
logger gets a handler here, so pygame and other libraries keep their own
output untouched.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

PACKAGE_LOGGER = "burrow"
_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Logger:
    """Send burrow log records to ``stream`` (stderr by default).

    Calling it again replaces the previous handler instead of stacking a
    second one.

    Args:
        level: Level name such as ``"DEBUG"``; unknown names fall back to
            INFO.
        stream: Where records are written.

    Returns:
        The configured package logger.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger
