"""
Logging utilities for the command line entry point.

Library modules only create module loggers; handlers are attached here,
once, by whoever owns the process.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(
    verbosity: int = 0,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Attach a stream handler to the package logger.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG
        stream: Output stream (default stderr)

    Returns:
        The attached handler (for later removal).

    Example:
        >>> handler = configure_logging(verbosity=1)
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logger = logging.getLogger("inspection_report")
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler


def detach_handler(handler: logging.Handler) -> None:
    """Remove a handler attached by configure_logging()."""
    logging.getLogger("inspection_report").removeHandler(handler)
