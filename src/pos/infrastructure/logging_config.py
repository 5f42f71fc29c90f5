"""Package-wide logging setup."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "pos"


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """Attach a stderr handler to the ``pos`` logger (once) and set its level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger
