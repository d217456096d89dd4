"""Small shared helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Attaches one stream handler the first time a logger is configured, so
    repeated calls from scripts and tests do not duplicate output.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


__all__ = ["LOG_DATE_FORMAT", "LOG_FORMAT", "setup_logging"]
