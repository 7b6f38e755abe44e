"""Logger-tree setup driven by LoggingSettings."""

from __future__ import annotations

import logging

from .settings import get_settings

ROOT_LOGGER = "retrycase"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Apply a level to the `retrycase` logger tree.

    Args:
        level: Explicit level; defaults to RETRYCASE_LOG_LEVEL

    Returns:
        The configured root `retrycase` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level if level is not None else get_settings().logging.level)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger
