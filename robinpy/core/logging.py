"""Logging utilities for robinpy modules."""

import logging
from typing import Optional

PACKAGE_LOGGERS = (
    'robinpy',
    'robinpy.api',
    'robinpy.auth',
    'robinpy.mfa',
    'robinpy.session',
    'robinpy.documents',
    'robinpy.client',
)


def get_logger(name: str) -> logging.Logger:
    """Get a robinpy logger that inherits from the root logger.

    Loggers propagate to root so that basicConfig() is enough to see
    output. When root has no handlers yet, the level defaults to WARNING
    so that importing the library stays quiet.

    Args:
        name: Dotted logger name, e.g. 'robinpy.session'

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)

    return logger


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """Render a token for log output, keeping only its last characters."""
    if not value:
        return '<none>'
    if len(value) <= visible:
        return '*' * len(value)
    return '*' * 6 + value[-visible:]
