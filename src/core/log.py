"""Logging setup. All modules simply do `from loguru import logger`; this only decides where records go."""

import sys

from loguru import logger

from src.core.config import Settings

LOG_FORMAT = "{time:HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(settings: Settings) -> int:
    """Replace loguru's default sink with a stderr sink at the configured level. Returns the handler id."""
    logger.remove()
    return logger.add(sys.stderr, level=settings.log_level, format=LOG_FORMAT)
