"""
Loguru sink setup shared by the API and the command-line scripts.
"""

import sys

from loguru import logger

from core.config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: str = LOG_LEVEL, log_file: str | None = LOG_FILE) -> None:
    """Replace loguru's default sink with stderr and an optional rotating file."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=LOG_FORMAT, rotation="10 MB", encoding="utf-8")
