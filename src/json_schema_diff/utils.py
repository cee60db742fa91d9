"""Utility functions for json-schema-diff."""

import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure loguru sinks.

    Logs go to stderr so that stdout only carries diff output. A log file, when
    given, always records at DEBUG level.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=None)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f"Logging configured at {level.upper()}")
