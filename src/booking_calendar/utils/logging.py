"""Logging configuration for the booking calendar engine."""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

LOGGER_NAME = "booking_calendar"

# httpx logs every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3")


class UTCFormatter(logging.Formatter):
    """Formatter stamping records in UTC, matching event timestamps."""

    converter = time.gmtime


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so event listings on stdout can be piped.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path, always written at DEBUG

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logger.level)
    console.setFormatter(UTCFormatter("%(asctime)sZ %(levelname)-7s %(name)s: %(message)s"))
    logger.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            UTCFormatter("%(asctime)sZ %(levelname)s %(name)s %(filename)s:%(lineno)d %(message)s")
        )
        logger.addHandler(file_handler)
        # Let DEBUG records reach the file even when the console is quieter
        logger.setLevel(logging.DEBUG)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
