"""Logging setup for hanjadeck."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from ..config import Config

LOGGER_NAME = "hanjadeck"
LOG_FILE_NAME = "hanjadeck.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(module)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_to_file: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """
    Configure the package logger.

    Library modules only call ``logging.getLogger(__name__)``; applications
    embedding hanjadeck call this once at startup to attach handlers.

    Args:
        level: Logging level name (defaults to Config.LOG_LEVEL / HANJA_LOG_LEVEL)
        log_file: Optional path for a rotating log file
        log_to_file: Write to ``Config.LOG_DIR/hanjadeck.log`` when no
            ``log_file`` is given
        max_bytes: Rotation size for the log file
        backup_count: Number of rotated files to keep

    Returns:
        The configured ``hanjadeck`` logger
    """
    level = level or Config.LOG_LEVEL
    if log_file is None and log_to_file:
        log_file = str(Path(Config.LOG_DIR) / LOG_FILE_NAME)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Re-running setup replaces handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
