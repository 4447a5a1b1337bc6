"""Centralized logging setup for the LMS service."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> None:
    """Configure the root logger once per process.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to LOG_LEVEL from config.
        log_file: Optional path of a rotating log file. Defaults to LOG_FILE.
        max_file_size: Maximum size of the log file before rotation (bytes).
        backup_count: Number of rotated files to keep.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, (log_level or LOG_LEVEL).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    log_file = log_file or LOG_FILE
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Uvicorn's access log duplicates what the routers log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
