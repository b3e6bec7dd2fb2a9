"""Utility functions for treetable."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    home_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
) -> None:  # pragma: no cover
    """
    Configure logging for the application.

    Args:
        log_level: Level for the stderr sink
        home_dir: Directory the log file is written under
        log_file: Name of the log file, no file is written when omitted
    """
    # Remove default handler and any existing handlers
    logger.remove()

    # Add file handler if we are not running tests and a file was requested
    if log_file and home_dir is not None and "pytest" not in sys.modules:
        log_path = home_dir / log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_path),
            level=log_level,
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=True,
            enqueue=True,
            colorize=False,
        )

    # Add stderr handler
    logger.add(sys.stderr, level=log_level, backtrace=True, diagnose=True, colorize=True)

    logger.info(f"Logging initialized at {log_level}")
