"""Logging utilities built on top of :mod:`loguru`."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(log_file: Optional[Path] = None, level: str = "INFO", console: bool = True) -> None:
    """Configure the global loguru logger for the timing service.

    Args:
        log_file: Optional file path for a rotating log sink.
        level: Minimum log level (string understood by loguru).
        console: Whether to keep a stderr sink.
    """

    logger.remove()
    if console:
        logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level, format=LOG_FORMAT, rotation="10 MB", retention="7 days", encoding="utf-8")
    logger.debug("Logging configured at level {} (file={})", level, log_file)


__all__ = ["setup_logging", "logger", "LOG_FORMAT"]
