# src/algoimpact/shared/logging_conf.py
"""
Logging Configuration - Logging Setup and Configuration

This module provides centralized logging configuration for the entire application.
It sets up logging with consistent formatting, log levels, and output handlers.
Records go to stderr by default so that stdout stays reserved for the JSON lines
printed by the streaming driver.

Files that USE this module:
- algoimpact.app (setup_logging function for logging initialization)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union
from logging.handlers import RotatingFileHandler


def setup_logging(
    level=logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    log_stdout: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure application-wide logging settings.

    Can output to stderr (or stdout when requested), a rotating file, or both.

    Args:
        level: Logging level (default: logging.INFO), as int or level name
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files (log file is algoimpact.log)
        log_stdout: Write console records to stdout instead of stderr
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)
    """
    log_format = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    console_handler = logging.StreamHandler(sys.stdout if log_stdout else sys.stderr)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    handlers = [console_handler]

    log_file_path = None
    if log_file or log_dir:
        if log_dir:
            log_dir = Path(log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file_path = log_dir / "algoimpact.log"
        else:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(log_format, date_format))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )

    # requests/urllib3 log every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    if log_file_path is not None:
        logger.info("Logging configured: file=%s, level=%s", log_file_path, level)
    else:
        logger.info("Logging configured: %s, level=%s", "stdout" if log_stdout else "stderr", level)
