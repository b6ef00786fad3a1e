"""
Unified output system using Loguru.
Messages go to the log file and, for user-facing ones, to the console.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import get_data_dir
from .console import safe_print

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "songdb.log"


def setup_loguru(
    log_file: Path | None = None,
    level: str = "INFO",
    console_output: bool = False,
) -> None:
    """
    Configure loguru for file logging, optionally mirrored to stderr.

    Args:
        log_file: Path to log file (default: ~/.local/share/songdb/songdb.log)
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        console_output: Whether to also write log records to stderr
    """
    log_file = log_file or get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,
        level=level,
        format=LOG_FORMAT,
        encoding="utf-8",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to the log file AND prints to the console.

    Use this instead of print() for user-facing messages that should also be logged.

    Args:
        message: User-facing message
        level: Log level (debug, info, success, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    safe_print(message, style=LEVEL_STYLES.get(level), stderr=level == "error")
