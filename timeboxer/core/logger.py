"""Loguru sinks for the timeboxer CLI.

Nothing is configured on import, so library callers keep whatever sinks
they already have. The CLI calls setup_logger once per invocation.
"""

import sys
from pathlib import Path

from loguru import logger

from timeboxer.config.settings import settings

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"

# Bound context (status, attempts, error codes) is only kept in the file sink
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logger(
    level: str | None = None,
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's sinks with a stderr sink and an optional rotating file.

    Args:
        level: Minimum level; defaults to TIMEBOXER_LOG_LEVEL
        log_file: Log file path; defaults to TIMEBOXER_LOG_FILE, console only when unset
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f"Logger initialized with level={level}, file={log_file or '-'}")
