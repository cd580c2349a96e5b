"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import LoggingConfig, get_data_dir

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def get_log_file_path(logging_config: LoggingConfig) -> Path:
    """Resolve the log file from config, defaulting to the data directory."""
    if logging_config.log_file:
        return Path(logging_config.log_file)
    return get_data_dir() / "tunely.log"


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru sinks for the backend process.

    Args:
        log_file: Path to log file
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        rotation: Size or interval at which the log file rotates
        retention: Number of rotated files to keep
        console_output: Also log to stderr
    """
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=rotation,
        retention=retention,
        level=level,
        format=LOG_FORMAT,
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_from_config(logging_config: LoggingConfig) -> Path:
    """Initialize logging from the [logging] config section, returns the log path."""
    log_file = get_log_file_path(logging_config)
    setup_loguru(
        log_file,
        level=logging_config.level,
        rotation=logging_config.rotation,
        retention=logging_config.retention,
        console_output=logging_config.console_output,
    )
    return log_file
