"""Logging setup for Carrousel with file and console output"""

import logging
import logging.handlers
import sys
from pathlib import Path

from carrousel.config import LoggingConfig

DEFAULT_MAX_BYTES = 10 * 1024 * 1024

_SIZE_UNITS = {
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}


def parse_size(size: str, default: int = DEFAULT_MAX_BYTES) -> int:
    """
    Parse a size string such as "10MB" into bytes.

    Args:
        size: Size with a KB, MB or GB suffix, or a plain byte count
        default: Value returned when the string cannot be parsed

    Returns:
        Size in bytes
    """
    size = size.strip().upper()
    for suffix, multiplier in _SIZE_UNITS.items():
        if size.endswith(suffix):
            try:
                return int(float(size[: -len(suffix)]) * multiplier)
            except ValueError:
                return default
    try:
        return int(size)
    except ValueError:
        return default


def setup_logging(
    log_level: str = "INFO",
    log_file_name: str | None = None,
    log_to_console: bool = True,
    log_to_file: bool = True,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = 5,
    log_format: str | None = None,
) -> logging.Logger:
    """
    Set up logging for the Carrousel display driver.

    This configures logging to write to:
    - Console (stdout)
    - File with rotation

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file_name: Path to log file (can be absolute or relative)
        log_to_console: Whether to log to console
        log_to_file: Whether to log to file
        max_bytes: Maximum size of log file before rotation (default 10MB)
        backup_count: Number of backup files to keep (default 5)
        log_format: Custom log format string

    Returns:
        Configured root logger
    """
    # Convert log level string to logging constant
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    log_file_path = Path(log_file_name or "logs/carrousel.log")

    # Create root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear any existing handlers to avoid duplicates
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Simpler formatter for console
    console_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if log_to_file:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Carrousel logging initialized - Level: {log_level}")
    if log_to_file:
        root_logger.info(
            f"Log file: {log_file_path} "
            f"(max {max_bytes / (1024 * 1024):.1f} MB, {backup_count} backups)"
        )

    return root_logger


def setup_logging_from_config(
    config: LoggingConfig,
    log_level: str | None = None,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Set up logging from the ``logging`` section of the configuration.

    Args:
        config: Logging configuration
        log_level: Override for the configured level
        log_to_file: Whether to log to the configured file

    Returns:
        Configured root logger
    """
    return setup_logging(
        log_level=log_level or config.level,
        log_file_name=config.file,
        log_to_console=True,
        log_to_file=log_to_file,
        max_bytes=parse_size(config.max_size),
        backup_count=config.backup_count,
        log_format=config.format,
    )
