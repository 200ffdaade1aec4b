"""Structured logging configuration."""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    error_log_file: Optional[Path] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure structured logging with console and file output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to the combined log file
        error_log_file: Optional path to a log file that only receives errors
        rotation: Log rotation size
        retention: Log retention period
    """
    # Remove default handler
    logger.remove()

    # Console handler with colors
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
        level=log_level,
        colorize=True,
    )

    file_format = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message} | {extra}"

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=file_format,
            level=log_level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )

    if error_log_file:
        error_log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            error_log_file,
            format=file_format,
            level="ERROR",
            rotation=rotation,
            retention=retention,
            backtrace=True,
        )


def setup_logging_from_settings(settings: Any) -> None:
    """
    Configure logging from application settings.

    Writes ``combined.log`` and ``error.log`` under ``settings.log_dir`` when it is set.

    Args:
        settings: Application settings
    """
    log_dir = Path(settings.log_dir) if settings.log_dir else None
    setup_logging(
        log_level=settings.log_level,
        log_file=log_dir / "combined.log" if log_dir else None,
        error_log_file=log_dir / "error.log" if log_dir else None,
    )


def get_logger(name: str, **context: Any) -> Any:
    """
    Get a logger instance with optional context.

    Args:
        name: Logger name (typically __name__)
        **context: Additional context fields (run_id, stage, etc.)

    Returns:
        Logger instance with bound context
    """
    if context:
        return logger.bind(name=name, **context)
    return logger.bind(name=name)


# Initialize logging on import
setup_logging()
