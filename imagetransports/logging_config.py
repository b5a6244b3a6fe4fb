"""Centralized logging configuration for imagetransports.

Provides structured logging for the transport registry and the registry
client. Modules get child loggers under the "imagetransports" namespace.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

# Environment variables
DEBUG_MODE = os.getenv("IMAGETRANSPORTS_DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("IMAGETRANSPORTS_LOG_LEVEL", "DEBUG" if DEBUG_MODE else "INFO")
TRACE_REQUESTS = os.getenv("IMAGETRANSPORTS_TRACE_REQUESTS", "0") == "1"

# Log directory configuration; no file logging unless set
_log_dir = os.getenv("IMAGETRANSPORTS_LOG_DIR")
LOG_DIR = Path(_log_dir) if _log_dir else None
LOG_FILE_NAME = "imagetransports.log"

ROOT_LOGGER_NAME = "imagetransports"

# Logging format
DETAILED_FORMAT = (
    "[%(asctime)s] [%(levelname)-8s] [%(name)s] [%(filename)s:%(lineno)d] %(message)s"
)
SIMPLE_FORMAT = "[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s"

# Use detailed format in debug mode
LOG_FORMAT = DETAILED_FORMAT if DEBUG_MODE else SIMPLE_FORMAT


def _get_file_handler(log_file: Path, level: int) -> logging.FileHandler:
    """Create a rotating file handler for the given log file."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _get_console_handler(level: int) -> logging.StreamHandler:
    """Create a console handler for streaming logs."""
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(
    log_level: Optional[str] = None,
    include_console: bool = True,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the imagetransports logger.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_console: Whether to also log to console
        log_file: Rotating log file; no file logging when None

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = LOG_LEVEL

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    if log_file is not None:
        logger.addHandler(_get_file_handler(log_file, level))

    if include_console:
        logger.addHandler(_get_console_handler(level))

    return logger


def configure_module_logging(module_name: str) -> logging.Logger:
    """
    Configure logging for a specific module.

    This creates a child logger under the "imagetransports" namespace that
    inherits its handlers and configuration.

    Args:
        module_name: Module name (e.g., "docker.tags", "transports")

    Returns:
        Configured logger instance
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")


def setup_all_logging(log_file: Optional[Path] = None) -> logging.Logger:
    """Initialize all logging (call once at application startup)."""
    if log_file is None and LOG_DIR is not None:
        log_file = LOG_DIR / LOG_FILE_NAME
    logger = configure_logging(include_console=True, log_file=log_file)

    logger.debug(f"Debug mode: {DEBUG_MODE}")
    logger.debug(f"Log level: {LOG_LEVEL}")
    if log_file is not None:
        logger.debug(f"Log file: {log_file}")
    if TRACE_REQUESTS:
        logger.debug("Request tracing: ENABLED")
    return logger
