"""
Logging Configuration Module.

This module provides centralized logging configuration for abg-site.
It sets up structured logging with different levels for different modules.

Features:
- Configurable log levels per module
- Console and file logging
- Structured logging with JSON format support
"""

import logging
import os
from pathlib import Path
from typing import Optional


def _get_logging_config() -> dict:
    """Get logging configuration from settings model.

    The settings import is deferred to avoid circular imports during module
    initialization. Environment variables are used when settings cannot load.
    """
    try:
        from abg_site.server.core.config import settings

        log_level = settings.log_level
    except Exception:
        log_level = os.getenv("ABG_SITE_LOG_LEVEL", "INFO")

    return {
        "log_level": log_level.upper(),
        "log_format": os.getenv("LOG_FORMAT", "detailed"),
        "log_file_dir": os.getenv("LOG_FILE_DIR", "logs"),
        "enable_file_logging": os.getenv("ENABLE_FILE_LOGGING", "true").lower() in ("true", "1", "yes"),
    }


_config = _get_logging_config()
LOG_LEVEL = _config["log_level"]
LOG_FORMAT = _config["log_format"]
LOG_FILE_DIR = _config["log_file_dir"]
ENABLE_FILE_LOGGING = _config["enable_file_logging"]

if ENABLE_FILE_LOGGING:
    Path(LOG_FILE_DIR).mkdir(parents=True, exist_ok=True)


SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}


# Module-specific log levels
MODULE_LOG_LEVELS = {
    "abg_site.core.database": "INFO",
    "abg_site.server": "INFO",
    "abg_site.server.api": "DEBUG",
    "abg_site.server.services": "DEBUG",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override default format (simple, detailed, json)
        enable_file: Whether to enable file logging
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    format_str = FORMATS.get(fmt, DETAILED_FORMAT)

    formatter = logging.Formatter(format_str, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if enable_file and ENABLE_FILE_LOGGING:
        log_file = Path(LOG_FILE_DIR) / "abg_site.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(
        f"Logging configured: level={level}, format={fmt}, file_logging={enable_file and ENABLE_FILE_LOGGING}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
