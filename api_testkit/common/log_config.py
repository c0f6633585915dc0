"""
================================================================================
Logging Configuration
================================================================================

Centralized Loguru setup for the API test kit.

Features:
    - Console sink with level and format from configuration
    - Optional rotating file sink
    - PASS / FAIL levels for business outcomes reported by services

Author: Automation Team
License: MIT
================================================================================
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..api_testing.framework.config_loader import ConfigLoader


DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
)

_logger_initialized: bool = False


def register_levels() -> None:
    """
    Register the PASS and FAIL levels once per process.

    Loguru refuses to redefine an existing level, so this is safe to call
    from every module that logs with them.
    """
    for name, no, color in (("PASS", 25, "<green><bold>"), ("FAIL", 45, "<red><bold>")):
        try:
            logger.level(name)
        except ValueError:
            logger.level(name, no=no, color=color)


def init_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    config: Optional[ConfigLoader] = None,
) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to logging.level.
        log_file: Optional log file path. Defaults to logging.file.
        config: Configuration source. A new ConfigLoader is used if None.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    register_levels()

    if config is None:
        config = ConfigLoader()

    log_level = (level or config.get("logging.level", "INFO")).upper()
    log_format = config.get("logging.format", DEFAULT_FORMAT)

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = log_file or config.get("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level,
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def reset_logger() -> None:
    """Allow init_logger to run again (used by tests)."""
    global _logger_initialized
    _logger_initialized = False
