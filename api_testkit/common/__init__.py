"""
Shared utilities for the API test kit.

Exports:
    - init_logger: Configure loguru sinks from configuration
    - register_levels: Ensure the PASS / FAIL levels exist
"""

from .log_config import init_logger, register_levels, reset_logger

__all__ = [
    "init_logger",
    "register_levels",
    "reset_logger",
]
