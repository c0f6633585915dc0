"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - YAML configuration loading
    - Environment variable override (API_BASE_URL overrides api.base_url)
    - Dot notation path access
    - Validated API settings that fail fast on bad values

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml
from loguru import logger


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"

DEFAULT_BASE_URL = "https://api.restful-api.dev"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_RETRY_ATTEMPTS = 1
DEFAULT_RETRY_BACKOFF = 0.0
DEFAULT_RETRY_MAX_WAIT = 5.0
DEFAULT_ENVIRONMENT = "local"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (API_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("api.base_url", "http://localhost:8000")
        'https://api.restful-api.dev'

        >>> config.get("api.timeout", 30000)
        30000

    Environment Variable Mapping:
        - api.base_url -> API_BASE_URL
        - api.timeout -> API_TIMEOUT
        - api.retry_attempts -> API_RETRY_ATTEMPTS
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "api.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get entire configuration section, or an empty dict."""
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings. Values that
        cannot be converted are returned unchanged so validation can reject them.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value


@dataclass(frozen=True)
class ApiSettings:
    """
    Validated settings consumed by the API client.

    Attributes:
        base_url: Root URL every request path is appended to
        timeout_ms: Per-attempt transport timeout in milliseconds
        retry_attempts: Extra attempts after the first one (0 = no retry)
        environment: Free-form environment label (local, staging, ...)
        retry_backoff: Base delay in seconds between attempts (0 = none)
        retry_max_wait: Upper bound for a single backoff delay in seconds
    """
    base_url: str
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    environment: str = DEFAULT_ENVIRONMENT
    retry_backoff: float = DEFAULT_RETRY_BACKOFF
    retry_max_wait: float = DEFAULT_RETRY_MAX_WAIT

    def __post_init__(self) -> None:
        self._validate()

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "ApiSettings":
        """
        Build settings from a ConfigLoader.

        Raises:
            ConfigurationError: When any value is missing or invalid
        """
        if config is None:
            config = ConfigLoader()

        return cls(
            base_url=config.get("api.base_url", DEFAULT_BASE_URL),
            timeout_ms=_as_int(config.get("api.timeout", DEFAULT_TIMEOUT_MS), "api.timeout"),
            retry_attempts=_as_int(
                config.get("api.retry_attempts", DEFAULT_RETRY_ATTEMPTS), "api.retry_attempts"
            ),
            environment=str(config.get("api.environment", DEFAULT_ENVIRONMENT)),
            retry_backoff=_as_float(
                config.get("api.retry_backoff", DEFAULT_RETRY_BACKOFF), "api.retry_backoff"
            ),
            retry_max_wait=_as_float(
                config.get("api.retry_max_wait", DEFAULT_RETRY_MAX_WAIT), "api.retry_max_wait"
            ),
        )

    def _validate(self) -> None:
        if not self.base_url or not isinstance(self.base_url, str):
            raise ConfigurationError("Missing api.base_url (API_BASE_URL)")

        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"Invalid api.base_url: {self.base_url!r}")

        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) \
                or self.timeout_ms <= 0:
            raise ConfigurationError(f"Invalid api.timeout: {self.timeout_ms!r}")

        if isinstance(self.retry_attempts, bool) or not isinstance(self.retry_attempts, int) \
                or self.retry_attempts < 0:
            raise ConfigurationError(f"Invalid api.retry_attempts: {self.retry_attempts!r}")

        for key, value in (("api.retry_backoff", self.retry_backoff),
                           ("api.retry_max_wait", self.retry_max_wait)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"Invalid {key}: {value!r}")

        if self.retry_backoff < 0 or self.retry_max_wait < 0:
            raise ConfigurationError("Retry backoff values must not be negative")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {key}: {value!r}")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise ConfigurationError(f"Invalid {key}: {value!r}") from e
    if not isinstance(value, int):
        raise ConfigurationError(f"Invalid {key}: {value!r}")
    return value


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {key}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid {key}: {value!r}") from e


__all__ = [
    "ApiSettings",
    "ConfigLoader",
    "ConfigurationError",
]
