"""
================================================================================
API Session
================================================================================

One ApiSession per test run owns the shared collaborators:
    - ApiSettings loaded and validated from ConfigLoader
    - TokenManager (the single credential slot of the run)
    - SchemaValidator
    - ApiClient wired to the token manager

Services receive these by reference instead of reaching for globals.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .config_loader import ApiSettings, ConfigLoader
from .http_client import ApiClient
from .schema_validator import SchemaValidator
from .token_manager import TokenManager
from .transport import Transport


class ApiSession:
    """
    Test-run context holding one instance of each core component.

    Usage:
        >>> with ApiSession() as session:
        ...     users = UserService(session.client, session.validator)
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        settings: Optional[ApiSettings] = None,
        transport: Optional[Transport] = None,
        token_manager: Optional[TokenManager] = None,
    ) -> None:
        """
        Build and wire the session components.

        Raises:
            ConfigurationError: When the configuration is invalid
        """
        if settings is None:
            settings = ApiSettings.from_config(config or ConfigLoader())

        self.settings = settings
        self.token_manager = token_manager or TokenManager()
        self.validator = SchemaValidator()
        self.client = ApiClient(settings, self.token_manager, transport)

        logger.info(
            f"API session ready: {settings.base_url} "
            f"(env={settings.environment}, timeout={settings.timeout_ms}ms, "
            f"retries={settings.retry_attempts})"
        )

    def __enter__(self) -> "ApiSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the client transport."""
        self.client.close()


__all__ = ["ApiSession"]
