"""
================================================================================
Token Manager with Expiry Tracking
================================================================================

Holds the bearer credential used by every authenticated API call:
    - One credential slot per test run (last writer wins)
    - Expiry checked on every read, never cached
    - Authorization header injection

The manager never refreshes on its own. Callers that want pre-emptive refresh
can check ``remaining_ttl_seconds()`` and log in again.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from loguru import logger


# Default token TTL (1 hour in seconds)
DEFAULT_TOKEN_TTL = 3600


@dataclass(frozen=True)
class Credential:
    """Bearer token plus its absolute expiry (epoch milliseconds)."""
    token: str
    expires_at_ms: float


class TokenManager:
    """
    Token manager with passive expiry.

    One instance is created per test run (see ``ApiSession``) and handed to
    every collaborator that needs it.

    Usage:
        >>> token_manager = TokenManager()
        >>> token_manager.set_token("abc", ttl_seconds=60)
        >>> headers = token_manager.apply({})
        >>> # headers now contains "Authorization: Bearer abc"
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        """
        Initialize token manager.

        Args:
            clock: Returns the current time in seconds. Defaults to time.time.
        """
        self._clock = clock or time.time
        self._credential: Optional[Credential] = None

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def set_token(self, token: str, ttl_seconds: float = DEFAULT_TOKEN_TTL) -> None:
        """
        Store a token, replacing any previous one.

        Empty tokens are ignored with a warning.
        """
        if not token:
            logger.warning("Attempted to store empty token, ignoring")
            return

        self._credential = Credential(
            token=token,
            expires_at_ms=self._now_ms() + ttl_seconds * 1000,
        )
        expires_at = datetime.fromtimestamp(
            self._credential.expires_at_ms / 1000, tz=timezone.utc
        )
        logger.info(
            f"Token stored (ttl={ttl_seconds}s, expires_at={expires_at.isoformat()})"
        )

    def get_token(self) -> Optional[str]:
        """Return the current token, or None if absent or expired."""
        credential = self._credential
        if credential is None:
            logger.warning("No token found")
            return None

        if self._now_ms() >= credential.expires_at_ms:
            logger.warning("Token expired, returning None")
            return None

        return credential.token

    def is_expired(self) -> bool:
        """Return True if there is no credential or it has expired."""
        credential = self._credential
        if credential is None:
            return True
        return self._now_ms() >= credential.expires_at_ms

    def remaining_ttl_seconds(self) -> int:
        """Whole seconds left before expiry, never negative."""
        credential = self._credential
        if credential is None:
            return 0
        return max(0, math.floor((credential.expires_at_ms - self._now_ms()) / 1000))

    def clear_token(self) -> None:
        """Drop the credential unconditionally."""
        self._credential = None
        logger.info("Token cleared")

    def apply(self, headers: Dict[str, str]) -> Dict[str, str]:
        """
        Apply authentication headers to request.

        Args:
            headers: Existing headers dictionary

        Returns:
            A copy of headers, with Authorization added when a valid token exists
        """
        result = dict(headers)

        token = self.get_token()
        if token:
            result["Authorization"] = f"Bearer {token}"

        return result


__all__ = [
    "Credential",
    "DEFAULT_TOKEN_TTL",
    "TokenManager",
]
