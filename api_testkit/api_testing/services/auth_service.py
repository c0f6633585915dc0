"""
================================================================================
Auth Service
================================================================================

Login, registration and logout on top of ApiClient and TokenManager.

A successful login stores the returned token for one hour; every following
ApiClient call then carries it as a bearer token.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ...common import register_levels
from ..framework.http_client import ApiClient
from ..framework.token_manager import DEFAULT_TOKEN_TTL, TokenManager
from ..framework.transport import ApiClientError


register_levels()


class AuthenticationError(ApiClientError):
    """Raised when login or registration does not succeed."""
    pass


class AuthService:
    """
    Authentication operations.

    Usage:
        >>> auth = AuthService(session.client, session.token_manager)
        >>> auth.login("eve.holt@reqres.in", "cityslicka")
    """

    def __init__(self, client: ApiClient, token_manager: TokenManager) -> None:
        self.client = client
        self.token_manager = token_manager

    def login(self, email: str, password: str) -> str:
        """
        Log in and store the returned token.

        Returns:
            The bearer token

        Raises:
            AuthenticationError: On a non-200 status or a body without token
        """
        logger.info(f"Attempting login for {email}")
        result = self.client.post("/login", {"email": email, "password": password})

        token = result.data.get("token") if isinstance(result.data, dict) else None
        if result.status_code != 200 or not token:
            logger.log("FAIL", f"Login failed: HTTP {result.status_code} | body: {result.data}")
            raise AuthenticationError(f"Login failed: HTTP {result.status_code}")

        self.token_manager.set_token(token, DEFAULT_TOKEN_TTL)
        logger.log("PASS", "Login successful")
        return token

    def register(self, email: str, password: str) -> Any:
        """
        Register a new account.

        Returns:
            The decoded response body

        Raises:
            AuthenticationError: On a non-200 status
        """
        logger.info(f"Attempting registration for {email}")
        result = self.client.post("/register", {"email": email, "password": password})

        if result.status_code != 200:
            logger.log(
                "FAIL", f"Registration failed: HTTP {result.status_code} | body: {result.data}"
            )
            raise AuthenticationError(f"Registration failed: HTTP {result.status_code}")

        logger.log("PASS", "Registration successful")
        return result.data

    def logout(self) -> None:
        """Forget the stored token."""
        self.token_manager.clear_token()
        logger.info("Logged out (token cleared)")


__all__ = [
    "AuthService",
    "AuthenticationError",
]
