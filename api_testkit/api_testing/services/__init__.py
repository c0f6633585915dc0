"""
Domain services built on the API client.

Each service method performs one named API operation and returns the
ApiResult for the test to assert on.
"""

from .auth_service import AuthenticationError, AuthService
from .object_service import OBJECT_SCHEMA, ObjectService
from .user_service import USER_SCHEMA, UserService

__all__ = [
    "AuthService",
    "AuthenticationError",
    "OBJECT_SCHEMA",
    "ObjectService",
    "USER_SCHEMA",
    "UserService",
]
