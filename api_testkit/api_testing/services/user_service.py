"""
================================================================================
User Service
================================================================================

User CRUD operations and user payload schema checks.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List

from loguru import logger

from ..framework.http_client import ApiClient, ApiResult
from ..framework.schema_validator import SchemaNode, SchemaValidator, ValidationResult


USER_SCHEMA: SchemaNode = {
    "type": "object",
    "required": ["id", "email", "first_name", "last_name"],
    "properties": {
        "id": {"type": "number", "minimum": 1},
        "email": {
            "type": "string",
            "pattern": r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,4}$",
        },
        "first_name": {"type": "string", "minLength": 2},
        "last_name": {"type": "string", "minLength": 2},
        "avatar": {"type": "string"},
    },
}


class UserService:
    """User endpoints (/users)."""

    def __init__(self, client: ApiClient, validator: SchemaValidator) -> None:
        self.client = client
        self.validator = validator

    def create_user(self, data: Dict[str, Any]) -> ApiResult:
        logger.info(f"Creating user (POST /users): {data}")
        return self.client.post("/users", data)

    def get_user(self, user_id: int) -> ApiResult:
        logger.info(f"Fetching user {user_id}")
        return self.client.get(f"/users/{user_id}")

    def get_all_users(self, page: int = 1) -> ApiResult:
        logger.info(f"Fetching users page {page}")
        return self.client.get("/users", {"params": {"page": page}})

    def update_user(self, user_id: int, updates: Dict[str, Any]) -> ApiResult:
        logger.info(f"Updating user {user_id}: {updates}")
        return self.client.put(f"/users/{user_id}", updates)

    def delete_user(self, user_id: int) -> ApiResult:
        logger.info(f"Deleting user {user_id}")
        return self.client.delete(f"/users/{user_id}")

    def validate_user_schema(self, user: Any) -> ValidationResult:
        """Validate one user object against USER_SCHEMA."""
        return self.validator.validate(user, USER_SCHEMA)

    def validate_user_list_schema(self, users: List[Any]) -> ValidationResult:
        """
        Validate every user in a list.

        Each failing user contributes one error prefixed with its index.
        """
        errors: List[str] = []
        for index, user in enumerate(users):
            result = self.validate_user_schema(user)
            if not result.valid:
                errors.append(f"User at index {index} invalid: {', '.join(result.errors)}")

        if errors:
            logger.error(f"User list schema validation failed: {errors}")
            return ValidationResult(valid=False, errors=errors)

        logger.debug("All users in list match schema")
        return ValidationResult(valid=True, errors=[])


__all__ = [
    "USER_SCHEMA",
    "UserService",
]
