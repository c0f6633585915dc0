"""
================================================================================
Object Service
================================================================================

CRUD operations on the /objects resource (product-like items with a free-form
``data`` map) and the matching schema.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from loguru import logger

from ..framework.http_client import ApiClient, ApiResult
from ..framework.schema_validator import SchemaNode, SchemaValidator, ValidationResult


OBJECT_SCHEMA: SchemaNode = {
    "type": "object",
    "required": ["id", "name"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string", "minLength": 1},
    },
}


class ObjectService:
    """Object endpoints (/objects)."""

    def __init__(self, client: ApiClient, validator: SchemaValidator) -> None:
        self.client = client
        self.validator = validator

    def list_objects(self, ids: Optional[List[Any]] = None) -> ApiResult:
        """List all objects, or only the given ids."""
        logger.info(f"Listing objects (ids={ids})")
        if ids:
            # The API expects repeated "id" keys, which a dict cannot hold
            query = urlencode([("id", item_id) for item_id in ids])
            return self.client.get(f"/objects?{query}")
        return self.client.get("/objects")

    def get_object(self, object_id: str) -> ApiResult:
        logger.info(f"Fetching object {object_id}")
        return self.client.get(f"/objects/{object_id}")

    def create_object(self, name: str, data: Optional[Dict[str, Any]] = None) -> ApiResult:
        logger.info(f"Creating object {name!r}")
        return self.client.post("/objects", {"name": name, "data": data})

    def update_object(self, object_id: str, name: str, data: Optional[Dict[str, Any]] = None) -> ApiResult:
        logger.info(f"Replacing object {object_id}")
        return self.client.put(f"/objects/{object_id}", {"name": name, "data": data})

    def patch_object(self, object_id: str, changes: Dict[str, Any]) -> ApiResult:
        logger.info(f"Patching object {object_id}: {changes}")
        return self.client.patch(f"/objects/{object_id}", changes)

    def delete_object(self, object_id: str) -> ApiResult:
        logger.info(f"Deleting object {object_id}")
        return self.client.delete(f"/objects/{object_id}")

    def validate_object_schema(self, item: Any) -> ValidationResult:
        return self.validator.validate(item, OBJECT_SCHEMA)


__all__ = [
    "OBJECT_SCHEMA",
    "ObjectService",
]
