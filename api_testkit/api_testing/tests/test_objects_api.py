"""
================================================================================
Objects API Test Suite
================================================================================

Live tests for the /objects resource of API_BASE_URL
(https://api.restful-api.dev by default).

Test Categories:
    - Listing and schema checks
    - Create / patch / delete lifecycle
    - Error handling: unknown ids come back as results, never exceptions

Run with: pytest --run-external api_testkit/api_testing/tests

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import List

import allure
import pytest

from api_testkit.api_testing.framework import api_helpers
from api_testkit.api_testing.services import ObjectService


OBJECT_LIST_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "id": {"type": "string", "minLength": 1},
            "name": {"type": "string", "minLength": 1},
        },
    },
}

CREATED_OBJECT_SCHEMA = {
    "type": "object",
    "required": ["id", "name", "createdAt"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "createdAt": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T"},
        "data": {
            "type": "object",
            "properties": {"price": {"type": "number", "minimum": 0}},
        },
    },
}


@allure.epic("Objects API")
@allure.feature("Object CRUD Operations")
@pytest.mark.objects
@pytest.mark.requires_external
class TestObjectsAPI:
    """
    Objects endpoint tests.

    Covers:
        - Listing with and without id filters
        - Creation, partial update and deletion
        - Not-found handling
    """

    @pytest.mark.P0
    @pytest.mark.smoke
    @allure.story("List Objects")
    @allure.title("List objects - Success")
    def test_list_objects(self, object_service: ObjectService):
        """
        Steps:
            1. GET /objects
            2. Verify 200 and an array payload
            3. Verify every item matches the list schema
        """
        with allure.step("List objects"):
            result = object_service.list_objects()

        with allure.step("Verify response"):
            assert result.status_code == 200, f"Expected 200, got {result.status_code}"
            assert isinstance(result.data, list)
            api_helpers.format_products(result.data)

        with allure.step("Verify schema"):
            object_service.validator.validate_and_assert(result.data, OBJECT_LIST_SCHEMA)

    @pytest.mark.P1
    @allure.story("List Objects")
    @allure.title("List objects by id - Only requested ids returned")
    def test_list_objects_by_ids(self, object_service: ObjectService):
        result = object_service.list_objects(ids=[3, 5])

        assert result.status_code == 200
        assert sorted(item["id"] for item in result.data) == ["3", "5"]
        assert api_helpers.get_by_id(result.data, "3") is not None

    @pytest.mark.P0
    @pytest.mark.smoke
    @allure.story("Update Object")
    @allure.title("Create then PATCH object - Success")
    def test_create_and_patch_object(
        self,
        object_service: ObjectService,
        cleanup_objects: List[str],
        unique_id: str,
    ):
        with allure.step("Create object"):
            created = object_service.create_object(
                f"Temporary Test Product {unique_id}", {"price": 1000}
            )
            assert created.status_code == 200
            object_service.validator.validate_and_assert(
                created.data, CREATED_OBJECT_SCHEMA
            )
            object_id = created.data["id"]
            cleanup_objects.append(object_id)

        with allure.step("Patch object"):
            patched = object_service.patch_object(
                object_id,
                {"name": f"Temp Product (PATCH Updated) {unique_id}", "data": {"price": 1999}},
            )

        with allure.step("Verify patch applied"):
            assert patched.status_code == 200
            assert patched.data["name"].startswith("Temp Product (PATCH Updated)")
            assert patched.data["data"]["price"] == 1999

    @pytest.mark.P1
    @allure.story("Delete Object")
    @allure.title("Create then DELETE object - Success")
    def test_delete_object(self, object_service: ObjectService, unique_id: str):
        created = object_service.create_object(f"Product To Delete {unique_id}", {"price": 500})
        assert created.status_code == 200

        deleted = object_service.delete_object(created.data["id"])

        assert deleted.status_code == 200
        assert created.data["id"] in str(deleted.data)

    @pytest.mark.P2
    @allure.story("Get Object")
    @allure.title("Get unknown object - Not Found result")
    def test_get_unknown_object_returns_404(self, object_service: ObjectService):
        result = object_service.get_object("does-not-exist-000")

        assert result.status_code == 404
        assert "error" in result.data
