"""
================================================================================
API Testing Pytest Configuration
================================================================================

Shared fixtures for live API suites.

Fixtures:
    - api_session: One ApiSession (client, token manager, validator) per run
    - object_service: ObjectService bound to the session
    - cleanup_objects: Deletes created objects after each test

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import uuid
from typing import Generator, List

import allure
import pytest
from loguru import logger

from api_testkit.api_testing.framework import ApiSession, ConfigLoader
from api_testkit.api_testing.services import ObjectService
from api_testkit.common import init_logger


# =============================================================================
# Session-Scoped Fixtures (Shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    """Configuration loader, loaded once per run."""
    config = ConfigLoader()
    init_logger(config=config)
    return config


@pytest.fixture(scope="session")
def api_session(config: ConfigLoader) -> Generator[ApiSession, None, None]:
    """
    Provide the run-wide API session.

    Features:
        - Retry on network failures
        - Bearer token injection from the session TokenManager
        - Allure logging integration
    """
    with ApiSession(config) as session:
        yield session


@pytest.fixture(scope="session")
def object_service(api_session: ApiSession) -> ObjectService:
    return ObjectService(api_session.client, api_session.validator)


# =============================================================================
# Function-Scoped Fixtures (Fresh for each test)
# =============================================================================

@pytest.fixture
def unique_id() -> str:
    """Unique suffix so parallel runs do not collide."""
    return f"autotest_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def cleanup_objects(object_service: ObjectService) -> Generator[List[str], None, None]:
    """
    Track created objects and delete them after the test.

    Usage:
        def test_create(object_service, cleanup_objects):
            result = object_service.create_object("Phone", {"price": 1})
            cleanup_objects.append(result.data["id"])
    """
    created_ids: List[str] = []
    yield created_ids

    for object_id in reversed(created_ids):
        try:
            object_service.delete_object(object_id)
            logger.debug(f"Cleaned up object: {object_id}")
        except Exception as e:
            logger.warning(f"Failed to cleanup object {object_id}: {e}")


# =============================================================================
# Allure Reporting Hooks
# =============================================================================

def pytest_exception_interact(node, call, report):
    """Attach additional info on test failure."""
    if report.failed:
        allure.attach(
            str(call.excinfo.value),
            name="Error Details",
            attachment_type=allure.attachment_type.TEXT
        )
