"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the pytest configuration for the whole test kit.
It registers common markers and gates live API suites.

================================================================================
"""

from pathlib import Path

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line("markers", "smoke: Quick verification tests")
    config.addinivalue_line("markers", "regression: Full regression test suite")
    config.addinivalue_line("markers", "unit: Offline tests of the framework itself")
    config.addinivalue_line(
        "markers", "requires_external: Tests requiring a reachable API_BASE_URL"
    )

    # Domain markers
    config.addinivalue_line("markers", "api: API-specific tests")
    config.addinivalue_line("markers", "auth: Tests related to authentication")
    config.addinivalue_line("markers", "users: Tests related to user management")
    config.addinivalue_line("markers", "objects: Tests related to the objects resource")


def pytest_collection_modifyitems(config, items):
    """
    Add markers by location and skip live suites unless --run-external is set.
    """
    run_external = config.getoption("--run-external", default=False)
    skip_external = pytest.mark.skip(reason="needs --run-external")

    for item in items:
        path = Path(str(item.fspath)).parts
        if "api_testing" in path:
            item.add_marker(pytest.mark.api)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)

        if "requires_external" in item.keywords and not run_external:
            item.add_marker(skip_external)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Resilient API Test Kit",
        "=" * 60,
        "",
    ]
