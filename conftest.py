"""
Repository-level pytest configuration (showcase-safe).

Why this exists:
  - Provide safe defaults for demo environments (no secrets embedded)
  - Register the --run-external switch for live API suites
  - Keep behavior explicit and discoverable

Important:
  Values below are placeholders. Real projects should load secrets from a
  secure secret manager in CI/CD.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-external",
        action="store_true",
        default=False,
        help="Run tests marked requires_external against API_BASE_URL",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """
    Set demo-safe environment defaults if not already provided by the user/CI.

    This prevents accidental leakage and keeps local runs predictable.
    """
    defaults = {
        "API_BASE_URL": "https://api.restful-api.dev",
        "API_ENVIRONMENT": "local",
    }

    for k, v in defaults.items():
        os.environ.setdefault(k, v)

    yield
