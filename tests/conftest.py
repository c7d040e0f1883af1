"""Shared pytest configuration for envsync tests."""

import pytest

from envsync.config import reset_settings

pytest_plugins = ["envsync.testing.pytest_fixtures"]


@pytest.fixture(autouse=True)
def _isolate_settings():
    reset_settings()
    yield
    reset_settings()
