"""Test helpers for projects that use envsync.

Enable the fixtures from a conftest.py:

    pytest_plugins = ["envsync.testing.pytest_fixtures"]
"""
