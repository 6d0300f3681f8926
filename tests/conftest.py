"""Pytest configuration; shared fixtures live in tests/fixtures."""

from tests.fixtures import *  # noqa: F401,F403
