"""Pytest configuration for api tests."""

import os

import pytest

from api.config import get_settings
from api.services import eventbrite


@pytest.fixture(autouse=True)
def reset_env():
    """Reset environment variables and cached settings between tests."""
    original = os.environ.copy()
    get_settings.cache_clear()
    eventbrite._client = None
    yield
    os.environ.clear()
    os.environ.update(original)
    get_settings.cache_clear()
    eventbrite._client = None
