"""pytest configuration and shared fixtures."""

import pytest

from typebind import api, build_default_binder


@pytest.fixture
def binder():
    """Binder with the default configuration."""
    return build_default_binder()


@pytest.fixture
def sample_data():
    """Sample source data for tests."""
    return {
        "user": {
            "name": "Alice",
            "age": "30",
            "email": "alice@example.com",
        },
        "items": [
            {"id": "1", "price": 10},
            {"id": 2, "price": "20.5"},
        ],
        "config": {
            "enabled": "true",
            "timeout": 5000,
        },
    }


@pytest.fixture
def restore_default_binder():
    """Put the process default binder back after the test."""
    saved = api._default
    yield
    api._default = saved
