"""Pytest configuration and fixtures.

Clears STUCCO_* variables so a developer's environment cannot leak into
Settings during the tests.
"""

import os
from pathlib import Path

for _name in list(os.environ):
    if _name.upper().startswith("STUCCO_"):
        del os.environ[_name]

import pytest

from graph_init.config import Settings, get_settings

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test build Settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings with defaults only (no .env file)."""
    return Settings(_env_file=None)


@pytest.fixture
def ontology_path():
    return FIXTURES / "stucco_schema.json"


@pytest.fixture
def index_spec_path():
    return FIXTURES / "stucco_indexing.json"
