"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

import pytest

from ageforge_backend.game_logic.configuration import (
    get_default_simulation_configuration,
)
from ageforge_backend.settings import get_settings


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    get_settings.cache_clear()
    get_default_simulation_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_default_simulation_configuration.cache_clear()
