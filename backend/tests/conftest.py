"""Shared test fixtures and configuration."""
from typing import Iterator

import pytest

from anime_mirror.core.config import get_settings


@pytest.fixture(autouse=True)
def set_required_env_vars(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Set the Gemini API key for all tests and keep the settings cache fresh."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-api-key")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
