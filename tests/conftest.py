"""Shared fixtures."""

import pytest

from expense_tracker.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the data directory at tmp_path and drop cached settings."""
    monkeypatch.chdir(tmp_path)
    for name in ("EXPENSE_STORAGE_DATA_DIR", "EXPENSE_STORAGE_FILENAME", "REQUIRE_TAGS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("EXPENSE_STORAGE_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
