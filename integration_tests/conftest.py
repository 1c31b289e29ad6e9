"""Pytest configuration for integration tests."""

import pytest

from fittrack.config import Settings


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings read from the environment, as the installed CLI would."""
    monkeypatch.setenv("FITTRACK_DATA_DIR", str(tmp_path / "fittrack"))
    monkeypatch.setenv("FITTRACK_DEFAULT_LANGUAGE", "en")
    return Settings()
