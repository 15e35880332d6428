"""Pytest fixtures for Mythforge tests."""

import logging
from pathlib import Path
from typing import Any

import pytest

from mythforge.settings import Settings
from tests.shared.sample_responses import build_response


@pytest.fixture(autouse=True, scope="function")
def cleanup_production_log_handlers():
    """Remove file handlers pointing to the production log after each test.

    Tests that call setup_logging() with the default log file must not
    leave handlers writing to logs/mythforge.log behind.
    """
    yield

    root_logger = logging.getLogger()
    production_log_name = "mythforge.log"

    handlers_to_remove = []
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            if hasattr(handler, "baseFilename") and production_log_name in handler.baseFilename:
                handlers_to_remove.append(handler)

    for handler in handlers_to_remove:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture(autouse=True)
def clear_settings_cache_per_test():
    """Clear Settings cache before each test to ensure isolation.

    This is autouse because caching can cause test pollution when tests
    modify settings or patch SETTINGS_FILE to different paths.
    """
    Settings.clear_cache()
    yield
    Settings.clear_cache()


@pytest.fixture(autouse=True)
def isolate_settings_file(tmp_path: Path, monkeypatch) -> Path:
    """Point the settings file at a temp path so tests never touch the real one."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr("mythforge.settings._settings.SETTINGS_FILE", settings_file)
    return settings_file


@pytest.fixture
def tmp_settings() -> Settings:
    """Default Settings instance, not loaded from disk."""
    return Settings()


@pytest.fixture
def complete_response() -> dict[str, Any]:
    """A raw response that passes every gate under default thresholds."""
    return build_response()
