"""
Tests for configuration loading.
"""

import pytest
from pathlib import Path

from pydantic import ValidationError

from finwise.config import (
    AppSettings,
    AssistantSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test away from any local .env file."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self):
        """Test default keys and backend."""
        settings = StorageSettings()
        assert settings.backend == "json"
        assert settings.data_dir == Path(".finwise")
        assert settings.transactions_key == "expenses"
        assert settings.goals_key == "savingsGoals"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """Test prefixed environment variables."""
        monkeypatch.setenv("FINWISE_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("FINWISE_STORAGE_DATA_DIR", str(tmp_path / "data"))
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_dir == tmp_path / "data"

    def test_env_file(self, tmp_path):
        """Test that a .env file in the working directory is read."""
        (tmp_path / ".env").write_text("FINWISE_STORAGE_GOALS_KEY=goals\n")
        assert StorageSettings().goals_key == "goals"

    def test_unknown_backend_rejected(self, monkeypatch):
        """Test backend validation."""
        monkeypatch.setenv("FINWISE_STORAGE_BACKEND", "sqlite")
        with pytest.raises(ValidationError):
            StorageSettings()

    def test_key_with_path_separator_rejected(self, monkeypatch):
        """Test that keys cannot be paths."""
        monkeypatch.setenv("FINWISE_STORAGE_TRANSACTIONS_KEY", "../expenses")
        with pytest.raises(ValidationError):
            StorageSettings()


class TestAppSettings:
    """Tests for AssistantSettings and AppSettings."""

    def test_assistant_defaults(self):
        """Test the cosmetic delays."""
        settings = AssistantSettings()
        assert settings.response_delay_seconds == 1.0
        assert settings.receipt_scan_delay_seconds == 1.5
        assert settings.currency_symbol == "$"

    def test_log_level_normalized(self, monkeypatch):
        """Test that log levels are case-insensitive."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_invalid_view_size_rejected(self, monkeypatch):
        """Test view size bounds."""
        monkeypatch.setenv("RECENT_TRANSACTIONS_LIMIT", "0")
        with pytest.raises(ValidationError):
            AppSettings()


class TestSettingsValidation:
    """Tests for validate_all_settings."""

    def test_all_valid(self):
        """Test the default configuration."""
        results = validate_all_settings()
        assert results == {"storage": True, "assistant": True, "app": True}

    def test_reports_invalid_section(self, monkeypatch):
        """Test that a broken section is reported with its error."""
        monkeypatch.setenv("FINWISE_ASSISTANT_RESPONSE_DELAY_SECONDS", "-1")
        results = validate_all_settings()
        assert results["assistant"] is False
        assert "assistant_error" in results
        assert results["storage"] is True
