"""Tests for settings and logging configuration."""

import logging
import pytest

from src.config import AppSettings, GoogleSheetsSettings, get_settings, validate_all_settings
from src.log import configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GOOGLE_SHEETS_CREDENTIALS_PATH",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "DATA_DIR",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGoogleSheetsSettings:
    """Tests for remote sync configuration."""

    def test_unconfigured_by_default(self):
        assert GoogleSheetsSettings().is_configured is False

    def test_needs_both_values(self, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        assert GoogleSheetsSettings(credentials_path=str(credentials)).is_configured is False
        assert GoogleSheetsSettings(
            credentials_path=str(credentials),
            spreadsheet_id="spreadsheet-123",
        ).is_configured is True

    def test_reads_environment(self, tmp_path, monkeypatch):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "spreadsheet-123")
        assert get_settings().google_sheets.is_configured is True
        assert validate_all_settings()["remote_sync_configured"] is True

    def test_missing_credentials_file_warns(self, tmp_path):
        with pytest.warns(UserWarning, match="not found"):
            GoogleSheetsSettings(credentials_path=str(tmp_path / "missing.json"))

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            GoogleSheetsSettings(timeout_seconds=0)


class TestAppSettings:
    """Tests for application settings."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.log_level == "INFO"
        assert settings.data_path.name == ".hybrid-workout"

    def test_log_level_is_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty")

    def test_validate_all_settings(self):
        results = validate_all_settings()
        assert results["app"] is True
        assert results["google_sheets"] is True
        assert results["remote_sync_configured"] is False


class TestLogging:
    """Tests for logging setup."""

    def test_configure_logging_sets_level(self):
        configure_logging("WARNING")
        assert logging.getLogger().level == logging.WARNING
        configure_logging("DEBUG", json_output=True)
        assert logging.getLogger().level == logging.DEBUG


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
