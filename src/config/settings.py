"""
Configuration Management for Hybrid Workout Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Remote sync is optional: when the Google Sheets credentials path or the
spreadsheet ID is missing, the tracker runs fully local with no error.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets remote sync configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    credentials_path: str = Field(
        default="",
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        default="",
        description="ID of the Google Sheets spreadsheet holding synced snapshots"
    )
    sync_sheet_name: str = Field(
        default="workout_data",
        description="Name of the worksheet with one row per device"
    )

    # Bounds on remote calls
    timeout_seconds: float = Field(
        default=8.0,
        gt=0,
        le=60,
        description="Timeout for each HTTP request to the Sheets API"
    )
    operation_timeout_seconds: float = Field(
        default=25.0,
        gt=0,
        le=300,
        description="Upper bound for a whole push or pull, retries included"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Warn if credentials file doesn't exist (but don't fail - might be mounted later)."""
        v = v.strip()
        if v and not Path(v).expanduser().exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "Remote sync will fail until it exists."
            )
        return v

    @property
    def is_configured(self) -> bool:
        """Remote sync is active only when both values are present."""
        return bool(self.credentials_path.strip()) and bool(self.spreadsheet_id.strip())


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Local persistence
    data_dir: str = Field(
        default="~/.hybrid-workout",
        description="Directory holding the local key-value files"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of console output"
    )

    # Background sync
    push_drain_timeout_seconds: float = Field(
        default=10.0,
        ge=0,
        le=120,
        description="How long close() waits for a pending background push"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def data_path(self) -> Path:
        """Get the data directory as an expanded path."""
        return Path(self.data_dir).expanduser()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, object]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an `<name>_error`
    entry for each failure and whether remote sync is active.
    Useful for startup checks.
    """
    results: dict[str, object] = {}

    settings = get_settings()

    try:
        sheets = settings.google_sheets
        results["google_sheets"] = True
        results["remote_sync_configured"] = sheets.is_configured
    except Exception as e:
        results["google_sheets"] = False
        results["google_sheets_error"] = str(e)
        results["remote_sync_configured"] = False

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
