"""
Configuration Management for GuideTrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Business records that the user edits (default daily rate, notification
toggle, first day of week) are NOT configuration - they live in
guidetrack.models.records.AppSettings and are persisted with the data.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local JSON storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GUIDETRACK_STORAGE_",
        extra="ignore"
    )

    data_dir: str = Field(
        default="data",
        description="Directory holding one JSON file per storage key"
    )
    write_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made for a single file write before giving up"
    )

    @field_validator('data_dir')
    @classmethod
    def validate_data_dir(cls, v: str) -> str:
        """Reject a data dir that points at an existing regular file."""
        path = Path(v).expanduser()
        if path.exists() and not path.is_dir():
            raise ValueError(f"Storage data_dir {v} exists and is not a directory")
        return v

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()


class ReportSettings(BaseSettings):
    """Dashboard and report defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GUIDETRACK_REPORT_",
        extra="ignore"
    )

    monthly_window: int = Field(
        default=12,
        ge=1,
        le=120,
        description="Number of months shown in the monthly report"
    )
    upcoming_limit: int = Field(
        default=3,
        ge=1,
        le=50,
        description="How many upcoming tours the dashboard lists"
    )
    max_recurrence_months: int = Field(
        default=60,
        ge=1,
        le=120,
        description="Upper bound for materialised recurring expenses"
    )
    currency_symbol: str = Field(
        default="₺",
        min_length=1,
        max_length=5,
        description="Symbol prefixed to formatted amounts"
    )


class LoggingSettings(BaseSettings):
    """structlog output configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GUIDETRACK_LOG_",
        extra="ignore"
    )

    level: str = Field(
        default="INFO",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render JSON lines (False renders console output)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def reports(self) -> ReportSettings:
        return ReportSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} plus an
    "<name>_error" entry for every section that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "reports", "logging"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
