"""Tests for environment-driven configuration."""

import pytest

from guidetrack.config import (
    LoggingSettings,
    ReportSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for settings defaults and overrides."""

    def test_defaults(self, monkeypatch):
        for name in ("GUIDETRACK_REPORT_MONTHLY_WINDOW", "GUIDETRACK_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        reports = ReportSettings()
        assert reports.monthly_window == 12
        assert reports.upcoming_limit == 3
        assert reports.max_recurrence_months == 60
        assert reports.currency_symbol == "₺"
        assert LoggingSettings().level == "INFO"

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GUIDETRACK_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("GUIDETRACK_REPORT_UPCOMING_LIMIT", "5")

        settings = get_settings()

        assert settings.storage.data_path == tmp_path
        assert settings.reports.upcoming_limit == 5

    def test_log_level_is_normalised(self):
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValueError):
            LoggingSettings(level="LOUD")

    def test_data_dir_must_not_be_a_file(self, tmp_path):
        target = tmp_path / "data.json"
        target.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError):
            StorageSettings(data_dir=str(target))

    def test_validate_all_settings(self, monkeypatch):
        monkeypatch.setenv("GUIDETRACK_REPORT_MONTHLY_WINDOW", "0")

        results = validate_all_settings()

        assert results["storage"] is True
        assert results["logging"] is True
        assert results["reports"] is False
        assert "reports_error" in results
