"""
Unit tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.config.settings import BackupOrganizerSettings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("BACKUP_ORGANIZER_LOG_LEVEL", raising=False)

    settings = BackupOrganizerSettings()

    assert settings.log_level == "INFO"
    assert settings.log_format == "console"
    assert settings.progress_interval == 100
    assert settings.autodetect_max_lines == 100
    assert settings.autodetect_max_folders == 10


def test_env_override(monkeypatch):
    monkeypatch.setenv("BACKUP_ORGANIZER_PROGRESS_INTERVAL", "25")
    monkeypatch.setenv("BACKUP_ORGANIZER_LOG_FORMAT", "json")

    settings = BackupOrganizerSettings()

    assert settings.progress_interval == 25
    assert settings.log_format == "json"


def test_invalid_interval(monkeypatch):
    monkeypatch.setenv("BACKUP_ORGANIZER_PROGRESS_INTERVAL", "0")

    with pytest.raises(ValidationError):
        BackupOrganizerSettings()


def test_get_settings_cached():
    get_settings.cache_clear()

    assert get_settings() is get_settings()


def test_get_settings_invalid_env_is_configuration_error(monkeypatch):
    monkeypatch.setenv("BACKUP_ORGANIZER_PROGRESS_INTERVAL", "abc")

    with pytest.raises(ConfigurationError, match="Invalid settings"):
        get_settings()
