"""
Backup Organizer - runtime settings via Pydantic Settings.

All values come from environment variables prefixed BACKUP_ORGANIZER_
(e.g. BACKUP_ORGANIZER_LOG_LEVEL=DEBUG). CLI flags override them.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from backup_organizer.config.exceptions import ConfigurationError


class BackupOrganizerSettings(BaseSettings):
    """Settings shared by every backup tool."""

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Duplicate removal
    progress_interval: int = Field(default=100, ge=1)
    autodetect_max_lines: int = Field(default=100, ge=1)
    autodetect_max_folders: int = Field(default=10, ge=1)

    # Output directory for archives, logs and reports
    archive_dir: str = "archives"

    model_config = {"env_prefix": "BACKUP_ORGANIZER_", "case_sensitive": False}


@lru_cache
def get_settings() -> BackupOrganizerSettings:
    """
    Factory for settings (cached singleton).

    Raises:
        ConfigurationError: A BACKUP_ORGANIZER_* variable has an invalid value
    """
    try:
        return BackupOrganizerSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
