"""
Cleanup profile: which folders count as junk, and what archives and merges skip.

Defaults cover common development artifacts. A YAML file can override any
list:

    backup_organizer:
      junk_patterns: ["node_modules", "venv*"]
      merge_excludes: [".git", ".DS_Store"]
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from backup_organizer.config.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

DEFAULT_JUNK_PATTERNS = [
    # Python virtual environments and caches
    "venv",
    "venv*",
    ".venv",
    "env",
    "PythonVirEnv",
    "python_venv",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".ruff_cache",
    ".tox",
    "*.egg-info",
    "dist",
    "build",
    # Node.js
    "node_modules",
    ".npm",
    ".npm-cache",
    # Ruby
    ".bundle",
    "vendor/bundle",
    # Java/Gradle/Maven
    ".gradle",
    "target",
    # IDE specific
    ".idea",
    ".vscode/extensions",
    ".vs",
]

DEFAULT_ARCHIVE_EXTRA_EXCLUDES = [".git", ".gitignore"]

DEFAULT_MERGE_EXCLUDES = [
    ".git",
    ".DS_Store",
    "._*",
    "Thumbs.db",
    "desktop.ini",
]

DEFAULT_PROTECTED_DIRS = [".git", ".svn", ".hg", ".bzr", "CVS"]


class CleanupProfile(BaseModel):
    """Pattern lists used by the organizer, merger and pruner."""

    junk_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_JUNK_PATTERNS),
        description="Directory name globs removed during cleanup",
    )
    archive_excludes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ARCHIVE_EXTRA_EXCLUDES),
        description="Extra globs excluded from archives (junk is always excluded)",
    )
    merge_excludes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MERGE_EXCLUDES),
        description="Globs never copied by a merge",
    )
    protected_dirs: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PROTECTED_DIRS),
        description="Directory names never removed, even when empty",
    )

    @field_validator("junk_patterns", "archive_excludes", "merge_excludes", "protected_dirs")
    @classmethod
    def validate_patterns(cls, v: List[str]) -> List[str]:
        """Reject blank patterns, they would match everything."""
        for pattern in v:
            if not pattern or not pattern.strip():
                raise ValueError("Patterns cannot be empty")
        return [pattern.strip() for pattern in v]

    @property
    def all_archive_excludes(self) -> List[str]:
        """Junk patterns plus archive-specific excludes."""
        return self.junk_patterns + self.archive_excludes


def load_profile(path: Optional[Path] = None) -> CleanupProfile:
    """
    Load a cleanup profile from YAML, or the defaults when no path is given.

    Raises:
        ConfigurationError: Missing file, bad YAML, or invalid values
    """
    if path is None:
        return CleanupProfile()

    if not path.is_file():
        raise ConfigurationError(f"Profile not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in profile {path}: {e}") from e

    if not isinstance(raw, dict) or "backup_organizer" not in raw:
        raise ConfigurationError(
            f"Invalid profile {path}: missing 'backup_organizer' root key"
        )

    try:
        profile = CleanupProfile(**(raw["backup_organizer"] or {}))
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid profile {path}: {e}") from e

    logger.info(
        "profile_loaded",
        profile_path=str(path),
        junk_patterns=len(profile.junk_patterns),
    )
    return profile
