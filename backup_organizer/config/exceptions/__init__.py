"""
Backup Organizer - Canonical exception hierarchy.

Only ConfigurationError (and subclasses) abort a run. Per-group and
per-file conditions (skipped group, missing file, failed delete) are
aggregated into run statistics and never raised.
"""


class BackupOrganizerError(Exception):
    """Base exception Backup Organizer."""


class ConfigurationError(BackupOrganizerError):
    """Fatal setup error, raised before any filesystem mutation."""


class MissingCommandError(ConfigurationError):
    """Required external command not found on PATH."""

    def __init__(self, command: str, hint: str = ""):
        self.command = command
        self.hint = hint
        message = f"Required command not found: {command}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class ArchiveError(BackupOrganizerError):
    """Archive creation failed for one folder."""
