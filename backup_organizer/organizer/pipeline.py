"""
Backup organizer: clean junk, optionally find duplicates, archive folders.

Phases:
1. Remove junk directories from every folder
2. Deduplication (off | report | interactive), skipped in clean-only mode
3. One tar.gz archive per folder, skipped in clean-only mode

All checks (folders readable, jdupes installed, mode/flag combination)
run before the first phase, so a bad setup never mutates anything.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional, Sequence

import structlog

from backup_organizer.config.exceptions import ArchiveError, ConfigurationError
from backup_organizer.config.profile import CleanupProfile
from backup_organizer.fsutils import human_size, timestamp
from backup_organizer.organizer.archiver import Archiver
from backup_organizer.organizer.duplicate_detector import (
    DedupeMode,
    DuplicateDetector,
    detect_duplicates,
)
from backup_organizer.organizer.junk_cleaner import CleanupResult, JunkCleaner

logger = structlog.get_logger(__name__)


class OrganizerResult:
    """Outcome of a full organizer run."""

    def __init__(self):
        self.cleanups: list[CleanupResult] = []
        self.dedupe_report: Optional[Path] = None
        self.archives: list[Path] = []
        self.failed_archives: list[str] = []

    @property
    def junk_found(self) -> int:
        return sum(c.count for c in self.cleanups)

    @property
    def junk_removed(self) -> int:
        return sum(c.removed for c in self.cleanups)


def validate_folders(folders: Sequence[Path]) -> None:
    """
    Raises:
        ConfigurationError: No folder, or one is missing or unreadable
    """
    if not folders:
        raise ConfigurationError("Please provide one or more folders to process")
    for folder in folders:
        if not folder.is_dir():
            raise ConfigurationError(f"Not a directory: {folder}")
        if not os.access(folder, os.R_OK | os.X_OK):
            raise ConfigurationError(f"Directory not readable: {folder}")


class BackupOrganizer:
    """Run the cleanup, dedupe and archive phases over a list of folders."""

    def __init__(
        self,
        folders: Sequence[Path],
        out_dir: Path,
        profile: Optional[CleanupProfile] = None,
        dry_run: bool = True,
        dedupe: DedupeMode = DedupeMode.off,
        clean_only: bool = False,
        skip_size_calc: bool = False,
        detector: Optional[DuplicateDetector] = None,
    ):
        self.folders = list(folders)
        self.out_dir = out_dir
        self.profile = profile or CleanupProfile()
        self.dry_run = dry_run
        self.dedupe = dedupe
        self.clean_only = clean_only
        self.skip_size_calc = skip_size_calc
        self.detector = detector

    def validate(self) -> None:
        """
        Check everything before any mutation.

        Raises:
            ConfigurationError: Invalid folders, interactive dedupe in
                dry-run, or jdupes missing
        """
        validate_folders(self.folders)

        if self.clean_only or self.dedupe is DedupeMode.off:
            return
        if self.dedupe is DedupeMode.interactive and self.dry_run:
            raise ConfigurationError(
                "Interactive deduplication requires --apply flag "
                "(this mode deletes files, explicit confirmation is required)"
            )
        if self.detector is None:
            self.detector = DuplicateDetector()

    def run(self) -> OrganizerResult:
        self.validate()
        result = OrganizerResult()

        logger.info(
            "organizer_started",
            mode="DRY-RUN" if self.dry_run else "APPLY",
            dedupe=self.dedupe.value,
            out_dir=str(self.out_dir),
            clean_only=self.clean_only,
            folders=len(self.folders),
        )

        if not self.skip_size_calc:
            self._log_sizes("organizer_initial_size")

        self._clean_phase(result)

        if self.clean_only:
            logger.info("organizer_clean_only", hint="skipping deduplication and archiving")
        else:
            self._dedupe_phase(result)
            self._archive_phase(result)

        if not self.skip_size_calc:
            self._log_sizes("organizer_final_size")

        logger.info(
            "organizer_completed",
            junk_found=result.junk_found,
            junk_removed=result.junk_removed,
            archives=len(result.archives),
            failed_archives=len(result.failed_archives),
            dry_run=self.dry_run,
        )
        return result

    def _clean_phase(self, result: OrganizerResult) -> None:
        logger.info("phase_started", phase=1, name="Cleaning Junk Directories",
                    patterns=len(self.profile.junk_patterns))
        cleaner = JunkCleaner(self.profile.junk_patterns, dry_run=self.dry_run)
        for index, folder in enumerate(self.folders, start=1):
            logger.info("organizer_processing", position=f"{index}/{len(self.folders)}",
                        folder=folder.name)
            result.cleanups.append(cleaner.clean(folder))
        logger.info("phase_completed", phase=1)

    def _dedupe_phase(self, result: OrganizerResult) -> None:
        logger.info("phase_started", phase=2, name="Deduplication")
        report_path = self.out_dir / f"duplicates_{timestamp()}.txt"
        try:
            result.dedupe_report = detect_duplicates(
                self.dedupe,
                self.folders,
                report_path,
                dry_run=self.dry_run,
                detector=self.detector,
            )
        except subprocess.CalledProcessError as e:
            logger.error("dedupe_failed", returncode=e.returncode, stderr=(e.stderr or "").strip())
        logger.info("phase_completed", phase=2)

    def _archive_phase(self, result: OrganizerResult) -> None:
        logger.info("phase_started", phase=3, name="Creating Archives")
        archiver = Archiver(self.out_dir, self.profile.all_archive_excludes, dry_run=self.dry_run)
        for index, folder in enumerate(self.folders, start=1):
            logger.info("organizer_archiving", position=f"{index}/{len(self.folders)}",
                        folder=folder.name)
            try:
                archive = archiver.archive(folder)
            except ArchiveError as e:
                result.failed_archives.append(folder.name)
                logger.error("archive_failed", folder=folder.name, error=str(e))
                continue
            if archive is not None:
                result.archives.append(archive)
        logger.info("phase_completed", phase=3)

    def _log_sizes(self, event: str) -> None:
        for folder in self.folders:
            logger.info(event, folder=folder.name, size=human_size(folder))
