"""
Merge a source folder into a destination folder, destination first.

Strategy:
- File exists in destination (same relative path): SKIP, never overwritten
- File only in source: COPY, parent directories created as needed
- Source is never modified; metadata is preserved (shutil.copy2)
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, Optional

import structlog

from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.fsutils import iter_files, timestamp

logger = structlog.get_logger(__name__)

DEFAULT_PROGRESS_INTERVAL = 100


class MergeResult:
    """Counters for one merge run."""

    def __init__(self):
        self.scanned: int = 0
        self.to_copy: int = 0
        self.copied: int = 0
        self.skipped: int = 0
        self.failed: int = 0
        self.bytes_to_copy: int = 0
        self.copy_list: list[str] = []  # relative paths
        self.error_details: list[tuple[str, str]] = []  # (relative path, error)


def validate_merge_folders(source: Path, dest: Path) -> None:
    """
    Raises:
        ConfigurationError: Source missing/unreadable, destination
            missing/not writable, or destination inside source
    """
    if not source.is_dir():
        raise ConfigurationError(f"Source folder not found: {source}")
    if not os.access(source, os.R_OK | os.X_OK):
        raise ConfigurationError(f"Source folder not readable: {source}")
    if not dest.is_dir():
        raise ConfigurationError(
            f"Destination folder not found: {dest}. Please create the destination folder first."
        )
    if not os.access(dest, os.W_OK | os.X_OK):
        raise ConfigurationError(f"Destination folder not writable: {dest}")
    if dest.resolve() == source.resolve() or source.resolve() in dest.resolve().parents:
        raise ConfigurationError(f"Destination {dest} is inside source {source}")


class FolderMerger:
    """Copy files unique to the source tree into the destination tree."""

    def __init__(
        self,
        source: Path,
        dest: Path,
        excludes: Iterable[str],
        dry_run: bool = True,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        progress_callback: Optional[Callable[[MergeResult], None]] = None,
    ):
        self.source = source
        self.dest = dest
        self.excludes = list(excludes)
        self.dry_run = dry_run
        self.progress_interval = progress_interval
        self.progress_callback = progress_callback

    def merge(self) -> MergeResult:
        validate_merge_folders(self.source, self.dest)
        result = MergeResult()

        logger.info(
            "merge_started",
            mode="DRY-RUN" if self.dry_run else "APPLY",
            source=str(self.source),
            destination=str(self.dest),
            strategy="destination files take precedence",
        )

        for source_file in iter_files(self.source, self.excludes):
            result.scanned += 1
            rel_path = source_file.relative_to(self.source)
            dest_file = self.dest / rel_path

            if dest_file.exists():
                result.skipped += 1
            else:
                self._copy(source_file, dest_file, rel_path, result)

            if self.progress_callback and result.scanned % self.progress_interval == 0:
                self.progress_callback(result)

        logger.info(
            "merge_completed",
            scanned=result.scanned,
            to_copy=result.to_copy,
            copied=result.copied,
            skipped=result.skipped,
            failed=result.failed,
            dry_run=self.dry_run,
        )
        return result

    def _copy(self, source_file: Path, dest_file: Path, rel_path: Path, result: MergeResult) -> None:
        result.to_copy += 1
        result.copy_list.append(rel_path.as_posix())
        try:
            result.bytes_to_copy += source_file.stat().st_size
        except OSError:
            pass

        logger.debug("merge_copy", file=rel_path.as_posix())

        if self.dry_run:
            return

        try:
            dest_file.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source_file, dest_file, follow_symlinks=False)
        except OSError as e:
            result.failed += 1
            result.error_details.append((rel_path.as_posix(), str(e)))
            logger.error("merge_copy_failed", file=rel_path.as_posix(), error=str(e))
            return

        result.copied += 1


def write_merge_report(result: MergeResult, report_dir: Path) -> Path:
    """Save the relative paths selected for copy, one per line."""
    report_dir.mkdir(parents=True, exist_ok=True)
    report_path = report_dir / f"merge_files_{timestamp()}.txt"
    with open(report_path, "w", encoding="utf-8") as f:
        for rel_path in result.copy_list:
            f.write(f"{rel_path}\n")
    logger.info("merge_report_saved", report=str(report_path), files=len(result.copy_list))
    return report_path
