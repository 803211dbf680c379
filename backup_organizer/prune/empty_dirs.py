"""
Remove empty directories, deepest first.

A directory counts as empty when it holds nothing but subdirectories
that are themselves removable and empty, so a chain of nested empty
folders goes in a single run. Version-control metadata folders and
(unless asked) hidden folders are never removed, and since they are not
removed their parents are not empty either.

The list of found folders is saved to a report so a later run can
delete exactly that list (--from-report).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import structlog

from backup_organizer.config.profile import DEFAULT_PROTECTED_DIRS
from backup_organizer.fsutils import timestamp

logger = structlog.get_logger(__name__)

SAMPLE_SIZE = 20


class PruneResult:
    """Outcome of pruning one folder (or one report)."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root
        self.dirs_checked: int = 0
        self.empty_dirs: list[Path] = []
        self.removed: int = 0
        self.failed: int = 0
        self.not_found: int = 0

    @property
    def count(self) -> int:
        return len(self.empty_dirs)


class EmptyFolderPruner:
    """Find and remove empty directories under a root."""

    def __init__(
        self,
        min_depth: int = 1,
        include_hidden: bool = False,
        protected_dirs: Iterable[str] = DEFAULT_PROTECTED_DIRS,
        dry_run: bool = True,
        report_path: Optional[Path] = None,
    ):
        if min_depth < 0:
            raise ValueError(f"min_depth must be >= 0, got {min_depth}")
        self.min_depth = min_depth
        self.include_hidden = include_hidden
        self.protected_dirs = set(protected_dirs)
        self.dry_run = dry_run
        self.report_path = report_path

    def is_excluded(self, rel_path: Path) -> bool:
        """Protected (VCS) folders, anything below them, and hidden folders."""
        if any(part in self.protected_dirs for part in rel_path.parts):
            return True
        return not self.include_hidden and rel_path.name.startswith(".")

    def find_empty(self, root: Path) -> tuple[list[Path], int]:
        """
        Walk bottom-up and collect removable empty directories.

        Returns:
            (empty directories deepest first, directories checked)
        """
        empty: list[Path] = []
        removable: set[Path] = set()
        checked = 0

        for dirpath, dirnames, filenames in os.walk(root, topdown=False):
            current = Path(dirpath)
            rel_path = current.relative_to(root)
            checked += 1

            if len(rel_path.parts) < self.min_depth or self.is_excluded(rel_path):
                continue
            if filenames:
                continue
            # Symlinked dirs show up in dirnames but are never walked into
            if all(current / name in removable for name in dirnames):
                removable.add(current)
                empty.append(current)

        return empty, checked

    def prune(self, root: Path) -> PruneResult:
        result = PruneResult(root)
        logger.info("prune_scan_started", folder=root.name, min_depth=self.min_depth)

        result.empty_dirs, result.dirs_checked = self.find_empty(root)

        if not result.empty_dirs:
            logger.info("prune_none_found", folder=root.name, checked=result.dirs_checked)
            return result

        logger.info("prune_found", folder=root.name, count=result.count)
        for directory in result.empty_dirs[:SAMPLE_SIZE]:
            logger.info("prune_empty_folder", path=str(directory.relative_to(root)))
        if result.count > SAMPLE_SIZE:
            logger.info("prune_more_folders", more=result.count - SAMPLE_SIZE)

        if self.report_path is not None:
            write_prune_report(result.empty_dirs, self.report_path)

        if self.dry_run:
            logger.info(
                "prune_dry_run",
                would_remove=result.count,
                hint="use --apply to actually delete",
            )
            return result

        self._remove_all(result)
        return result

    def prune_from_report(self, report_path: Path) -> PruneResult:
        """Remove the directories listed in a saved report."""
        result = PruneResult()
        result.empty_dirs = read_prune_report(report_path)
        logger.info("prune_report_loaded", report=str(report_path), count=result.count)

        if not result.empty_dirs:
            return result

        if self.dry_run:
            for directory in result.empty_dirs[:SAMPLE_SIZE]:
                logger.info("prune_empty_folder", path=str(directory))
            logger.info(
                "prune_dry_run",
                would_remove=result.count,
                hint="use --apply to actually delete",
            )
            return result

        self._remove_all(result)
        return result

    def _remove_all(self, result: PruneResult) -> None:
        """rmdir each directory in order (deepest first), counting failures."""
        logger.info("prune_removing", count=result.count)
        for directory in result.empty_dirs:
            if not directory.is_dir() or directory.is_symlink():
                result.not_found += 1
                logger.debug("prune_not_found", path=str(directory))
                continue
            try:
                directory.rmdir()
            except OSError as e:
                result.failed += 1
                logger.debug("prune_remove_failed", path=str(directory), error=str(e))
                continue
            result.removed += 1
            logger.debug("prune_removed", path=str(directory))

        logger.info(
            "prune_removed_summary",
            removed=result.removed,
            failed=result.failed,
            not_found=result.not_found,
        )


def read_prune_report(report_path: Path) -> list[Path]:
    """Directories listed in a report, blank lines and # comments skipped."""
    with open(report_path, "r", encoding="utf-8") as f:
        lines = [line.rstrip("\r\n") for line in f]
    return [Path(line) for line in lines if line.strip() and not line.startswith("#")]


def default_report_path(report_dir: Path) -> Path:
    return report_dir / f"empty_folders_{timestamp()}.txt"


def write_prune_report(dirs: list[Path], report_path: Path) -> Path:
    """Append found directories to the run's report file."""
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, "a", encoding="utf-8") as f:
        for directory in dirs:
            f.write(f"{directory}\n")
    logger.info("prune_report_saved", report=str(report_path), folders=len(dirs))
    return report_path
