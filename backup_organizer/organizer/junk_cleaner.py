"""
Remove junk directories (virtualenvs, caches, build output) from backup trees.

A matched directory is removed as a whole and never descended into, so
node_modules inside node_modules is counted once.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable

import structlog

from backup_organizer.fsutils import matches_any

logger = structlog.get_logger(__name__)

SAMPLE_SIZE = 20


class CleanupResult:
    """Result of cleaning one folder."""

    def __init__(self, root: Path):
        self.root = root
        self.found: list[Path] = []
        self.removed: int = 0
        self.errors: int = 0
        self.error_details: list[tuple[str, str]] = []  # (path, error)

    @property
    def count(self) -> int:
        return len(self.found)


class JunkCleaner:
    """Find and remove directories matching junk patterns."""

    def __init__(self, patterns: Iterable[str], dry_run: bool = True):
        self.patterns = list(patterns)
        self.dry_run = dry_run

    def find_junk(self, root: Path) -> list[Path]:
        """
        List junk directories under root, shallowest first.

        The root itself is never reported.
        """
        found: list[Path] = []

        for dirpath, dirnames, _filenames in os.walk(root):
            current = Path(dirpath)
            keep_walking = []
            for name in sorted(dirnames):
                candidate = current / name
                if matches_any(candidate, self.patterns):
                    found.append(candidate)
                else:
                    keep_walking.append(name)
            dirnames[:] = keep_walking

        return found

    def clean(self, root: Path) -> CleanupResult:
        """Scan root and, in apply mode, delete every junk directory found."""
        result = CleanupResult(root)
        logger.info("junk_scan_started", folder=root.name)
        logger.debug("junk_scan_root", path=str(root))

        result.found = self.find_junk(root)

        if not result.found:
            logger.info("junk_none_found", folder=root.name)
            return result

        logger.info("junk_found", folder=root.name, count=result.count)
        for item in result.found[:SAMPLE_SIZE]:
            logger.debug("junk_item", path=str(item.relative_to(root)))

        if self.dry_run:
            logger.info(
                "junk_dry_run",
                folder=root.name,
                would_delete=result.count,
                hint="use --apply to actually delete",
            )
            return result

        for item in result.found:
            try:
                if item.is_symlink():
                    item.unlink()
                else:
                    shutil.rmtree(item)
                result.removed += 1
            except OSError as e:
                result.errors += 1
                result.error_details.append((str(item), str(e)))
                logger.warning("junk_delete_failed", path=str(item), error=str(e))

        logger.info(
            "junk_deletion_complete",
            folder=root.name,
            removed=result.removed,
            errors=result.errors,
        )
        return result
