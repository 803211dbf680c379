"""
Create compressed tar.gz archives of backup folders.

Archive name: <out_dir>/<folder>_<YYYYmmdd_HHMMSS>.tar.gz, members stored
under the folder's basename. Excluded entries are skipped along with
everything below them.
"""

from __future__ import annotations

import tarfile
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

import structlog

from backup_organizer.config.exceptions import ArchiveError
from backup_organizer.fsutils import format_bytes, matches_any, timestamp

logger = structlog.get_logger(__name__)


class Archiver:
    """Write one tar.gz per folder, skipping excluded patterns."""

    def __init__(self, out_dir: Path, excludes: Iterable[str], dry_run: bool = True):
        self.out_dir = out_dir
        self.excludes = list(excludes)
        self.dry_run = dry_run

    def archive_path(self, folder: Path, stamp: Optional[str] = None) -> Path:
        return self.out_dir / f"{folder.name}_{stamp or timestamp()}.tar.gz"

    def _filter(self, tarinfo: tarfile.TarInfo) -> Optional[tarfile.TarInfo]:
        """tarfile filter: drop excluded members (and their subtrees)."""
        # The top-level member is the folder itself, never excluded
        if "/" in tarinfo.name and matches_any(PurePosixPath(tarinfo.name), self.excludes):
            return None
        return tarinfo

    def archive(self, folder: Path) -> Optional[Path]:
        """
        Archive a folder.

        Returns:
            Path of the archive, or None in dry-run mode

        Raises:
            ArchiveError: tar writing failed (partial archive is removed)
        """
        out = self.archive_path(folder)
        logger.info("archive_preparing", folder=folder.name)
        logger.debug("archive_paths", source=str(folder), destination=str(out))

        if self.dry_run:
            logger.info(
                "archive_dry_run",
                would_create=out.name,
                hint="use --apply to actually create archives",
            )
            return None

        self.out_dir.mkdir(parents=True, exist_ok=True)
        logger.info("archive_creating", archive=out.name)

        try:
            with tarfile.open(out, "w:gz") as tar:
                tar.add(folder, arcname=folder.name, filter=self._filter)
        except (OSError, tarfile.TarError) as e:
            out.unlink(missing_ok=True)
            raise ArchiveError(f"Failed to create archive for {folder.name}: {e}") from e

        logger.info(
            "archive_created",
            archive=out.name,
            size=format_bytes(out.stat().st_size),
        )
        return out
