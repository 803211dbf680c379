"""
Apply (or simulate) keep/delete decisions against the filesystem.

Features:
- Existence check before each deletion (missing files are counted, not fatal)
- Best-effort size read for space accounting
- Permanent removal, or send2trash when trash mode is on
- Per-file errors are logged and the batch continues

Dry-run mode performs the same checks read-only and never mutates.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from backup_organizer.dedup.models import Decision, RunStatistics

logger = structlog.get_logger(__name__)


class DeletionExecutor:
    """
    Execute Decisions one at a time, accumulating into a RunStatistics.

    The kept file of a Decision is never touched.
    """

    def __init__(self, dry_run: bool = True, use_trash: bool = False):
        """
        Initialize executor.

        Args:
            dry_run: Only count and log, never delete
            use_trash: Send files to the trash instead of unlinking them
        """
        self.dry_run = dry_run
        self.use_trash = use_trash

    def apply(self, decision: Decision, stats: RunStatistics) -> RunStatistics:
        """
        Process one Decision.

        Args:
            decision: Keep/delete outcome for a group
            stats: Statistics updated in place

        Returns:
            The same RunStatistics, for chaining
        """
        stats.files_kept += 1
        logger.debug(
            "dedup_keep",
            group_id=decision.group_id,
            file_path=decision.keep.path,
            rank=decision.keep.rank,
            identifier=decision.keep.identifier,
        )

        for candidate in decision.delete:
            stats.files_to_delete += 1
            logger.debug(
                "dedup_delete",
                group_id=decision.group_id,
                file_path=candidate.path,
                rank=candidate.rank,
                dry_run=self.dry_run,
            )
            self._delete_file(Path(candidate.path), stats)

        return stats

    def _delete_file(self, file_path: Path, stats: RunStatistics) -> None:
        """Delete one file, recording the outcome in stats."""
        if not file_path.is_file():
            stats.files_not_found += 1
            logger.debug(
                "dedup_file_not_found",
                file_path=str(file_path),
                reason="already deleted or moved",
            )
            return

        try:
            file_size = file_path.stat().st_size
        except OSError:
            file_size = 0
        stats.bytes_reclaimable += file_size

        if self.dry_run:
            return

        try:
            self._remove(file_path)
        except PermissionError as e:
            stats.delete_errors += 1
            logger.warning(
                "dedup_delete_permission_denied",
                file_path=str(file_path),
                error=str(e),
            )
            return
        except OSError as e:
            stats.delete_errors += 1
            logger.error(
                "dedup_delete_failed",
                file_path=str(file_path),
                error=str(e),
            )
            return

        stats.files_deleted += 1
        stats.bytes_freed += file_size
        logger.debug("dedup_file_deleted", file_path=str(file_path), size_bytes=file_size)

    def _remove(self, file_path: Path) -> None:
        if self.use_trash:
            import send2trash

            send2trash.send2trash(str(file_path))
        else:
            file_path.unlink()
