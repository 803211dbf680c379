"""
Priority rules engine for duplicate file selection.

Selects which file to keep among duplicates from an ordered folder list:
1. Rank = index of the first identifier found in the path
   (as a "/name/" folder component, or anywhere as a plain substring)
2. Lowest rank is kept; ties keep the earliest path in report order
3. A group where no path matches any identifier is skipped

Substring matching is naive: "backup" also matches
"backup12/" and "/home/old_backups/". Order the list accordingly.
"""

from __future__ import annotations

from typing import Optional

import structlog

from backup_organizer.dedup.models import (
    Decision,
    DuplicateGroup,
    FileCandidate,
    MatchKind,
    PriorityList,
)

logger = structlog.get_logger(__name__)


class PriorityEngine:
    """
    Select which file to keep among duplicates.

    Pure decisions: the engine never touches the filesystem.
    """

    def __init__(self, priorities: PriorityList):
        self.priorities = priorities

    def rank_path(self, path: str) -> FileCandidate:
        """
        Resolve the priority rank of a path.

        Iterates identifiers in priority order; the first identifier found
        in the path wins, regardless of how later identifiers would match.

        Returns:
            FileCandidate with rank None when no identifier matches
        """
        for rank, identifier in enumerate(self.priorities.identifiers):
            if f"/{identifier}/" in path:
                return FileCandidate(
                    path=path, rank=rank, identifier=identifier, match=MatchKind.component
                )
            if identifier in path:
                return FileCandidate(
                    path=path, rank=rank, identifier=identifier, match=MatchKind.substring
                )

        return FileCandidate(path=path)

    def resolve(self, group: DuplicateGroup) -> Optional[Decision]:
        """
        Keep 1 file, mark the others for deletion.

        Args:
            group: Duplicate group (2+ paths, report order)

        Returns:
            Decision, or None when every path is unranked (group skipped)
        """
        candidates = [self.rank_path(path) for path in group.paths]

        # min() returns the first minimal element: report order breaks ties
        keeper_index = min(range(len(candidates)), key=lambda i: candidates[i].sort_rank)
        keeper = candidates[keeper_index]

        if not keeper.is_ranked:
            logger.debug(
                "dedup_group_skipped",
                group_id=group.group_id,
                files=group.size,
                reason="no file matches a priority folder",
            )
            return None

        # A path listed twice must never be deleted as a copy of itself
        to_delete = [c for c in candidates if c.path != keeper.path]

        return Decision(group_id=group.group_id, keep=keeper, delete=to_delete)
