"""
Pydantic models for priority-based duplicate removal.

Models:
- DuplicateGroup: paths with identical content, in report order
- PriorityList: ordered folder identifiers (rank = position)
- FileCandidate: one path with its resolved rank
- Decision: one kept candidate + candidates to delete
- RunStatistics: counters accumulated by the executor
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DedupAction(str, Enum):
    """Action taken on a file in a duplicate group."""

    keep = "keep"
    delete = "delete"


class MatchKind(str, Enum):
    """How a path matched its priority identifier."""

    component = "component"
    substring = "substring"


class PriorityListSource(str, Enum):
    """Where a priority list came from."""

    explicit = "explicit"
    auto = "auto"


class DuplicateGroup(BaseModel):
    """Group of files reported as duplicates of each other."""

    group_id: int
    paths: list[str] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.paths)


class PriorityList(BaseModel):
    """Ordered folder identifiers, highest priority first."""

    identifiers: list[str] = Field(default_factory=list)
    source: PriorityListSource = PriorityListSource.explicit

    def __len__(self) -> int:
        return len(self.identifiers)

    def as_flag(self) -> str:
        """Comma-separated form accepted by --priority."""
        return ",".join(self.identifiers)


class FileCandidate(BaseModel):
    """A path and its priority rank (None = unranked)."""

    path: str
    rank: Optional[int] = None
    identifier: Optional[str] = None
    match: Optional[MatchKind] = None

    @property
    def is_ranked(self) -> bool:
        return self.rank is not None

    @property
    def sort_rank(self) -> float:
        """Rank for comparisons, unranked sorts after every listed rank."""
        return math.inf if self.rank is None else self.rank


class Decision(BaseModel):
    """Keep/delete outcome for one duplicate group."""

    group_id: int
    keep: FileCandidate
    delete: list[FileCandidate] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return 1 + len(self.delete)


class RunStatistics(BaseModel):
    """Counters for one duplicate removal run."""

    groups_scanned: int = 0
    groups_processed: int = 0
    groups_skipped: int = 0
    files_kept: int = 0
    files_to_delete: int = 0
    files_deleted: int = 0
    files_not_found: int = 0
    delete_errors: int = 0
    bytes_reclaimable: int = 0
    bytes_freed: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    elapsed_seconds: float = 0.0
