"""
Streaming parser for jdupes-style duplicate reports.

Report format: each duplicate group is a run of absolute path lines,
closed by a blank line or a metadata line (a "[20..." timestamp from a
teed log, or a line starting with a digit such as a jdupes summary).
Anything else is ignored.

    /backups/2024/photos/a.jpg
    /backups/2023/photos/a.jpg

    /backups/2024/docs/cv.pdf
    /backups/2023/docs/cv.pdf
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional, TextIO

import structlog

from backup_organizer.dedup.models import DuplicateGroup

logger = structlog.get_logger(__name__)

PATH_PREFIX = "/"

# "[2025-01-31 10:00:00] ..." log lines and "12 duplicate files ..." summaries
BOUNDARY_PATTERN = re.compile(r"^(\[20|\d)")


def is_boundary(line: str) -> bool:
    """True if the line closes the current group."""
    return not line.strip() or BOUNDARY_PATTERN.match(line) is not None


def is_path_line(line: str) -> bool:
    return line.startswith(PATH_PREFIX)


def iter_path_lines(stream: Iterable[str]) -> Iterator[str]:
    """Yield path lines only, line endings stripped."""
    for raw in stream:
        line = raw.rstrip("\r\n")
        if is_path_line(line):
            yield line


class ReportParser:
    """
    Turn a duplicate report into DuplicateGroup values.

    Single pass over the stream: groups are yielded lazily as each one
    closes, and the trailing group is flushed at end of stream. Groups
    with fewer than 2 paths are dropped but still counted as scanned.
    """

    def __init__(self) -> None:
        self.lines_read = 0
        self.ignored_lines = 0
        self.groups_scanned = 0
        self.groups_emitted = 0

    def parse(self, stream: TextIO) -> Iterator[DuplicateGroup]:
        current: list[str] = []

        for raw in stream:
            self.lines_read += 1
            line = raw.rstrip("\r\n")

            if is_boundary(line):
                group = self._close(current)
                current = []
                if group is not None:
                    yield group
                continue

            if is_path_line(line):
                current.append(line)
            else:
                self.ignored_lines += 1

        group = self._close(current)
        if group is not None:
            yield group

        logger.debug(
            "dedup_report_parsed",
            lines_read=self.lines_read,
            ignored_lines=self.ignored_lines,
            groups_scanned=self.groups_scanned,
            groups_emitted=self.groups_emitted,
        )

    def _close(self, paths: list[str]) -> Optional[DuplicateGroup]:
        """Finalize a group at a boundary, None if nothing to decide."""
        if not paths:
            return None

        self.groups_scanned += 1
        if len(paths) < 2:
            return None

        self.groups_emitted += 1
        return DuplicateGroup(group_id=self.groups_emitted, paths=paths)
