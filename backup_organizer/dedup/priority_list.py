"""
Build the folder priority list, from --priority or from the report itself.

Auto-detection looks at the first path lines of the report, counts the
parent folder name of each file and keeps the most frequent ones.
"""

from __future__ import annotations

from collections import Counter
from itertools import islice
from pathlib import Path, PurePosixPath
from typing import Optional

import structlog

from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.dedup.models import PriorityList, PriorityListSource
from backup_organizer.dedup.report_parser import iter_path_lines

logger = structlog.get_logger(__name__)

DEFAULT_MAX_LINES = 100
DEFAULT_MAX_FOLDERS = 10


def parse_priority_flag(value: str) -> PriorityList:
    """
    Parse "backup2024,backup2023" into a PriorityList.

    Order is preserved and duplicates are kept (first occurrence wins at
    lookup time). Blank items are dropped.

    Raises:
        ConfigurationError: No identifier left after splitting
    """
    identifiers = [item.strip() for item in value.split(",")]
    identifiers = [item for item in identifiers if item]

    if not identifiers:
        raise ConfigurationError(f"Invalid --priority value: {value!r}")

    return PriorityList(identifiers=identifiers, source=PriorityListSource.explicit)


def detect_priorities(
    report_path: Path,
    max_lines: int = DEFAULT_MAX_LINES,
    max_folders: int = DEFAULT_MAX_FOLDERS,
) -> PriorityList:
    """
    Derive a PriorityList from the most frequent parent folders in a report.

    Args:
        report_path: jdupes report
        max_lines: Number of path lines sampled from the top of the report
        max_folders: Maximum number of identifiers kept

    Returns:
        PriorityList, most frequent folder first (ties by first appearance)

    Raises:
        ConfigurationError: Report unreadable, or no folder found
    """
    try:
        with open(report_path, "r", encoding="utf-8", errors="replace") as f:
            sample = list(islice(iter_path_lines(f), max_lines))
    except OSError as e:
        raise ConfigurationError(f"Report file not readable: {report_path} ({e})") from e

    counts: Counter[str] = Counter()
    for line in sample:
        folder = PurePosixPath(line).parent.name
        if folder:
            counts[folder] += 1

    identifiers = [folder for folder, _count in counts.most_common(max_folders)]

    if not identifiers:
        raise ConfigurationError(
            "Could not auto-detect folder priorities from report. "
            "Please specify priorities manually with --priority=folder1,folder2,..."
        )

    logger.info(
        "dedup_priorities_detected",
        sampled_lines=len(sample),
        folders=len(identifiers),
    )
    return PriorityList(identifiers=identifiers, source=PriorityListSource.auto)


def build_priority_list(
    report_path: Path,
    priority_flag: Optional[str] = None,
    max_lines: int = DEFAULT_MAX_LINES,
    max_folders: int = DEFAULT_MAX_FOLDERS,
) -> PriorityList:
    """Explicit list when --priority is given, auto-detection otherwise."""
    if priority_flag:
        return parse_priority_flag(priority_flag)

    logger.info("dedup_priorities_autodetect", report=str(report_path))
    return detect_priorities(report_path, max_lines=max_lines, max_folders=max_folders)
