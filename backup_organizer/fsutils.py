"""
Filesystem helpers shared by the backup tools.

- Glob matching on names or trailing path components
- File iteration with exclusions
- Tree sizes and human-readable byte counts
"""

from __future__ import annotations

import os
from datetime import datetime
from fnmatch import fnmatchcase
from pathlib import Path, PurePath
from typing import Iterable, Iterator

import structlog

logger = structlog.get_logger(__name__)

KB = 1024
MB = 1024 * 1024
GB = 1024 * 1024 * 1024


def timestamp() -> str:
    """Stamp used in archive, log and report file names."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def matches_pattern(path: PurePath, pattern: str) -> bool:
    """
    Check a path against a glob pattern.

    A pattern without "/" is matched against the last component only
    ("*.egg-info"). A pattern with "/" is matched component by component
    against the trailing components ("vendor/bundle").
    """
    pattern_parts = [p for p in pattern.split("/") if p]
    if not pattern_parts:
        return False
    if len(pattern_parts) == 1:
        return fnmatchcase(path.name, pattern_parts[0])

    tail = path.parts[-len(pattern_parts):]
    if len(tail) < len(pattern_parts):
        return False
    return all(fnmatchcase(part, pat) for part, pat in zip(tail, pattern_parts))


def matches_any(path: PurePath, patterns: Iterable[str]) -> bool:
    """True if the path matches one of the patterns."""
    return any(matches_pattern(path, pattern) for pattern in patterns)


def iter_files(root: Path, excludes: Iterable[str] = ()) -> Iterator[Path]:
    """
    Yield regular files under root, sorted per directory.

    Directories matching an exclusion are not descended into; files
    matching one are skipped. Symlinked directories are not followed.
    """
    excludes = list(excludes)

    def _on_error(error: OSError) -> None:
        logger.debug("scan_permission_denied", path=error.filename, error=str(error))

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not matches_any(current / d, excludes))
        for name in sorted(filenames):
            file_path = current / name
            if matches_any(file_path, excludes):
                continue
            yield file_path


def directory_size(path: Path) -> int:
    """Total size in bytes of the regular files under path (best effort)."""
    if path.is_file():
        try:
            return path.stat().st_size
        except OSError:
            return 0

    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError:
                continue
    return total


def format_bytes(num_bytes: int) -> str:
    """Whole-unit size, largest unit first: "3 GB", "12 MB", "4 KB", "17 bytes"."""
    if num_bytes >= GB:
        return f"{num_bytes // GB} GB"
    if num_bytes >= MB:
        return f"{num_bytes // MB} MB"
    if num_bytes >= KB:
        return f"{num_bytes // KB} KB"
    return f"{num_bytes} bytes"


def human_size(path: Path) -> str:
    """Readable size of a file or tree, "N/A" when it does not exist."""
    if not path.exists():
        return "N/A"
    return format_bytes(directory_size(path))
