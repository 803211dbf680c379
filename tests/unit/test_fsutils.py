"""
Unit tests for filesystem helpers.
"""

import re
from pathlib import Path, PurePosixPath

import pytest

from backup_organizer.fsutils import (
    directory_size,
    format_bytes,
    human_size,
    iter_files,
    matches_pattern,
    timestamp,
)


@pytest.mark.parametrize(
    "path,pattern,expected",
    [
        ("/x/node_modules", "node_modules", True),
        ("/x/mylib.egg-info", "*.egg-info", True),
        ("/x/venv3", "venv*", True),
        ("/x/Venv", "venv", False),
        ("/ruby/vendor/bundle", "vendor/bundle", True),
        ("/ruby/bundle", "vendor/bundle", False),
        ("/x/.vscode/extensions", ".vscode/extensions", True),
        ("/x/extensions", ".vscode/extensions", False),
        ("/x/anything", "/", False),
    ],
)
def test_matches_pattern(path, pattern, expected):
    assert matches_pattern(PurePosixPath(path), pattern) is expected


@pytest.mark.parametrize(
    "num_bytes,expected",
    [
        (0, "0 bytes"),
        (1023, "1023 bytes"),
        (1024, "1 KB"),
        (5 * 1024 * 1024 + 1, "5 MB"),
        (3 * 1024 ** 3, "3 GB"),
    ],
)
def test_format_bytes(num_bytes, expected):
    assert format_bytes(num_bytes) == expected


def test_iter_files_sorted_with_excludes(tmp_path):
    for rel in ["b.txt", "a.txt", "sub/c.txt", ".git/HEAD", "sub/.DS_Store"]:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x")

    files = [p.relative_to(tmp_path).as_posix() for p in iter_files(tmp_path, [".git", ".DS_Store"])]

    assert files == ["a.txt", "b.txt", "sub/c.txt"]


def test_directory_size(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "a").write_bytes(b"12345")
    (tmp_path / "sub" / "b").write_bytes(b"123")

    assert directory_size(tmp_path) == 8
    assert directory_size(tmp_path / "a") == 5


def test_human_size_missing(tmp_path):
    assert human_size(tmp_path / "missing") == "N/A"
    assert human_size(Path(tmp_path)) == "0 bytes"


def test_timestamp_format():
    assert re.fullmatch(r"\d{8}_\d{6}", timestamp())
