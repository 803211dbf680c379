"""
Shared pytest fixtures for Backup Organizer tests.

- report_file: writes a jdupes-style report into tmp_path
- backup_tree: builds real files for duplicate groups
"""

import logging
import sys
from pathlib import Path

import pytest
import structlog

# Add repo root to PYTHONPATH (once for every test module)
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from backup_organizer.config.settings import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def reset_structlog():
    """Each test starts from structlog defaults and freshly read settings."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
    for handler in logging.root.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            logging.root.removeHandler(handler)
            handler.close()


@pytest.fixture
def report_file(tmp_path):
    """Factory: write report text to a file and return its path."""

    def _write(content: str, name: str = "duplicates.log") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def backup_tree(tmp_path):
    """
    Factory: create files with identical content for a duplicate group.

    Returns the absolute paths (as strings) in the order given.
    """

    def _make(rel_paths: list[str], content: bytes = b"duplicate content") -> list[str]:
        paths = []
        for rel in rel_paths:
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
            paths.append(str(path))
        return paths

    return _make


def make_report(*groups: list[str]) -> str:
    """jdupes-style report text: groups separated by blank lines."""
    return "\n\n".join("\n".join(group) for group in groups) + "\n"
