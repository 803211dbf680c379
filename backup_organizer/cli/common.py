"""Shared argparse and logging plumbing for the console scripts."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from backup_organizer.config.logging import configure_logging
from backup_organizer.config.settings import BackupOrganizerSettings

RULE = "=" * 42


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"must be a number, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def non_negative_int(value: str) -> int:
    """argparse type for integers >= 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"must be a number, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Actually perform changes (default: dry-run preview)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")


def setup_logging(
    verbose: bool,
    settings: BackupOrganizerSettings,
    log_file: Optional[Path] = None,
) -> None:
    level = "DEBUG" if verbose else settings.log_level
    configure_logging(
        level=level,
        json_format=settings.log_format == "json",
        log_file=log_file,
    )
