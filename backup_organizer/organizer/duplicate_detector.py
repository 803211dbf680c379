"""
Run jdupes out-of-process to find content duplicates across folders.

Modes:
- report: `jdupes -r FOLDERS`, output saved to a report file that
  `remove-duplicates` can consume
- interactive: `jdupes -rd FOLDERS`, jdupes prompts for each group
"""

from __future__ import annotations

import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

import structlog

from backup_organizer.config.exceptions import ConfigurationError, MissingCommandError

logger = structlog.get_logger(__name__)

JDUPES = "jdupes"

JDUPES_INSTALL_HINT = (
    "Install it with: brew install jdupes (macOS), "
    "sudo apt-get install jdupes (Ubuntu/Debian), "
    "sudo dnf install jdupes (Fedora/RHEL), "
    "sudo pacman -S jdupes (Arch Linux)"
)


class DedupeMode(str, Enum):
    off = "off"
    report = "report"
    interactive = "interactive"


def parse_dedupe_mode(value: str) -> DedupeMode:
    try:
        return DedupeMode(value)
    except ValueError:
        raise ConfigurationError(
            f"--dedupe must be one of: off, report, interactive (got {value!r})"
        ) from None


def require_command(command: str, hint: str = "") -> str:
    """
    Locate an external command.

    Raises:
        MissingCommandError: Command not on PATH
    """
    resolved = shutil.which(command)
    if resolved is None:
        raise MissingCommandError(command, hint)
    return resolved


class DuplicateDetector:
    """Thin wrapper around the jdupes CLI."""

    def __init__(self, command: str = JDUPES):
        self.command = require_command(command, JDUPES_INSTALL_HINT)

    def generate_report(self, folders: Sequence[Path], report_path: Path) -> Path:
        """
        Write a jdupes duplicate report for the given folders.

        Returns:
            Path to the report

        Raises:
            subprocess.CalledProcessError: jdupes failed
        """
        report_path.parent.mkdir(parents=True, exist_ok=True)
        cmd = [self.command, "-r", *[str(f) for f in folders]]
        logger.info("dedupe_report_running", command=" ".join(cmd))

        result = subprocess.run(
            cmd,
            capture_output=True,
            check=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        report_path.write_text(result.stdout, encoding="utf-8")

        groups = sum(1 for block in result.stdout.split("\n\n") if block.strip())
        logger.info(
            "dedupe_report_generated",
            report=str(report_path),
            groups=groups,
        )
        if result.stderr.strip():
            logger.debug("dedupe_report_stderr", stderr=result.stderr.strip())
        return report_path

    def run_interactive(self, folders: Sequence[Path]) -> int:
        """
        Let jdupes prompt for which duplicates to delete.

        Returns:
            jdupes exit code
        """
        cmd = [self.command, "-rd", *[str(f) for f in folders]]
        logger.info("dedupe_interactive_running", command=" ".join(cmd))
        result = subprocess.run(cmd, check=False)
        logger.info("dedupe_interactive_completed", returncode=result.returncode)
        return result.returncode


def detect_duplicates(
    mode: DedupeMode,
    folders: Sequence[Path],
    report_path: Path,
    dry_run: bool,
    detector: Optional[DuplicateDetector] = None,
) -> Optional[Path]:
    """
    Run the deduplication phase for a mode.

    Returns:
        Report path in report mode, None otherwise

    Raises:
        ConfigurationError: interactive mode without --apply
    """
    if mode is DedupeMode.off:
        logger.info("dedupe_disabled", hint="use --dedupe=report or --dedupe=interactive")
        return None

    if mode is DedupeMode.interactive and dry_run:
        raise ConfigurationError("Interactive deduplication requires --apply flag")

    detector = detector or DuplicateDetector()

    if mode is DedupeMode.report:
        report = detector.generate_report(folders, report_path)
        logger.info(
            "dedupe_next_step",
            hint=f"remove-duplicates {report} --priority=<newest>,<older>",
        )
        return report

    detector.run_interactive(folders)
    return None
