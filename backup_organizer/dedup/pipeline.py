"""
Duplicate removal pipeline: report -> groups -> decisions -> executor.

Groups are processed one by one in report order. Dry-run and apply runs
share every step except the executor's mutating call, so both compute
identical decisions.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Callable, Iterator, Optional, TextIO

import structlog

from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.dedup.executor import DeletionExecutor
from backup_organizer.dedup.models import Decision, RunStatistics
from backup_organizer.dedup.priority_engine import PriorityEngine
from backup_organizer.dedup.report_parser import ReportParser

logger = structlog.get_logger(__name__)

DEFAULT_PROGRESS_INTERVAL = 100


def validate_report(report_path: Path) -> None:
    """
    Fail fast on a report that cannot be read.

    Raises:
        ConfigurationError: Missing, not a file, or unreadable
    """
    if not report_path.exists():
        raise ConfigurationError(f"Report file not found: {report_path}")
    if not report_path.is_file():
        raise ConfigurationError(f"Report path is not a file: {report_path}")
    if not os.access(report_path, os.R_OK):
        raise ConfigurationError(f"Report file not readable: {report_path}")


class DedupPipeline:
    """
    Resolve and execute every duplicate group of a report.

    Args:
        engine: Priority engine holding the folder priority list
        executor: Dry-run or apply executor
        progress_interval: Call progress_callback every N groups
        progress_callback: Receives the running statistics
        decision_callback: Receives each Decision after execution
    """

    def __init__(
        self,
        engine: PriorityEngine,
        executor: DeletionExecutor,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        progress_callback: Optional[Callable[[RunStatistics], None]] = None,
        decision_callback: Optional[Callable[[Decision], None]] = None,
    ):
        self.engine = engine
        self.executor = executor
        self.progress_interval = progress_interval
        self.progress_callback = progress_callback
        self.decision_callback = decision_callback

    def iter_decisions(self, stream: TextIO, stats: RunStatistics) -> Iterator[Decision]:
        """
        Yield a Decision for every resolvable group of the report.

        Updates groups_scanned/processed/skipped in stats as it goes.
        """
        parser = ReportParser()

        for group in parser.parse(stream):
            stats.groups_processed += 1
            stats.groups_scanned = parser.groups_scanned

            decision = self.engine.resolve(group)
            if decision is None:
                stats.groups_skipped += 1
            else:
                yield decision

            if self.progress_callback and stats.groups_processed % self.progress_interval == 0:
                self.progress_callback(stats)

        stats.groups_scanned = parser.groups_scanned

    def run_stream(self, stream: TextIO) -> RunStatistics:
        """Process an open report stream."""
        stats = RunStatistics()
        start = time.monotonic()

        for decision in self.iter_decisions(stream, stats):
            self.executor.apply(decision, stats)
            if self.decision_callback:
                self.decision_callback(decision)

        stats.elapsed_seconds = round(time.monotonic() - start, 3)
        return stats

    def run(self, report_path: Path) -> RunStatistics:
        """
        Process a report file.

        Raises:
            ConfigurationError: Report missing or unreadable
        """
        validate_report(report_path)

        logger.info(
            "dedup_run_started",
            report=str(report_path),
            dry_run=self.executor.dry_run,
            priorities=len(self.engine.priorities),
        )

        with open(report_path, "r", encoding="utf-8", errors="replace") as f:
            stats = self.run_stream(f)

        logger.info(
            "dedup_run_completed",
            groups=stats.groups_processed,
            skipped=stats.groups_skipped,
            kept=stats.files_kept,
            to_delete=stats.files_to_delete,
            deleted=stats.files_deleted,
            not_found=stats.files_not_found,
            errors=stats.delete_errors,
            elapsed_seconds=stats.elapsed_seconds,
        )
        return stats
