#!/usr/bin/env python3
"""
Remove duplicate files listed in a jdupes report, keeping the copy in the
highest-priority folder.

Usage:
    jdupes -r /backup/2024 /backup/2023 > duplicates.log
    remove-duplicates duplicates.log                                  # preview
    remove-duplicates duplicates.log --priority=2024,2023 --apply     # delete

Priority strategy:
    1. For each duplicate group, keep the file from the highest priority folder
    2. Mark the others for deletion
    3. Several files in the same priority folder: keep the first one listed
    4. Groups where no file matches a priority folder are skipped
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from backup_organizer import __version__
from backup_organizer.cli.common import RULE, add_common_flags, positive_int, setup_logging
from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.config.settings import BackupOrganizerSettings, get_settings
from backup_organizer.dedup.executor import DeletionExecutor
from backup_organizer.dedup.models import PriorityList, PriorityListSource, RunStatistics
from backup_organizer.dedup.pipeline import DedupPipeline, validate_report
from backup_organizer.dedup.priority_engine import PriorityEngine
from backup_organizer.dedup.priority_list import build_priority_list
from backup_organizer.dedup.summary import DecisionCsvWriter, summary_lines, write_json_summary

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remove-duplicates",
        description="Priority-based duplicate remover for jdupes reports",
    )
    parser.add_argument("report", type=Path, help="Path to jdupes duplicate report file")
    add_common_flags(parser)
    parser.add_argument(
        "--priority",
        default=None,
        help=(
            "Comma-separated folder priorities, highest first (default: auto-detect). "
            "An identifier matches a path component, or any substring of the path"
        ),
    )
    parser.add_argument(
        "--trash",
        action="store_true",
        help="Send deleted files to the trash instead of removing them",
    )
    parser.add_argument(
        "--progress-every",
        type=positive_int,
        default=None,
        help="Log progress every N groups (default: 100)",
    )
    parser.add_argument("--csv", type=Path, default=None, help="Write every decision to a CSV file")
    parser.add_argument(
        "--json-summary", type=Path, default=None, help="Write run statistics as JSON"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_header(report: Path, priorities: PriorityList, dry_run: bool) -> None:
    logger.info(RULE)
    logger.info(f"remove-duplicates v{__version__}")
    logger.info(RULE)
    if dry_run:
        logger.info("Mode:        DRY-RUN (preview only)")
        logger.info("             Use --apply to actually delete files")
    else:
        logger.info("Mode:        APPLY (will delete files)")
    logger.info(f"Report file: {report}")
    logger.info("Folder Priority (keep files in this order):")
    for position, identifier in enumerate(priorities.identifiers, start=1):
        logger.info(f"  {position}. {identifier}")
    logger.info(RULE)


def _log_footer(report: Path, priorities: PriorityList, stats: RunStatistics, dry_run: bool) -> None:
    logger.info(RULE)
    for line in summary_lines(stats, dry_run):
        logger.info(line)
    logger.info(RULE)
    if dry_run:
        logger.info("This was a DRY-RUN. No files were deleted.")
        command = f'remove-duplicates "{report}" --apply'
        if priorities.source is PriorityListSource.auto:
            command += f" --priority={priorities.as_flag()}"
        logger.info(f"To actually delete these files, run: {command}")
    else:
        logger.info(
            "Duplicate removal complete",
            deleted=stats.files_deleted,
            freed_bytes=stats.bytes_freed,
        )


def _log_progress(stats: RunStatistics) -> None:
    logger.info(
        "dedup_progress",
        groups=stats.groups_processed,
        to_delete=stats.files_to_delete,
        kept=stats.files_kept,
    )


def run(args: argparse.Namespace, settings: BackupOrganizerSettings) -> RunStatistics:
    """
    Run a removal from parsed arguments.

    Raises:
        ConfigurationError: Unreadable report, bad --priority, nothing detected
    """
    dry_run = not args.apply
    validate_report(args.report)

    priorities = build_priority_list(
        args.report,
        args.priority,
        max_lines=settings.autodetect_max_lines,
        max_folders=settings.autodetect_max_folders,
    )
    _log_header(args.report, priorities, dry_run)

    pipeline = DedupPipeline(
        engine=PriorityEngine(priorities),
        executor=DeletionExecutor(dry_run=dry_run, use_trash=args.trash),
        progress_interval=args.progress_every or settings.progress_interval,
        progress_callback=_log_progress,
    )

    if args.csv is not None:
        with DecisionCsvWriter(args.csv) as writer:
            pipeline.decision_callback = writer.write
            stats = pipeline.run(args.report)
            writer.write_footer(stats, dry_run)
    else:
        stats = pipeline.run(args.report)

    if args.json_summary is not None:
        write_json_summary(stats, args.json_summary)

    _log_footer(args.report, priorities, stats, dry_run)
    return stats


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1
    setup_logging(args.verbose, settings)

    try:
        run(args, settings)
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
