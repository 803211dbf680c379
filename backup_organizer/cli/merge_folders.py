#!/usr/bin/env python3
"""
Merge SOURCE into DEST, copying only files DEST does not already have.

Usage:
    merge-folders /backup/old_backup /backup/new_backup           # preview
    merge-folders /backup/old_backup /backup/new_backup --apply

Destination files are never overwritten and the source is never modified;
after verifying the merge the source can be deleted by hand.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from backup_organizer import __version__
from backup_organizer.cli.common import RULE, add_common_flags, setup_logging
from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.config.profile import load_profile
from backup_organizer.config.settings import get_settings
from backup_organizer.fsutils import format_bytes
from backup_organizer.merge.merger import FolderMerger, MergeResult, write_merge_report

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="merge-folders",
        description="Merge source folder into destination; destination files take precedence",
    )
    parser.add_argument("source", type=Path, help="Source directory to merge from")
    parser.add_argument("dest", type=Path, help="Destination directory to merge into")
    add_common_flags(parser)
    parser.add_argument(
        "--report-dir", type=Path, default=None, help="Save the list of copied files here"
    )
    parser.add_argument("--profile", type=Path, default=None, help="YAML cleanup profile")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_progress(result: MergeResult) -> None:
    logger.info(
        "merge_progress",
        scanned=result.scanned,
        to_copy=result.to_copy,
        skipped=result.skipped,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1
    setup_logging(args.verbose, settings)
    dry_run = not args.apply

    try:
        profile = load_profile(args.profile)
        merger = FolderMerger(
            args.source,
            args.dest,
            excludes=profile.merge_excludes,
            dry_run=dry_run,
            progress_callback=_log_progress,
        )
        result = merger.merge()
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1

    if args.report_dir is not None:
        write_merge_report(result, args.report_dir)

    logger.info(RULE)
    logger.info("SUMMARY")
    logger.info(RULE)
    logger.info(f"Files scanned:   {result.scanned}")
    logger.info(f"Files to copy:   {result.to_copy} (unique to source)")
    logger.info(f"Files skipped:   {result.skipped} (exist in destination)")
    logger.info(f"Data size:       {format_bytes(result.bytes_to_copy)}")
    if dry_run:
        logger.info("This was a DRY-RUN. No files were copied.")
        logger.info(f'To actually perform the merge, run: merge-folders "{args.source}" "{args.dest}" --apply')
    else:
        logger.info(f"Copied {result.copied} files, {result.failed} failed")
        logger.info(f'After verifying the merge, you can safely delete the source: rm -rf "{args.source}"')
    logger.info(RULE)
    return 0


if __name__ == "__main__":
    sys.exit(main())
