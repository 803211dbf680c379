#!/usr/bin/env python3
"""
Clean backup folders (venv, node_modules, __pycache__, ...), optionally
find duplicates with jdupes, and create tar.gz archives.

Usage:
    organize-backups --out=./archives backup1 backup2                 # preview
    organize-backups --apply --out=./archives backup1 backup2
    organize-backups --apply --dedupe=report backup1 backup2
    organize-backups --apply --clean-only --skip-size-calc backup1 backup2

Deduplication modes:
    off          No deduplication (default)
    report       Save a jdupes report of duplicate files (no deletion)
    interactive  Choose which duplicates to delete (requires --apply)
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
from backup_organizer.fsutils import timestamp
from backup_organizer.organizer.duplicate_detector import DedupeMode, parse_dedupe_mode
from backup_organizer.organizer.pipeline import BackupOrganizer

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="organize-backups",
        description="Backup organizer: clean junk, find duplicates, create archives",
    )
    parser.add_argument("folders", nargs="+", type=Path, help="Backup folders to process")
    add_common_flags(parser)
    parser.add_argument(
        "--dedupe",
        default=DedupeMode.off.value,
        help="Deduplication mode: off|report|interactive (default: off)",
    )
    parser.add_argument(
        "--out", type=Path, default=None, help="Output directory for archives (default: ./archives)"
    )
    parser.add_argument(
        "--skip-size-calc", action="store_true", help="Skip initial/final size calculations"
    )
    parser.add_argument(
        "--clean-only", action="store_true", help="Only clean junk, skip deduplication and archiving"
    )
    parser.add_argument("--profile", type=Path, default=None, help="YAML cleanup profile")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1
    out_dir = args.out or Path(settings.archive_dir)
    log_file = out_dir / f"backup_organizer_{timestamp()}.log"
    setup_logging(args.verbose, settings, log_file=log_file)
    dry_run = not args.apply

    try:
        organizer = BackupOrganizer(
            folders=args.folders,
            out_dir=out_dir,
            profile=load_profile(args.profile),
            dry_run=dry_run,
            dedupe=parse_dedupe_mode(args.dedupe),
            clean_only=args.clean_only,
            skip_size_calc=args.skip_size_calc,
        )
        result = organizer.run()
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1

    logger.info(RULE)
    logger.info("SUMMARY")
    logger.info(RULE)
    logger.info(f"Junk directories found:   {result.junk_found}")
    if not dry_run:
        logger.info(f"Junk directories removed: {result.junk_removed}")
        logger.info(f"Archives created:         {len(result.archives)}")
    if result.failed_archives:
        logger.warning("Archives failed", folders=result.failed_archives)
    if result.dedupe_report is not None:
        logger.info(f"Duplicate report:         {result.dedupe_report}")
    logger.info(f"Log file:                 {log_file}")
    if dry_run:
        logger.info("NOTE: This was a DRY-RUN. No changes were made.")
        logger.info("To actually perform these operations, run with --apply flag")
    logger.info(RULE)
    return 1 if result.failed_archives else 0


if __name__ == "__main__":
    sys.exit(main())
