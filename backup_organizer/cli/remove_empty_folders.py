#!/usr/bin/env python3
"""
Remove empty directories recursively, deepest first.

Usage:
    remove-empty-folders /path/to/backup                     # preview, saves a report
    remove-empty-folders --apply /path/to/backup
    remove-empty-folders --apply --min-depth=2 backup1 backup2
    remove-empty-folders --apply --from-report=archives/empty_folders_20250101_120000.txt

Version-control folders (.git, .svn, .hg, .bzr, CVS) are never removed.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog

from backup_organizer import __version__
from backup_organizer.cli.common import RULE, add_common_flags, non_negative_int, setup_logging
from backup_organizer.config.exceptions import ConfigurationError
from backup_organizer.config.profile import load_profile
from backup_organizer.config.settings import get_settings
from backup_organizer.fsutils import timestamp
from backup_organizer.prune.empty_dirs import EmptyFolderPruner, default_report_path

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remove-empty-folders",
        description="Empty folder remover",
    )
    parser.add_argument("folders", nargs="*", type=Path, help="Folders to scan")
    add_common_flags(parser)
    parser.add_argument(
        "--min-depth",
        type=non_negative_int,
        default=1,
        help="Only remove folders at depth N or deeper (default: 1)",
    )
    parser.add_argument(
        "--include-hidden", action="store_true", help="Also remove hidden empty folders"
    )
    parser.add_argument(
        "--from-report",
        type=Path,
        default=None,
        help="Remove the folders listed in a previous report (skips scanning)",
    )
    parser.add_argument(
        "--report-dir", type=Path, default=None, help="Directory for logs and reports"
    )
    parser.add_argument("--profile", type=Path, default=None, help="YAML cleanup profile")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def validate_args(args: argparse.Namespace) -> None:
    """
    Raises:
        ConfigurationError: Missing report, no folders, or folder not found
    """
    if args.from_report is not None:
        if not args.from_report.is_file():
            raise ConfigurationError(f"Report file not found: {args.from_report}")
        return
    if not args.folders:
        raise ConfigurationError("No folders specified")
    for folder in args.folders:
        if not folder.is_dir():
            raise ConfigurationError(f"Folder does not exist: {folder}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1
    report_dir = args.report_dir or Path(settings.archive_dir)
    log_file = report_dir / f"remove-empty-folders_{timestamp()}.log"
    setup_logging(args.verbose, settings, log_file=log_file)
    dry_run = not args.apply

    try:
        validate_args(args)
        profile = load_profile(args.profile)
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return 1

    logger.info(
        "prune_started",
        mode="DRY-RUN" if dry_run else "APPLY",
        min_depth=args.min_depth,
        include_hidden=args.include_hidden,
        folders=len(args.folders),
        from_report=str(args.from_report) if args.from_report else None,
        log_file=str(log_file),
    )

    if args.from_report is not None:
        pruner = EmptyFolderPruner(
            min_depth=args.min_depth,
            include_hidden=args.include_hidden,
            protected_dirs=profile.protected_dirs,
            dry_run=dry_run,
        )
        pruner.prune_from_report(args.from_report)
        next_step = f"remove-empty-folders --apply --from-report={args.from_report}"
    else:
        report_path = default_report_path(report_dir)
        pruner = EmptyFolderPruner(
            min_depth=args.min_depth,
            include_hidden=args.include_hidden,
            protected_dirs=profile.protected_dirs,
            dry_run=dry_run,
            report_path=report_path,
        )
        for folder in args.folders:
            logger.info(RULE)
            pruner.prune(folder)
        if report_path.exists():
            next_step = f"remove-empty-folders --apply --from-report={report_path}"
        else:
            next_step = "nothing to remove"

    logger.info(RULE)
    if dry_run:
        logger.info("Dry-run complete - no changes made")
        logger.info(f"Next step: {next_step}")
    else:
        logger.info("Empty folder removal complete")
    logger.info(f"Complete log saved to: {log_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
