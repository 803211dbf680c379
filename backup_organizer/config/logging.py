"""
Backup Organizer - structlog configuration.

Console output is human-readable and timestamped by default; JSON lines
are available for log shipping (BACKUP_ORGANIZER_LOG_FORMAT=json).

Usage:
    from backup_organizer.config.logging import configure_logging

    # At CLI startup
    configure_logging(level="DEBUG" if args.verbose else "INFO")

    # In modules
    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("message", key=value)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from structlog.types import EventDict, WrappedLogger

from backup_organizer import __version__

HUMAN_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every JSON event with the application name and version."""
    event_dict["app"] = "backup-organizer"
    event_dict["version"] = __version__
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    enable_colors: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure structlog for the backup tools.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, JSON lines. If False, human-readable lines
        enable_colors: Colorize console output (human-readable mode only)
        log_file: Optional file that receives a copy of every log line

    Example:
        >>> configure_logging(level="DEBUG", log_file=Path("archives/run.log"))
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, level.upper()),
        force=True,
    )

    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if json_format:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.TimeStamper(fmt=HUMAN_TIMESTAMP_FORMAT),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(colors=enable_colors),
        ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
