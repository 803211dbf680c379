"""
Run summary and decision exports for duplicate removal.

- Text summary (counts, space, elapsed time) logged at the end of a run
- CSV export of every keep/delete decision, stats as comment header
- JSON dump of RunStatistics
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional, TextIO

import structlog

from backup_organizer.dedup.models import DedupAction, Decision, FileCandidate, RunStatistics
from backup_organizer.fsutils import format_bytes

logger = structlog.get_logger(__name__)


def summary_lines(stats: RunStatistics, dry_run: bool) -> list[str]:
    """Human-readable summary block, one string per line."""
    lines = [
        "SUMMARY",
        f"Duplicate groups:     {stats.groups_processed}",
        f"Groups skipped:       {stats.groups_skipped}",
        f"Files to keep:        {stats.files_kept}",
        f"Files to delete:      {stats.files_to_delete}",
        f"Files not found:      {stats.files_not_found}",
    ]
    if dry_run:
        lines.append(f"Space reclaimable:    {format_bytes(stats.bytes_reclaimable)}")
    else:
        lines.append(f"Files deleted:        {stats.files_deleted}")
        lines.append(f"Delete errors:        {stats.delete_errors}")
        lines.append(f"Space freed:          {format_bytes(stats.bytes_freed)}")
    lines.append(f"Execution time:       {int(stats.elapsed_seconds)}s")
    return lines


def write_json_summary(stats: RunStatistics, output_path: Path) -> Path:
    """Dump RunStatistics as JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(stats.model_dump_json(indent=2), encoding="utf-8")
    logger.info("dedup_json_summary_written", output_path=str(output_path))
    return output_path


class DecisionCsvWriter:
    """
    Stream decisions to a CSV file as they are executed.

    Use as a context manager; pass `write` as the pipeline's
    decision_callback and call `write_footer` with the final stats.
    """

    CSV_COLUMNS = [
        "group_id",
        "action",
        "rank",
        "identifier",
        "match",
        "file_path",
    ]

    def __init__(self, output_path: Path):
        self.output_path = output_path
        self._file: Optional[TextIO] = None
        self._writer: Optional[csv.DictWriter] = None
        self.rows_written = 0

    def __enter__(self) -> "DecisionCsvWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.output_path, "w", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._file, fieldnames=self.CSV_COLUMNS)
        self._writer.writeheader()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._writer = None
        logger.info(
            "dedup_csv_report_generated",
            output_path=str(self.output_path),
            rows=self.rows_written,
        )

    def write(self, decision: Decision) -> None:
        self._write_row(decision.group_id, DedupAction.keep, decision.keep)
        for candidate in decision.delete:
            self._write_row(decision.group_id, DedupAction.delete, candidate)

    def write_footer(self, stats: RunStatistics, dry_run: bool) -> None:
        """Append the run summary as comment lines."""
        if self._file is None:
            raise RuntimeError("DecisionCsvWriter used outside its context manager")
        for line in summary_lines(stats, dry_run):
            self._file.write(f"# {line}\n")

    def _write_row(self, group_id: int, action: DedupAction, candidate: FileCandidate) -> None:
        if self._writer is None:
            raise RuntimeError("DecisionCsvWriter used outside its context manager")
        self._writer.writerow(
            {
                "group_id": group_id,
                "action": action.value,
                "rank": "-" if candidate.rank is None else candidate.rank,
                "identifier": candidate.identifier or "-",
                "match": candidate.match.value if candidate.match else "-",
                "file_path": candidate.path,
            }
        )
        self.rows_written += 1
