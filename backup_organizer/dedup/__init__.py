"""
Priority-based duplicate removal.

Modules:
- report_parser: streaming parser for jdupes reports
- priority_list: --priority parsing and folder auto-detection
- priority_engine: keep/delete selection per duplicate group
- executor: dry-run or apply deletion with statistics
- pipeline: report -> decisions -> executor
- summary: text summary, CSV and JSON exports
- models: Pydantic data models
"""

from backup_organizer.dedup.models import (
    Decision,
    DuplicateGroup,
    FileCandidate,
    PriorityList,
    RunStatistics,
)

__all__ = [
    "Decision",
    "DuplicateGroup",
    "FileCandidate",
    "PriorityList",
    "RunStatistics",
]
