"""
Integration tests: report file -> priority list -> pipeline -> filesystem.

Tests:
- Dry-run and apply compute identical decisions
- Re-applying the same report is idempotent (files reported not found)
- Realistic jdupes output with log noise and no trailing blank line
"""

from pathlib import Path

from backup_organizer.dedup.executor import DeletionExecutor
from backup_organizer.dedup.pipeline import DedupPipeline
from backup_organizer.dedup.priority_engine import PriorityEngine
from backup_organizer.dedup.priority_list import build_priority_list


def _run(report: Path, priority: str, dry_run: bool):
    decisions = []
    pipeline = DedupPipeline(
        engine=PriorityEngine(build_priority_list(report, priority)),
        executor=DeletionExecutor(dry_run=dry_run),
        decision_callback=decisions.append,
    )
    return pipeline.run(report), decisions


def _jdupes_report(report_file, groups: list[list[str]]) -> Path:
    """Report as produced by the organizer's log tee: header, groups, no final newline."""
    lines = ["[2025-03-01 10:00:00] Running: jdupes -r"]
    for group in groups:
        lines.extend(group)
        lines.append("")
    return report_file("\n".join(lines).rstrip("\n"))


def test_dry_run_matches_apply(backup_tree, report_file):
    group1 = backup_tree(["zone2023/photos/a.jpg", "zone2024/photos/a.jpg", "misc/a.jpg"])
    group2 = backup_tree(["zone2024/docs/cv.pdf", "zone2024/docs/cv_copy.pdf"])
    group3 = backup_tree(["misc/x.bin", "scratch/x.bin"])
    report = _jdupes_report(report_file, [group1, group2, group3])

    dry_stats, dry_decisions = _run(report, "zone2024,zone2023", dry_run=True)
    assert all(Path(p).exists() for p in group1 + group2 + group3)

    apply_stats, apply_decisions = _run(report, "zone2024,zone2023", dry_run=False)

    assert dry_decisions == apply_decisions
    assert dry_stats.files_to_delete == apply_stats.files_to_delete == 3
    assert dry_stats.groups_skipped == apply_stats.groups_skipped == 1
    assert dry_stats.bytes_reclaimable == apply_stats.bytes_freed

    assert Path(group1[1]).exists()
    assert not Path(group1[0]).exists()
    assert not Path(group1[2]).exists()
    assert Path(group2[0]).exists()
    assert not Path(group2[1]).exists()
    assert all(Path(p).exists() for p in group3)


def test_second_apply_is_idempotent(backup_tree, report_file):
    group = backup_tree(["zone2024/a.txt", "zone2023/a.txt", "zone2022/a.txt"])
    report = _jdupes_report(report_file, [group])

    first, _ = _run(report, "zone2024", dry_run=False)
    second, _ = _run(report, "zone2024", dry_run=False)

    assert first.files_deleted == 2
    assert second.files_deleted == 0
    assert second.files_not_found == 2
    assert second.delete_errors == 0
    assert Path(group[0]).exists()


def test_auto_detected_priorities(backup_tree, report_file):
    group1 = backup_tree(["alpha_dir/1.txt", "beta_dir/1.txt"])
    group2 = backup_tree(["alpha_dir/2.txt", "gamma_dir/2.txt"])
    report = _jdupes_report(report_file, [group1, group2])

    stats, decisions = _run(report, None, dry_run=False)

    assert [d.keep.path for d in decisions] == [group1[0], group2[0]]
    assert stats.files_deleted == 2
    assert Path(group1[0]).exists() and Path(group2[0]).exists()
