"""
Unit tests for the remove-duplicates command line.
"""

import csv
import json
from pathlib import Path

import pytest

from backup_organizer.cli.remove_duplicates import build_parser, main
from tests.conftest import make_report


@pytest.fixture
def dup_report(backup_tree, report_file):
    keep_a, old_a = backup_tree(["keepzone/a.txt", "oldzone/a.txt"])
    keep_b, old_b, other_b = backup_tree(["keepzone/b.txt", "oldzone/b.txt", "otherzone/b.txt"])
    report = report_file(make_report([old_a, keep_a], [old_b, other_b, keep_b]))
    return report, [keep_a, keep_b], [old_a, old_b, other_b]


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["dup.log"])

        assert args.report == Path("dup.log")
        assert args.apply is False
        assert args.priority is None
        assert args.trash is False

    def test_progress_every_must_be_positive(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["dup.log", "--progress-every=0"])

        assert exc_info.value.code == 2

    def test_report_required(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args([])

        assert exc_info.value.code == 2


class TestMain:
    def test_dry_run_deletes_nothing(self, dup_report, capsys):
        report, keepers, duplicates = dup_report

        code = main([str(report), "--priority=keepzone,oldzone"])

        assert code == 0
        assert all(Path(p).exists() for p in keepers + duplicates)
        assert "DRY-RUN" in capsys.readouterr().out

    def test_apply_deletes_lower_priority(self, dup_report):
        report, keepers, duplicates = dup_report

        code = main([str(report), "--priority=keepzone,oldzone", "--apply"])

        assert code == 0
        assert all(Path(p).exists() for p in keepers)
        assert not any(Path(p).exists() for p in duplicates)

    def test_missing_report_exit_code(self, tmp_path):
        assert main([str(tmp_path / "missing.log")]) == 1

    def test_invalid_priority_exit_code(self, dup_report):
        report, keepers, duplicates = dup_report

        assert main([str(report), "--priority=,,", "--apply"]) == 1
        assert all(Path(p).exists() for p in duplicates)

    def test_auto_detect_failure_exit_code(self, report_file):
        report = report_file("nothing useful\n")

        assert main([str(report)]) == 1

    def test_auto_detect_hint(self, dup_report, capsys):
        report, _, _ = dup_report

        assert main([str(report)]) == 0
        assert "--priority=" in capsys.readouterr().out

    def test_csv_and_json_exports(self, tmp_path, dup_report):
        report, _, _ = dup_report
        csv_path = tmp_path / "out" / "decisions.csv"
        json_path = tmp_path / "out" / "summary.json"

        code = main([
            str(report),
            "--priority=keepzone,oldzone",
            f"--csv={csv_path}",
            f"--json-summary={json_path}",
        ])

        assert code == 0
        with open(csv_path, newline="", encoding="utf-8") as f:
            rows = [row for row in csv.reader(f) if row and not row[0].startswith("#")]
        assert len(rows) == 1 + 5
        summary = json.loads(json_path.read_text(encoding="utf-8"))
        assert summary["files_to_delete"] == 3
        assert summary["files_deleted"] == 0


def test_invalid_settings_exit_code(monkeypatch, dup_report):
    report, _, duplicates = dup_report
    monkeypatch.setenv("BACKUP_ORGANIZER_PROGRESS_INTERVAL", "abc")

    assert main([str(report), "--priority=keepzone", "--apply"]) == 1
    assert all(Path(p).exists() for p in duplicates)
