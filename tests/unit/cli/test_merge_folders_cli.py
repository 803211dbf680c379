"""
Unit tests for the merge-folders command line.
"""

import pytest

from backup_organizer.cli.merge_folders import main


@pytest.fixture
def folders(tmp_path):
    source = tmp_path / "old_backup"
    dest = tmp_path / "new_backup"
    (source / "sub").mkdir(parents=True)
    dest.mkdir()
    (source / "sub" / "unique.txt").write_text("unique")
    (source / "shared.txt").write_text("old")
    (dest / "shared.txt").write_text("new")
    return source, dest


def test_dry_run(folders):
    source, dest = folders

    assert main([str(source), str(dest)]) == 0
    assert not (dest / "sub").exists()


def test_apply_with_report(tmp_path, folders):
    source, dest = folders
    report_dir = tmp_path / "reports"

    code = main([str(source), str(dest), "--apply", f"--report-dir={report_dir}"])

    assert code == 0
    assert (dest / "sub" / "unique.txt").read_text() == "unique"
    assert (dest / "shared.txt").read_text() == "new"
    reports = list(report_dir.glob("merge_files_*.txt"))
    assert len(reports) == 1
    assert reports[0].read_text(encoding="utf-8").splitlines() == ["sub/unique.txt"]


def test_missing_destination(tmp_path, folders):
    source, _ = folders

    assert main([str(source), str(tmp_path / "nope"), "--apply"]) == 1


def test_bad_profile(tmp_path, folders):
    source, dest = folders

    assert main([str(source), str(dest), f"--profile={tmp_path / 'missing.yaml'}"]) == 1


def test_invalid_settings_exit_code(monkeypatch, folders):
    source, dest = folders
    monkeypatch.setenv("BACKUP_ORGANIZER_PROGRESS_INTERVAL", "abc")

    assert main([str(source), str(dest), "--apply"]) == 1
    assert not (dest / "sub").exists()
