"""
Unit tests for ReportParser.

Tests:
- Group boundaries (blank line, timestamp line, digit line)
- Trailing group without final blank line
- Singleton groups dropped but counted
- Noise lines ignored
"""

import io

import pytest

from backup_organizer.dedup.report_parser import ReportParser, is_boundary, iter_path_lines


def _parse(text: str) -> tuple[ReportParser, list]:
    parser = ReportParser()
    groups = list(parser.parse(io.StringIO(text)))
    return parser, groups


class TestBoundaries:
    """Test group boundary detection."""

    @pytest.mark.parametrize(
        "line",
        ["", "   ", "[2025-03-01 10:00:00] Running: jdupes -r a b", "12 duplicate files (in 5 sets)"],
    )
    def test_boundary_lines(self, line):
        assert is_boundary(line) is True

    @pytest.mark.parametrize("line", ["/data/a.txt", "Scanning: 100 files", "[1999] old"])
    def test_non_boundary_lines(self, line):
        assert is_boundary(line) is False

    def test_blank_line_separates_groups(self):
        _, groups = _parse("/a/1\n/b/1\n\n/a/2\n/b/2\n\n")

        assert [g.paths for g in groups] == [["/a/1", "/b/1"], ["/a/2", "/b/2"]]

    def test_timestamp_line_closes_group(self):
        _, groups = _parse("/a/1\n/b/1\n[2025-03-01 10:00:00] done\n/a/2\n/b/2\n")

        assert len(groups) == 2
        assert groups[0].paths == ["/a/1", "/b/1"]

    def test_digit_line_closes_group(self):
        _, groups = _parse("/a/1\n/b/1\n3 duplicate files\n")

        assert len(groups) == 1

    def test_consecutive_boundaries_produce_no_empty_groups(self):
        parser, groups = _parse("\n\n/a/1\n/b/1\n\n\n\n")

        assert len(groups) == 1
        assert parser.groups_scanned == 1


class TestGroupContent:
    """Test group assembly."""

    def test_trailing_group_without_blank_line(self):
        _, groups = _parse("/a/1\n/b/1\n\n/a/2\n/b/2")

        assert len(groups) == 2
        assert groups[1].paths == ["/a/2", "/b/2"]

    def test_report_order_preserved(self):
        _, groups = _parse("/z/f\n/a/f\n/m/f\n")

        assert groups[0].paths == ["/z/f", "/a/f", "/m/f"]

    def test_group_ids_sequential(self):
        _, groups = _parse("/a/1\n/b/1\n\n/a/2\n/b/2\n\n/a/3\n/b/3\n")

        assert [g.group_id for g in groups] == [1, 2, 3]

    def test_singleton_dropped_but_scanned(self):
        parser, groups = _parse("/a/only\n\n/a/1\n/b/1\n")

        assert len(groups) == 1
        assert parser.groups_scanned == 2
        assert parser.groups_emitted == 1

    def test_noise_lines_ignored(self):
        parser, groups = _parse("Scanning...\n/a/1\nrelative/path.txt\n/b/1\n")

        assert groups[0].paths == ["/a/1", "/b/1"]
        assert parser.ignored_lines == 2

    def test_crlf_line_endings(self):
        _, groups = _parse("/a/1\r\n/b/1\r\n\r\n")

        assert groups[0].paths == ["/a/1", "/b/1"]

    def test_spaces_in_paths_kept(self):
        _, groups = _parse("/a/my file.txt\n/b/my file.txt \n")

        assert groups[0].paths == ["/a/my file.txt", "/b/my file.txt "]

    def test_empty_report(self):
        parser, groups = _parse("")

        assert groups == []
        assert parser.groups_scanned == 0

    def test_parse_is_lazy(self):
        """Groups are yielded before the stream is exhausted."""
        stream = io.StringIO("/a/1\n/b/1\n\n/a/2\n/b/2\n")
        parser = ReportParser()

        first = next(parser.parse(stream))

        assert first.paths == ["/a/1", "/b/1"]
        assert parser.lines_read == 3


def test_iter_path_lines():
    lines = list(iter_path_lines(io.StringIO("/a/1\nnoise\n\n/b/2\r\n")))

    assert lines == ["/a/1", "/b/2"]
