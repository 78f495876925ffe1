"""Unit tests for git show / diffstat parsing."""

import pytest

from conftest import OID
from utils.commit_parser import parse_commit_info, parse_commit_overview, parse_overview_row
from utils.diff_models import CommitParseError


class TestParseCommitHeader:
    """Test the positional fuller-format header."""

    def test_header_fields(self, show_lines):
        info = parse_commit_info(show_lines)
        assert info.oid == OID
        assert info.abbrev() == "3f2a9c1"
        assert info.author_name == "Jane Doe"
        assert info.author_email == "jane@example.com"
        assert info.author_date == "Tue Oct 13 10:00:00 2026 +0200"
        assert info.committer_name == "John Roe"
        assert info.committer_email == "john@example.com"
        assert info.committer_date == "Wed Oct 14 11:30:00 2026 +0200"
        assert info.merge_parents == []
        assert info.all_diagnostics() == []

    def test_commit_line_with_decorations(self, show_lines):
        show_lines[0] = f"commit {OID} (HEAD -> main, origin/main)"
        assert parse_commit_info(show_lines).oid == OID

    def test_merge_commit(self, show_lines):
        show_lines.insert(1, "Merge: 1a2b3c4 5d6e7f8")
        info = parse_commit_info(show_lines)
        assert info.merge_parents == ["1a2b3c4", "5d6e7f8"]
        assert info.author_name == "Jane Doe"
        assert info.committer_date == "Wed Oct 14 11:30:00 2026 +0200"
        assert info.description[0] == "Fix parser crash on empty input"
        assert info.diagnostics == []

    def test_malformed_author_is_reported(self, show_lines):
        show_lines[1] = "Author: nobody"
        info = parse_commit_info(show_lines)
        assert info.author_name == ""
        assert info.author_email == ""
        assert info.author_date == "Tue Oct 13 10:00:00 2026 +0200"
        assert len(info.diagnostics) == 1
        diag = info.diagnostics[0]
        assert diag.code == "MALFORMED_FIELD"
        assert diag.field == "author"
        assert diag.line_index == 1
        assert diag.line == "Author: nobody"

    def test_reordered_preamble_reports_each_field(self, show_lines):
        show_lines[2], show_lines[3] = show_lines[3], show_lines[2]
        info = parse_commit_info(show_lines)
        assert info.author_date == ""
        assert info.committer_name == ""
        assert [d.field for d in info.diagnostics] == ["author_date", "committer"]

    @pytest.mark.parametrize("count", [0, 1, 3, 5])
    def test_short_header_is_fatal(self, show_lines, count):
        with pytest.raises(CommitParseError) as exc:
            parse_commit_info(show_lines[:count])
        assert exc.value.code == "STRUCTURAL_SHORTAGE"
        assert exc.value.expected == 6
        assert exc.value.available == count
        assert "expected at least 6 lines" in str(exc.value)

    def test_header_only(self, show_lines):
        info = parse_commit_info(show_lines[:6])
        assert info.description == []
        assert info.diffs == []


class TestParseDescription:
    """Test commit message extraction."""

    def test_indented_paragraph_break_is_kept(self, show_lines):
        info = parse_commit_info(show_lines)
        assert info.description == ["Fix parser crash on empty input", "", "Details about the fix."]

    def test_empty_line_ends_description(self, show_lines):
        lines = show_lines[:6] + ["Fix bug", "", "Details here", ""]
        info = parse_commit_info(lines)
        assert info.description == ["Fix bug"]

    def test_description_to_end_of_input(self, show_lines):
        info = parse_commit_info(show_lines[:7])
        assert info.description == ["Fix parser crash on empty input"]
        assert info.diffs == []


class TestParseCommitDiffs:
    """Test segmentation of the diff region."""

    def test_diffs_in_order(self, show_lines):
        info = parse_commit_info(show_lines)
        assert [(d.kind, d.file) for d in info.diffs] == [
            ("modified", "src/foo.lua"),
            ("new file", "docs/new.md"),
        ]
        assert [len(d.hunks) for d in info.diffs] == [2, 1]
        assert info.diffs[0].lines[0] == "diff --git a/src/foo.lua b/src/foo.lua"
        assert info.diffs[0].lines[-1] == "+  new()"
        assert info.diffs[1].lines[-1] == "+body"

    def test_no_diffs(self, show_lines):
        info = parse_commit_info(show_lines[:10])
        assert info.diffs == []
        assert info.diagnostics == []

    def test_orphan_lines_before_first_diff(self, show_lines):
        show_lines.insert(10, "stray line")
        info = parse_commit_info(show_lines)
        assert len(info.diffs) == 2
        assert len(info.diagnostics) == 1
        assert info.diagnostics[0].code == "ORPHAN_LINES"
        assert info.diagnostics[0].line_index == 10

    def test_reparse_is_equal(self, show_lines):
        assert parse_commit_info(show_lines) == parse_commit_info(list(show_lines))


class TestParseOverview:
    """Test diffstat parsing."""

    def test_rows_and_summary(self, stat_lines):
        overview = parse_commit_overview(stat_lines)
        assert overview.summary == "2 files changed, 5 insertions(+), 2 deletions(-)"
        assert [f.path for f in overview.files] == ["docs/new.md", "src/foo.lua"]
        assert [f.changes for f in overview.files] == [2, 5]
        assert overview.files[1].insertions == "+++"
        assert overview.files[1].deletions == "--"
        assert overview.diagnostics == []

    def test_row_example(self):
        row = parse_overview_row(" src/foo.lua | 12 +++++++-----")
        assert row.path == "src/foo.lua"
        assert row.changes == 12
        assert row.insertions == "+++++++"
        assert row.deletions == "-----"

    def test_padded_path(self):
        row = parse_overview_row(" a.py          | 3 ---")
        assert row.path == "a.py"
        assert row.insertions == ""
        assert row.deletions == "---"

    def test_zero_changes(self):
        row = parse_overview_row(" empty.txt | 0")
        assert row.changes == 0
        assert row.insertions == ""
        assert row.deletions == ""

    def test_binary_row_is_parsed(self, stat_lines):
        stat_lines.insert(2, " img.png     | Bin 0 -> 1234 bytes")
        overview = parse_commit_overview(stat_lines)
        assert [f.path for f in overview.files] == ["docs/new.md", "img.png", "src/foo.lua"]
        binary = overview.files[1]
        assert binary.binary == "Bin 0 -> 1234 bytes"
        assert binary.changes == 0
        assert binary.insertions == ""
        assert binary.deletions == ""
        assert overview.diagnostics == []

    def test_bare_bin_row(self):
        row = parse_overview_row(" same.bin | Bin")
        assert row.path == "same.bin"
        assert row.binary == "Bin"

    def test_unrecognised_row_is_reported(self, stat_lines):
        stat_lines.insert(2, " no separator here")
        overview = parse_commit_overview(stat_lines)
        assert len(overview.files) == 2
        assert len(overview.diagnostics) == 1
        assert overview.diagnostics[0].field == "diffstat_row"
        assert overview.diagnostics[0].line_index == 2

    def test_n_rows(self):
        rows = [f" f{i}.txt | {i} " + "+" * i for i in range(1, 8)]
        overview = parse_commit_overview(["abc1234 subject"] + rows + [" 7 files changed"])
        assert len(overview.files) == 7
        assert [f.path for f in overview.files] == [f"f{i}.txt" for i in range(1, 8)]

    def test_summary_only(self):
        overview = parse_commit_overview(["  1 file changed  "])
        assert overview.summary == "1 file changed"
        assert overview.files == []

    def test_empty_is_fatal(self):
        with pytest.raises(CommitParseError):
            parse_commit_overview([])
