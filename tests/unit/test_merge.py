"""
Unit tests for the merge operation (tabflow.operations.merge).

Every scenario runs under both strategies; the outputs must match.
"""

from __future__ import annotations

import pytest

from tabflow import process_files

JAN = "id,name,amount\n1,apple,10\n2,banana,20\n3,cherry,30\n"
FEB = "id,name,amount\n4,date,40\n5,elderberry,50\n6,fig,60\n"

STRATEGIES = ["buffered", "streaming"]


@pytest.mark.parametrize("strategy", STRATEGIES)
class TestMerge:
    """Tests for merge under each strategy."""

    def test_two_csvs(self, tmp_path, write_text, strategy):
        a = write_text("jan.csv", JAN)
        b = write_text("feb.csv", FEB)
        out = tmp_path / "out" / "merged.csv"

        result = process_files(
            {"filePaths": [str(a), str(b)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )

        assert result["success"] is True
        assert result["totalRows"] == 6
        assert result["message"] == "2 file(s) merged successfully"
        assert result["strategy"] == strategy
        lines = out.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 7
        assert lines[0] == "id,name,amount"
        assert lines[4] == "4,date,40"

    def test_later_header_dropped_even_if_different(self, tmp_path, write_text, strategy):
        """Rows are appended by position; no column reconciliation."""
        a = write_text("a.csv", "x,y\n1,2\n")
        b = write_text("b.csv", "p,q,r\n3,4,5\n")
        out = tmp_path / "m.csv"
        process_files(
            {"filePaths": [str(a), str(b)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )
        assert out.read_text(encoding="utf-8") == "x,y\n1,2\n3,4,5\n"

    def test_output_delimiter_from_first_input(self, tmp_path, write_text, strategy):
        a = write_text("a.csv", "x;y\n1;2\n")
        b = write_text("b.csv", "x,y\n3,4\n")
        out = tmp_path / "m.csv"
        process_files(
            {"filePaths": [str(a), str(b)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )
        assert out.read_text(encoding="utf-8") == "x;y\n1;2\n3;4\n"

    def test_explicit_delimiter_parses_inputs(self, tmp_path, write_text, strategy):
        """A given delimiter wins over detection, for reading and writing."""
        a = write_text("a.csv", "a;b,c\n1;2,3\n")
        out = tmp_path / "m.csv"
        process_files(
            {"filePaths": [str(a)], "operation": "merge", "outputPath": str(out), "delimiter": ";"},
            strategy=strategy,
        )
        assert out.read_text(encoding="utf-8") == "a;b,c\n1;2,3\n"

    def test_tab_escape_delimiter(self, tmp_path, write_text, strategy):
        a = write_text("a.txt", "x\ty\n1\t2\n")
        out = tmp_path / "m.txt"
        process_files(
            {"filePaths": [str(a)], "operation": "merge", "outputPath": str(out), "delimiter": "\\t"},
            strategy=strategy,
        )
        assert out.read_text(encoding="utf-8") == "x\ty\n1\t2\n"

    def test_multi_char_delimiter_only_for_output(self, tmp_path, write_text, strategy):
        a = write_text("a.csv", "x,y\n1,2\n")
        out = tmp_path / "m.txt"
        process_files(
            {"filePaths": [str(a)], "operation": "merge", "outputPath": str(out), "delimiter": "||"},
            strategy=strategy,
        )
        assert out.read_text(encoding="utf-8") == "x||y\n1||2\n"

    def test_empty_first_input(self, tmp_path, write_text, strategy):
        """Later inputs always lose their first row, even after an empty first input."""
        a = write_text("empty.csv", "")
        b = write_text("b.csv", "x,y\n1,2\n3,4\n")
        out = tmp_path / "m.csv"
        result = process_files(
            {"filePaths": [str(a), str(b)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )
        assert result["totalRows"] == 2
        assert out.read_text(encoding="utf-8") == "1,2\n3,4\n"

    def test_all_inputs_empty_still_writes_output(self, tmp_path, write_text, strategy):
        a = write_text("empty.csv", "")
        out = tmp_path / "m.csv"
        result = process_files(
            {"filePaths": [str(a)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )
        assert result["success"] is True
        assert result["totalRows"] == 0
        assert out.exists()
        assert out.read_text(encoding="utf-8") == ""

    def test_mixed_text_and_spreadsheet_to_xlsx(self, tmp_path, write_text, write_xlsx, xlsx_rows, strategy):
        a = write_text("a.csv", "id,name\n1,apple\n")
        b = write_xlsx("b.xlsx", [["id", "name"], ["2", "banana"]])
        out = tmp_path / "m.xlsx"
        result = process_files(
            {"filePaths": [str(a), str(b)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )
        assert result["totalRows"] == 2
        assert xlsx_rows(out) == [["id", "name"], ["1", "apple"], ["2", "banana"]]

    def test_quoted_cells_survive(self, tmp_path, write_text, strategy):
        a = write_text("a.csv", 'id,text\n1,"a, b"\n2,"say ""x"""\n')
        out = tmp_path / "m.csv"
        process_files(
            {"filePaths": [str(a)], "operation": "merge", "outputPath": str(out)},
            strategy=strategy,
        )
        assert out.read_text(encoding="utf-8") == 'id,text\n1,"a, b"\n2,"say ""x"""\n'


class TestMergeValidation:
    def test_unsupported_output_extension(self, tmp_path, write_text):
        a = write_text("a.csv", JAN)
        result = process_files(
            {"filePaths": [str(a)], "operation": "merge", "outputPath": str(tmp_path / "m.json")}
        )
        assert result["success"] is False
        assert result["error"] == "ValidationError"
        assert not (tmp_path / "m.json").exists()
