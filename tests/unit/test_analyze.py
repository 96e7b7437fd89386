"""
Unit tests for file analysis (tabflow.analyze).

The deadline is exercised with a fake clock rather than real sleeps.
"""

from __future__ import annotations

import itertools

from tabflow import analyze_file
from tabflow.analyze import analyze
from tabflow.config import EngineConfig


def _ticking_clock():
    """A clock that advances one second per call."""
    ticks = itertools.count()
    return lambda: float(next(ticks))


class TestAnalyzeText:
    """Tests for text inputs."""

    def test_counts_and_samples(self, write_text, numbered):
        path = write_text("data.csv", numbered(12))
        result = analyze(path)
        assert result.error is None
        assert result.partial is False
        assert result.total_rows == 12
        assert result.columns == 2
        assert result.headers == ["id", "value"]
        assert result.sample_data == [[str(i), f"v{i}"] for i in range(1, 6)]
        assert result.type == "CSV"
        assert result.streaming is True
        assert result.delimiter == ","
        assert result.size == path.stat().st_size
        assert result.last_modified is not None

    def test_txt_type_and_delimiter(self, write_text):
        result = analyze(write_text("t.txt", "a\tb\tc\n1\t2\t3\n"))
        assert result.type == "TXT"
        assert result.delimiter == "\t"
        assert result.columns == 3

    def test_sample_size_from_config(self, write_text, numbered):
        result = analyze(write_text("d.csv", numbered(10)), EngineConfig(analysis_sample_rows=2))
        assert len(result.sample_data) == 2
        assert result.total_rows == 10

    def test_empty_file(self, write_text):
        result = analyze(write_text("e.csv", ""))
        assert result.error is None
        assert result.total_rows == 0
        assert result.headers == []


class TestAnalyzeSpreadsheet:
    def test_xlsx(self, write_xlsx):
        path = write_xlsx("b.xlsx", [["k", "v"], ["a", "1"], ["b", "2"]])
        result = analyze(path)
        assert result.type == "XLSX"
        assert result.streaming is False
        assert result.delimiter is None
        assert result.total_rows == 2
        assert result.headers == ["k", "v"]


class TestAnalyzeFailures:
    """Analysis never raises."""

    def test_timeout_returns_partial(self, write_text, numbered):
        path = write_text("slow.csv", numbered(50))
        config = EngineConfig(analysis_timeout_seconds=2.5)
        result = analyze(path, config, clock=_ticking_clock())
        assert result.partial is True
        assert result.error == "Timeout"
        assert result.headers == ["id", "value"]
        assert result.total_rows == 1

    def test_missing_file(self, tmp_path):
        result = analyze(tmp_path / "nope.csv")
        assert result.error == "FileAccess"
        assert result.message == "File not found or not accessible"
        assert result.partial is False

    def test_unsupported_extension(self, tmp_path):
        f = tmp_path / "notes.md"
        f.write_text("# hi", encoding="utf-8")
        assert analyze(f).error == "ValidationError"

    def test_corrupt_workbook(self, tmp_path):
        f = tmp_path / "bad.xlsx"
        f.write_text("garbage", encoding="utf-8")
        assert analyze(f).error == "FormatError"


class TestAnalyzeFile:
    """Tests for the dict-returning public wrapper."""

    def test_keys(self, write_text):
        data = analyze_file(write_text("a.csv", "x,y\n1,2\n"))
        assert {
            "size", "lastModified", "totalRows", "columns", "headers",
            "sampleData", "type", "streaming", "partial", "delimiter",
        } <= set(data)
        assert "error" not in data

    def test_error_keys(self, tmp_path):
        data = analyze_file(tmp_path / "missing.csv")
        assert data["error"] == "FileAccess"
        assert "message" in data
