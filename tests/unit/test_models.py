"""
Unit tests for request/result models (tabflow.models).

Tests wire-shape parsing (camelCase aliases, ``splitOptions``),
delimiter normalization and the validation rules.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tabflow.models import (
    ConvertedFile,
    OperationRequest,
    OperationResult,
    SplitDetail,
    SplitPart,
    SplitSpec,
    normalize_delimiter,
)


def _request(**overrides) -> dict:
    data = {"filePaths": ["a.csv"], "operation": "merge", "outputPath": "out.csv"}
    data.update(overrides)
    return data


class TestSplitSpec:
    """Tests for SplitSpec parsing."""

    def test_wire_lines(self):
        spec = SplitSpec.model_validate({"type": "lines", "value": "4"})
        assert spec.mode == "byLineCount"
        assert spec.value == 4

    def test_wire_files(self):
        spec = SplitSpec.model_validate({"type": "files", "value": 3})
        assert spec.mode == "byFileCount"

    def test_native_form(self):
        spec = SplitSpec(mode="byFileCount", value=2)
        assert spec.value == 2

    @pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", "", 0, -3])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationError):
            SplitSpec.model_validate({"type": "lines", "value": value})

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            SplitSpec.model_validate({"type": "bytes", "value": 10})

    def test_whitespace_around_number(self):
        assert SplitSpec.model_validate({"type": "lines", "value": " 7 "}).value == 7


class TestOperationRequest:
    """Tests for OperationRequest validation."""

    def test_camel_case_aliases(self):
        req = OperationRequest.model_validate(_request())
        assert req.file_paths == ["a.csv"]
        assert req.output_path == "out.csv"
        assert req.delimiter is None

    def test_snake_case_names(self):
        req = OperationRequest(operation="convert", file_paths=["a.csv"], output_path="o.xlsx")
        assert req.operation == "convert"

    def test_invalid_operation(self):
        with pytest.raises(ValidationError, match="Invalid operation"):
            OperationRequest.model_validate(_request(operation="invalid_operation"))

    def test_empty_file_list(self):
        with pytest.raises(ValidationError):
            OperationRequest.model_validate(_request(filePaths=[]))

    def test_blank_output_path(self):
        with pytest.raises(ValidationError):
            OperationRequest.model_validate(_request(outputPath="   "))

    def test_split_requires_options(self):
        with pytest.raises(ValidationError, match="splitOptions"):
            OperationRequest.model_validate(_request(operation="split", outputPath="parts"))

    def test_split_options_parsed(self):
        req = OperationRequest.model_validate(
            _request(operation="split", splitOptions={"type": "lines", "value": "100"})
        )
        assert req.split_spec == SplitSpec(mode="byLineCount", value=100)

    @pytest.mark.parametrize("raw, expected", [("\\t", "\t"), ("tab", "\t"), (";", ";"), ("||", "||")])
    def test_delimiter_normalized(self, raw, expected):
        assert OperationRequest.model_validate(_request(delimiter=raw)).delimiter == expected

    def test_empty_delimiter_means_auto(self):
        assert OperationRequest.model_validate(_request(delimiter="")).delimiter is None

    @pytest.mark.parametrize("raw", ["abcd", '"', "\n", ";\r"])
    def test_bad_delimiters(self, raw):
        with pytest.raises(ValidationError):
            OperationRequest.model_validate(_request(delimiter=raw))

    def test_request_is_frozen(self):
        req = OperationRequest.model_validate(_request())
        with pytest.raises(ValidationError):
            req.operation = "split"


class TestNormalizeDelimiter:
    def test_passthrough(self):
        assert normalize_delimiter(",") == ","

    def test_escape(self):
        assert normalize_delimiter("\\t") == "\t"


class TestOperationResult:
    """Tests for the wire shape of results."""

    def test_merge_result(self):
        data = OperationResult(message="2 file(s) merged successfully", total_rows=6).to_dict()
        assert data == {
            "success": True,
            "message": "2 file(s) merged successfully",
            "totalRows": 6,
        }

    def test_convert_result(self):
        result = OperationResult(
            message="1 file(s) converted successfully",
            total_rows=3,
            results=[ConvertedFile(input="a.csv", output="a_converted.xlsx", rows=3)],
            strategy="buffered",
        )
        data = result.to_dict()
        assert data["results"] == [{"input": "a.csv", "output": "a_converted.xlsx", "rows": 3}]
        assert data["strategy"] == "buffered"

    def test_split_detail_alias(self):
        detail = SplitDetail(
            file="a.csv", chunks=1, rows_per_chunk=4, parts=[SplitPart(path="p/a_part_001.csv", rows=4)]
        )
        data = OperationResult(message="ok", details=[detail]).to_dict()
        assert data["details"][0]["rowsPerChunk"] == 4
        assert data["details"][0]["parts"][0]["rows"] == 4
