"""
Request and result models for tabflow operations.

The host shell speaks camelCase JSON-ish dicts (``filePaths``,
``outputPath``, ``splitOptions``...).  These Pydantic models accept that
wire shape as well as snake_case field names, validate it, and serialize
results back with the same aliases.

Key models:
- OperationRequest: One invocation of merge / convert / split.
- SplitSpec: How to split (``byLineCount`` / ``byFileCount``).
- OperationResult: Structured success result returned to the host.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OPERATIONS = ("merge", "convert", "split")

# Names the UI may send instead of a literal control character
_DELIMITER_ALIASES = {"\\t": "\t", "tab": "\t", "TAB": "\t"}


def normalize_delimiter(value: str) -> str:
    """Translate escaped delimiter names (``\\t``, ``tab``) to the real character."""
    return _DELIMITER_ALIASES.get(value, value)


class SplitSpec(BaseModel):
    """How a split operation sizes its chunks.

    Accepts the wire form ``{"type": "lines"|"files", "value": "4"}`` as
    well as ``{"mode": "byLineCount", "value": 4}``.
    """

    model_config = ConfigDict(frozen=True)

    mode: Literal["byLineCount", "byFileCount"]
    value: int = Field(..., gt=0)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if isinstance(data, dict) and "type" in data and "mode" not in data:
            kind = data["type"]
            if kind not in ("lines", "files"):
                raise ValueError(f"Invalid split type '{kind}'; expected 'lines' or 'files'")
            data = {
                "mode": "byLineCount" if kind == "lines" else "byFileCount",
                "value": data.get("value"),
            }
        return data

    @field_validator("value", mode="before")
    @classmethod
    def _parse_value(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip()
            if not text.lstrip("-").isdigit():
                raise ValueError(f"Split value must be a whole number, got '{value}'")
            return int(text)
        return value


class OperationRequest(BaseModel):
    """A validated merge / convert / split invocation."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    operation: str
    file_paths: list[str] = Field(..., alias="filePaths", min_length=1)
    output_path: str = Field(..., alias="outputPath", min_length=1)
    delimiter: str | None = None
    split_spec: SplitSpec | None = Field(None, alias="splitOptions")

    @field_validator("operation")
    @classmethod
    def _check_operation(cls, value: str) -> str:
        if value not in OPERATIONS:
            raise ValueError(f"Invalid operation: '{value}'. Valid operations: {list(OPERATIONS)}")
        return value

    @field_validator("output_path")
    @classmethod
    def _check_output_path(cls, value: str) -> str:
        if not value.strip() or "\x00" in value:
            raise ValueError("outputPath must be a non-empty path")
        return value

    @field_validator("delimiter")
    @classmethod
    def _check_delimiter(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        value = normalize_delimiter(value)
        if not 1 <= len(value) <= 3:
            raise ValueError(f"Delimiter must be 1-3 characters, got {value!r}")
        if any(c in value for c in '"\r\n'):
            raise ValueError(f"Delimiter may not contain quotes or line breaks: {value!r}")
        return value

    @model_validator(mode="after")
    def _check_split_spec(self) -> OperationRequest:
        if self.operation == "split" and self.split_spec is None:
            raise ValueError("splitOptions are required for the split operation")
        return self


class ConvertedFile(BaseModel):
    """One entry of a convert result."""

    input: str
    output: str
    rows: int


class SplitPart(BaseModel):
    """One part file produced by a split."""

    path: str
    rows: int


class SplitDetail(BaseModel):
    """Per-input summary of a split."""

    model_config = ConfigDict(populate_by_name=True)

    file: str
    chunks: int
    rows_per_chunk: int = Field(..., alias="rowsPerChunk")
    parts: list[SplitPart] = Field(default_factory=list)


class OperationResult(BaseModel):
    """Successful outcome of an operation, in wire shape via ``to_dict()``."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    total_rows: int | None = Field(None, alias="totalRows")
    results: list[ConvertedFile] | None = None
    details: list[SplitDetail] | None = None
    strategy: Literal["buffered", "streaming"] | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
