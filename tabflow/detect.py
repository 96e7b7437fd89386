"""
Delimiter inference for delimited-text files.

Detection algorithm:
1. Keep only the first few lines of the sample (5 by default).
2. Parse them with each candidate delimiter, in the fixed order
   ``,`` ``;`` tab ``|`` ``:``.
3. Score a candidate by the number of columns in the first parsed row.
4. Return the highest scorer.  Ties go to the earlier candidate, so a
   sample without any candidate character yields ``,``.

Inference never raises: unparseable samples score zero for every
candidate and fall back to comma.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path

from tabflow.errors import classify_error, user_message
from tabflow.exceptions import TabflowError
from tabflow.tracker import ResourceTracker

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|", ":")
DEFAULT_DELIMITER = ","
DEFAULT_SAMPLE_LINES = 5

TEXT_ENCODING = "utf-8-sig"


def _column_count(sample: str, delimiter: str) -> int:
    """Number of cells in the first row of *sample* parsed with *delimiter*."""
    try:
        first = next(csv.reader(io.StringIO(sample), delimiter=delimiter), [])
    except csv.Error:
        return 0
    return len(first)


def detect_delimiter(sample: str, sample_lines: int = DEFAULT_SAMPLE_LINES) -> str:
    """Infer the delimiter of a delimited-text sample.

    Args:
        sample: Raw text, typically the head of a file.
        sample_lines: How many leading lines to consider.

    Returns:
        One of ``CANDIDATE_DELIMITERS``; ``","`` when nothing better is found.
    """
    head = "\n".join(sample.splitlines()[:sample_lines])

    best = DEFAULT_DELIMITER
    best_count = 0
    for delimiter in CANDIDATE_DELIMITERS:
        count = _column_count(head, delimiter)
        if count > best_count:
            best, best_count = delimiter, count
    logger.debug("Detected delimiter %r (%d columns)", best, best_count)
    return best


def read_sample(
    path: str | Path,
    tracker: ResourceTracker,
    sample_lines: int = DEFAULT_SAMPLE_LINES,
) -> str:
    """Read the first *sample_lines* lines of a text file through *tracker*."""
    with tracker.open(path, "r", encoding=TEXT_ENCODING, newline="") as fh:
        return "".join(islice(fh, sample_lines))


@dataclass
class DelimiterPreview:
    """Delimiter plus a short preview of a text file.

    Attributes:
        path: File that was previewed.
        delimiter: Inferred delimiter (``None`` if the file could not be read).
        fields: Cells of the first non-empty row.
        preview: Up to five following data rows.
        total_lines: Number of physical lines in the file.
        error: Taxonomy kind of the failure, if any.
        message: End-user message for ``error``.
    """

    path: str
    delimiter: str | None = None
    fields: list[str] = field(default_factory=list)
    preview: list[list[str]] = field(default_factory=list)
    total_lines: int = 0
    error: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "delimiter": self.delimiter,
            "fields": self.fields,
            "preview": self.preview,
            "totalLines": self.total_lines,
        }
        if self.error is not None:
            data["error"] = self.error
            data["message"] = self.message
        return data


def _fill_preview(
    result: DelimiterPreview,
    tracker: ResourceTracker,
    sample_lines: int,
    preview_rows: int,
) -> None:
    delimiter = detect_delimiter(read_sample(result.path, tracker, sample_lines), sample_lines)
    result.delimiter = delimiter

    with tracker.open(result.path, "r", encoding=TEXT_ENCODING, newline="") as fh:
        for row in csv.reader(fh, delimiter=delimiter):
            if not any(cell.strip() for cell in row):
                continue
            if not result.fields:
                result.fields = [cell.strip() for cell in row]
            elif len(result.preview) < preview_rows:
                result.preview.append(row)
            else:
                break

    with tracker.open(result.path, "rb") as fh:
        result.total_lines = sum(1 for _ in fh)


def preview_file(
    path: str | Path,
    sample_lines: int = DEFAULT_SAMPLE_LINES,
    preview_rows: int = 5,
) -> DelimiterPreview:
    """Infer the delimiter of *path* and return a small preview.

    Reads the file once for the sample and once, line by line, for the
    preview and the line count; memory use does not grow with file size.
    Failures are classified and reported on the result, never raised.
    """
    result = DelimiterPreview(path=str(path))
    try:
        with ResourceTracker("preview") as tracker:
            _fill_preview(result, tracker, sample_lines, preview_rows)
    except Exception as exc:
        error: TabflowError = classify_error(exc, str(path))
        logger.warning("Preview of %s failed: %s: %s", path, error.kind, error)
        result.error = error.kind
        result.message = user_message(error.kind)
    else:
        logger.info(
            "Preview %s: delimiter=%r, %d fields, %d lines",
            path, result.delimiter, len(result.fields), result.total_lines,
        )
    return result
