"""
Writers sub-package for tabflow.

Contains format-specific sinks:
- base.py defines the TabularWriter ABC (context manager, tracked handle).
- text.py implements TextWriter (row-at-a-time delimited text).
- spreadsheet.py implements SpreadsheetWriter (grid saved once on close).

``writer_for()`` builds the sink for an output path's ``FileFormat``.
"""

from __future__ import annotations

from pathlib import Path

from tabflow.formats import FileFormat
from tabflow.tracker import ResourceTracker
from tabflow.writers.base import TabularWriter
from tabflow.writers.spreadsheet import SpreadsheetWriter
from tabflow.writers.text import TextWriter, format_row

__all__ = ["TabularWriter", "TextWriter", "SpreadsheetWriter", "format_row", "writer_for"]


def writer_for(
    path: str | Path,
    fmt: FileFormat,
    tracker: ResourceTracker,
    delimiter: str = ",",
    encoding: str = "utf-8",
) -> TabularWriter:
    """Build an (unopened) writer for *path* in format *fmt*."""
    if fmt is FileFormat.XLSX:
        return SpreadsheetWriter(path, tracker)
    return TextWriter(path, tracker, delimiter=delimiter, encoding=encoding)
