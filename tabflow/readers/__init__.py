"""
Readers sub-package for tabflow.

Contains format-specific readers that turn a file into a sequence of
string rows.

Design: Strategy Pattern
- base.py defines the TabularReader ABC.
- text.py implements TextReader for ``.csv`` / ``.txt`` (incremental).
- spreadsheet.py implements SpreadsheetReader for ``.xlsx`` (sliced grid).

``reader_for()`` picks the reader for a ``FileDescriptor`` by its
already-resolved ``FileFormat``.
"""

from __future__ import annotations

from tabflow.config import EngineConfig
from tabflow.formats import FileDescriptor, FileFormat
from tabflow.readers.base import Row, TabularReader, is_blank_row
from tabflow.readers.spreadsheet import SpreadsheetReader
from tabflow.readers.text import TextReader
from tabflow.tracker import ResourceTracker

__all__ = ["Row", "TabularReader", "TextReader", "SpreadsheetReader", "is_blank_row", "reader_for"]

_READERS: dict[FileFormat, type[TabularReader]] = {
    FileFormat.CSV: TextReader,
    FileFormat.TXT: TextReader,
    FileFormat.XLSX: SpreadsheetReader,
}


def reader_for(
    descriptor: FileDescriptor,
    tracker: ResourceTracker,
    config: EngineConfig | None = None,
) -> TabularReader:
    """Build the reader for *descriptor*'s format."""
    return _READERS[descriptor.format](tracker, config)
