"""
Delimited-text writer.

Each row is serialized and written as soon as it is accepted; nothing is
reordered or held back beyond the OS stream buffer.  Quoting is minimal:
a cell is wrapped in double quotes only when it contains the delimiter,
a double quote, or a line break, and embedded quotes are doubled.  The
delimiter may be up to three characters long, so this does not go
through ``csv.writer``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from tabflow.errors import classify_error
from tabflow.exceptions import ProcessingError
from tabflow.tracker import ResourceTracker
from tabflow.writers.base import TabularWriter

LINE_TERMINATOR = "\n"


def format_cell(cell: str, delimiter: str) -> str:
    if delimiter in cell or '"' in cell or "\n" in cell or "\r" in cell:
        return '"' + cell.replace('"', '""') + '"'
    return cell


def format_row(row: list[str], delimiter: str) -> str:
    """Serialize *row* to one line of delimited text (no terminator)."""
    return delimiter.join(format_cell(cell, delimiter) for cell in row)


class TextWriter(TabularWriter):
    """Writer for ``.csv`` / ``.txt`` outputs."""

    def __init__(
        self,
        path: str | Path,
        tracker: ResourceTracker,
        delimiter: str = ",",
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(path, tracker)
        self.delimiter = delimiter
        self.encoding = encoding

    def _open_kwargs(self) -> dict[str, Any]:
        return {"mode": "w", "encoding": self.encoding, "newline": ""}

    def write_row(self, row: list[str]) -> None:
        if not self.is_open:
            raise ProcessingError(f"Writer for {self.path} is not open", path=str(self.path))
        try:
            self._handle.write(format_row(row, self.delimiter) + LINE_TERMINATOR)
        except OSError as exc:
            raise classify_error(exc, str(self.path)) from exc
        self.rows_written += 1
