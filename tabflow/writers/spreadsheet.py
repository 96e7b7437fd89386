"""
Spreadsheet writer (``.xlsx``).

An ``.xlsx`` file can only be written as a whole, so rows accumulate
into an in-memory grid and are saved in one step when the writer is
closed.  This makes spreadsheet output a memory boundary for very large
row counts: it stays correct, it just is not streamed.

Cells are written as text exactly as read; no numeric coercion happens
on the way in.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from tabflow.exceptions import ProcessingError
from tabflow.tracker import ResourceTracker
from tabflow.writers.base import TabularWriter

SHEET_NAME = "Sheet1"


class SpreadsheetWriter(TabularWriter):
    """Writer for ``.xlsx`` outputs (single sheet)."""

    def __init__(self, path: str | Path, tracker: ResourceTracker) -> None:
        super().__init__(path, tracker)
        self._grid: list[list[str]] = []

    def _open_kwargs(self) -> dict[str, Any]:
        return {"mode": "wb"}

    def write_row(self, row: list[str]) -> None:
        if not self.is_open:
            raise ProcessingError(f"Writer for {self.path} is not open", path=str(self.path))
        self._grid.append(list(row))
        self.rows_written += 1

    def _finalize(self) -> None:
        frame = pd.DataFrame(self._grid, dtype=object)
        with pd.ExcelWriter(self._handle.raw, engine="openpyxl") as book:
            frame.to_excel(book, sheet_name=SHEET_NAME, header=False, index=False)
        self._grid = []

    def abort(self) -> None:
        super().abort()
        self._grid = []
