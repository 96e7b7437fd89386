"""
Spreadsheet reader (``.xlsx``).

An ``.xlsx`` file is a zip container, so it cannot be parsed
incrementally the way text can.  The first sheet is loaded into a pandas
grid in one go (openpyxl engine, every cell read as a string) and then
handed out in fixed-size slices of ``spreadsheet_slice_rows`` rows,
through the same row iterator contract as the text reader.  The grid is
dropped as soon as the last slice is consumed.

Only the first sheet and only cell values are read: no formulas, no
other sheets.

The grid is rectangular, so every row is as wide as the widest one.
Trailing empty cells are trimmed: fully on the header row, and on data
rows down to the header width.  A sheet cannot tell an empty cell from a
missing one, so data rows shorter than the header come back padded to it.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterator

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from tabflow.errors import classify_error
from tabflow.exceptions import FileFormatError
from tabflow.formats import FileDescriptor
from tabflow.readers.base import Row, TabularReader, is_blank_row

logger = logging.getLogger(__name__)


def _cell_text(value: object) -> str:
    """Render one grid cell as text; missing cells become ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value)


def _trim_padding(row: Row, keep: int = 0) -> Row:
    """Drop trailing empty cells beyond the first *keep* cells."""
    end = len(row)
    while end > keep and row[end - 1] == "":
        end -= 1
    return row[:end]


class SpreadsheetReader(TabularReader):
    """Reader for ``.xlsx`` workbooks (first sheet only)."""

    def load_grid(self, descriptor: FileDescriptor) -> pd.DataFrame:
        """Load the first sheet of *descriptor* as an all-string DataFrame.

        Raises:
            FileAccessError: If the file cannot be opened.
            FileFormatError: If the workbook is corrupt, has no sheet, or
                the first sheet has no data range.
        """
        path = descriptor.path
        handle = self._open(path, "rb")
        try:
            with pd.ExcelFile(handle.raw, engine="openpyxl") as book:
                if not book.sheet_names:
                    raise FileFormatError(f"Workbook has no sheets: {path}", path=str(path))
                sheet = book.sheet_names[0]
                grid = book.parse(
                    sheet,
                    header=None,
                    dtype=str,
                    keep_default_na=False,
                )
        except (zipfile.BadZipFile, InvalidFileException, KeyError, ValueError) as exc:
            raise FileFormatError(
                f"Invalid spreadsheet {path}: {type(exc).__name__}: {exc}", path=str(path)
            ) from exc
        except OSError as exc:
            raise classify_error(exc, str(path)) from exc
        finally:
            handle.close()

        if grid.empty:
            raise FileFormatError(
                f"Sheet '{sheet}' has no data range: {path}", path=str(path)
            )
        logger.info(
            "Loaded sheet '%s' from %s (%d rows x %d cols)",
            sheet, path.name, len(grid), len(grid.columns),
        )
        return grid

    def iter_rows(
        self, descriptor: FileDescriptor, delimiter: str | None = None
    ) -> Iterator[Row]:
        grid = self.load_grid(descriptor)
        slice_rows = self.config.spreadsheet_slice_rows
        n_rows = len(grid)
        width: int | None = None
        try:
            for start in range(0, n_rows, slice_rows):
                block = grid.iloc[start:start + slice_rows]
                for values in block.itertuples(index=False, name=None):
                    row = [_cell_text(v) for v in values]
                    if is_blank_row(row):
                        continue
                    if width is None:
                        row = _trim_padding(row)
                        width = len(row)
                    else:
                        row = _trim_padding(row, width)
                    yield row
        finally:
            del grid
