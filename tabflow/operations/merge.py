"""
Merge: concatenate every input into one output file.

The header is the first row of the first input.  Every later input
loses its first row, unconditionally, even when the first input was
empty (the output then has no header).  Rows are appended by position,
and no attempt is made to match or validate columns across files.
Inputs with a different column layout therefore produce a
ragged output; that is the documented behavior.

The output format follows the output path's extension and may differ
from the inputs' (text and spreadsheet inputs can be mixed freely).
"""

from __future__ import annotations

import logging
from pathlib import Path

from tabflow.formats import FileDescriptor, format_for_path
from tabflow.models import OperationRequest, OperationResult
from tabflow.operations.base import BaseOperation
from tabflow.readers import Row

logger = logging.getLogger(__name__)


class MergeOperation(BaseOperation):
    """Merge all inputs into ``request.output_path``."""

    name = "merge"

    @classmethod
    def validate(cls, request: OperationRequest, inputs: list[FileDescriptor]) -> None:
        format_for_path(request.output_path)

    # -- Helpers -------------------------------------------------------------

    def _output(self):
        ctx = self.ctx
        out_path = Path(ctx.request.output_path)
        first_text = next((d for d in ctx.inputs if d.format.is_text), None)
        delimiter = ctx.output_delimiter(first_text)
        return ctx.writer(out_path, format_for_path(out_path), delimiter)

    def _result(self, rows_written: int, header_rows: int) -> OperationResult:
        n_files = len(self.ctx.inputs)
        total = rows_written - header_rows
        logger.info("Merged %d file(s) into %s (%d data rows)", n_files, self.ctx.request.output_path, total)
        return OperationResult(
            message=f"{n_files} file(s) merged successfully",
            total_rows=total,
        )

    # -- Strategies ----------------------------------------------------------

    def run_buffered(self) -> OperationResult:
        ctx = self.ctx
        merged: list[Row] = []
        header_rows = 0
        for index, descriptor in enumerate(ctx.inputs):
            rows = ctx.read_all(descriptor)
            if index == 0:
                header_rows = min(len(rows), 1)
                merged.extend(rows)
            else:
                merged.extend(rows[1:])
            ctx.progress.advance()

        with self._output() as sink:
            sink.append(merged)
        return self._result(sink.rows_written, header_rows)

    def run_streaming(self) -> OperationResult:
        ctx = self.ctx
        header_rows = 0
        with self._output() as sink:
            for index, descriptor in enumerate(ctx.inputs):
                skip_first = index > 0
                for row in ctx.iter_rows(descriptor):
                    if skip_first:
                        skip_first = False
                        continue
                    sink.write_row(row)
                if index == 0:
                    header_rows = min(sink.rows_written, 1)
                ctx.progress.advance()
        return self._result(sink.rows_written, header_rows)
