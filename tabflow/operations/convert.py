"""
Convert: re-encode each input into the format of the output path.

Each input is converted independently into
``{output_dir}/{base_name}_converted{output_ext}``, where the directory
and extension come from the request's output path.  Dispatch is by the
(input format, output format) pair, which the reader/writer split covers:

- text -> text: rows are re-serialized with the output delimiter.
- text -> spreadsheet: rows accumulate into a grid, saved once.
- spreadsheet -> text: the grid is rendered as delimited text.

Converting a file into its own extension is rejected before any I/O.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tabflow.exceptions import RequestValidationError
from tabflow.formats import FileDescriptor, format_for_path
from tabflow.models import ConvertedFile, OperationRequest, OperationResult
from tabflow.operations.base import BaseOperation, data_row_count
from tabflow.writers import TabularWriter

logger = logging.getLogger(__name__)


def converted_path(descriptor: FileDescriptor, output_path: str | Path) -> Path:
    """``{output_dir}/{base_name}_converted{output_ext}`` for one input."""
    out = Path(output_path)
    return out.parent / f"{descriptor.base_name}_converted{out.suffix}"


class ConvertOperation(BaseOperation):
    """Convert every input to the output path's format."""

    name = "convert"

    @classmethod
    def validate(cls, request: OperationRequest, inputs: list[FileDescriptor]) -> None:
        format_for_path(request.output_path)
        output_ext = Path(request.output_path).suffix.lower()
        for descriptor in inputs:
            if descriptor.extension.lower() == output_ext:
                raise RequestValidationError(
                    f"Input and output formats are the same ({output_ext}): {descriptor.path}",
                    path=str(descriptor.path),
                )

    def _writer_for(self, descriptor: FileDescriptor) -> TabularWriter:
        ctx = self.ctx
        target = converted_path(descriptor, ctx.request.output_path)
        return ctx.writer(target, format_for_path(target), ctx.output_delimiter(descriptor))

    def _record(self, descriptor: FileDescriptor, sink: TabularWriter) -> ConvertedFile:
        logger.info("Converted %s -> %s", descriptor.path.name, sink.path.name)
        self.ctx.progress.advance()
        return ConvertedFile(
            input=descriptor.path.name,
            output=sink.path.name,
            rows=data_row_count(sink.rows_written),
        )

    def _result(self, converted: list[ConvertedFile]) -> OperationResult:
        return OperationResult(
            message=f"{len(converted)} file(s) converted successfully",
            total_rows=sum(c.rows for c in converted),
            results=converted,
        )

    def run_buffered(self) -> OperationResult:
        converted: list[ConvertedFile] = []
        for descriptor in self.ctx.inputs:
            rows = self.ctx.read_all(descriptor)
            with self._writer_for(descriptor) as sink:
                sink.append(rows)
            converted.append(self._record(descriptor, sink))
        return self._result(converted)

    def run_streaming(self) -> OperationResult:
        converted: list[ConvertedFile] = []
        for descriptor in self.ctx.inputs:
            with self._writer_for(descriptor) as sink:
                for row in self.ctx.iter_rows(descriptor):
                    sink.write_row(row)
            converted.append(self._record(descriptor, sink))
        return self._result(converted)
