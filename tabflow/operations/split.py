"""
Split: cut each input into part files of bounded size.

Parts land in the request's output path (a directory) and keep the
input's format and extension:

    {output_dir}/{base_name}_part_001{ext}, _part_002{ext}, ...

Every part starts with the input's header row.  Chunk size is fixed
before the first part is written:

- ``byLineCount``: the requested value.
- ``byFileCount``: ``ceil(total_data_rows / value)``.  The streaming
  strategy needs a separate counting pass over the input for this,
  followed by the writing pass.  ``byLineCount`` streams in one pass.

A new part opens on the first data row and whenever the current part
holds a full chunk, so the last part may be short and an input without
data rows yields no parts at all.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from pathlib import Path

from tabflow.formats import FileDescriptor
from tabflow.models import OperationResult, SplitDetail, SplitPart
from tabflow.operations.base import BaseOperation
from tabflow.readers import Row
from tabflow.writers import TabularWriter

logger = logging.getLogger(__name__)


def part_path(output_dir: str | Path, descriptor: FileDescriptor, index: int) -> Path:
    """Path of the *index*-th (1-based) part of *descriptor*."""
    return Path(output_dir) / f"{descriptor.base_name}_part_{index:03d}{descriptor.extension}"


def rows_per_chunk(mode: str, value: int, total_rows: int) -> int:
    """Target data rows per part for a split spec."""
    if mode == "byLineCount":
        return value
    return math.ceil(total_rows / value)


class SplitOperation(BaseOperation):
    """Split every input into parts under ``request.output_path``."""

    name = "split"

    # -- Helpers -------------------------------------------------------------

    def _write_parts(
        self,
        descriptor: FileDescriptor,
        header: Row,
        data: Iterable[Row],
        target: int,
    ) -> list[SplitPart]:
        """Distribute *data* over part files of *target* rows each."""
        ctx = self.ctx
        delimiter = ctx.output_delimiter(descriptor)
        parts: list[SplitPart] = []
        sink: TabularWriter | None = None
        in_chunk = 0

        try:
            for row in data:
                if sink is None or in_chunk == target:
                    if sink is not None:
                        sink.close()
                        parts.append(SplitPart(path=str(sink.path), rows=in_chunk))
                    path = part_path(ctx.request.output_path, descriptor, len(parts) + 1)
                    sink = ctx.writer(path, descriptor.format, delimiter).open()
                    sink.write_row(header)
                    in_chunk = 0
                sink.write_row(row)
                in_chunk += 1
            if sink is not None:
                sink.close()
                parts.append(SplitPart(path=str(sink.path), rows=in_chunk))
        except Exception:
            if sink is not None:
                sink.abort()
            raise
        return parts

    def _detail(self, descriptor: FileDescriptor, target: int, parts: list[SplitPart]) -> SplitDetail:
        logger.info(
            "Split %s into %d part(s) of up to %d rows",
            descriptor.path.name, len(parts), target,
        )
        self.ctx.progress.advance()
        return SplitDetail(
            file=descriptor.path.name,
            chunks=len(parts),
            rows_per_chunk=target,
            parts=parts,
        )

    def _result(self, details: list[SplitDetail]) -> OperationResult:
        return OperationResult(
            message=f"{len(details)} file(s) split successfully",
            total_rows=sum(p.rows for d in details for p in d.parts),
            details=details,
        )

    def _count_pass(self, descriptor: FileDescriptor) -> tuple[Row | None, int]:
        """Stream *descriptor* once, returning its header and data row count."""
        header: Row | None = None
        total = 0
        for row in self.ctx.iter_rows(descriptor):
            if header is None:
                header = row
            else:
                total += 1
        return header, total

    # -- Strategies ----------------------------------------------------------

    def run_buffered(self) -> OperationResult:
        spec = self.ctx.request.split_spec
        details: list[SplitDetail] = []
        for descriptor in self.ctx.inputs:
            rows = self.ctx.read_all(descriptor)
            header, data = (rows[0], rows[1:]) if rows else ([], [])
            target = rows_per_chunk(spec.mode, spec.value, len(data))
            parts = self._write_parts(descriptor, header, data, target)
            details.append(self._detail(descriptor, target, parts))
        return self._result(details)

    def run_streaming(self) -> OperationResult:
        spec = self.ctx.request.split_spec
        details: list[SplitDetail] = []
        for descriptor in self.ctx.inputs:
            if spec.mode == "byFileCount":
                _, total = self._count_pass(descriptor)
                target = rows_per_chunk(spec.mode, spec.value, total)
                if total == 0:
                    details.append(self._detail(descriptor, target, []))
                    continue
            else:
                target = spec.value

            rows = self.ctx.iter_rows(descriptor)
            header = next(rows, None)
            try:
                parts = self._write_parts(descriptor, header or [], rows, target)
            finally:
                rows.close()
            details.append(self._detail(descriptor, target, parts))
        return self._result(details)
