"""
Base operation ABC and shared execution context.

Every operation (merge / convert / split) implements two strategies:

- ``run_buffered()``: each input is read into a list, then written.
- ``run_streaming()``: rows flow one at a time from reader to writer.

Both strategies share readers, writers and row serialization, so they
produce identical output; the engine picks one purely on input size.

``OperationContext`` carries what a single run needs (request, resolved
inputs, config, the run's own ``ResourceTracker`` and ``ProgressReporter``)
and caches the delimiter inferred for each text input.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from tabflow.config import EngineConfig
from tabflow.detect import DEFAULT_DELIMITER
from tabflow.formats import FileDescriptor, FileFormat
from tabflow.models import OperationRequest, OperationResult
from tabflow.progress import ProgressReporter
from tabflow.readers import Row, TabularReader, reader_for
from tabflow.tracker import ResourceTracker
from tabflow.writers import TabularWriter, writer_for

logger = logging.getLogger(__name__)


@dataclass
class OperationContext:
    """Everything one operation run needs.

    Attributes:
        request: The validated request.
        inputs: Resolved input descriptors, in request order.
        config: Engine settings.
        tracker: Handle registry owned by this run only.
        progress: Per-file progress reporter.
        current: Input currently being processed (for error reporting).
    """

    request: OperationRequest
    inputs: list[FileDescriptor]
    config: EngineConfig
    tracker: ResourceTracker
    progress: ProgressReporter
    current: FileDescriptor | None = None
    _delimiters: dict[Path, str | None] = field(default_factory=dict, init=False, repr=False)

    def reader(self, descriptor: FileDescriptor) -> TabularReader:
        return reader_for(descriptor, self.tracker, self.config)

    def input_delimiter(self, descriptor: FileDescriptor) -> str | None:
        """Delimiter used to parse a text input; ``None`` for spreadsheets.

        A one-character request delimiter applies to every text input.
        Otherwise (no delimiter, or a multi-character one the parser cannot
        take) it is inferred per file and cached.
        """
        if not descriptor.format.is_text:
            return None
        given = self.request.delimiter
        if given is not None and len(given) == 1:
            return given
        if descriptor.path not in self._delimiters:
            self._delimiters[descriptor.path] = self.reader(descriptor).detect_delimiter(descriptor)
        return self._delimiters[descriptor.path]

    def output_delimiter(self, source: FileDescriptor | None) -> str:
        """Delimiter for text output.

        The request's delimiter wins; otherwise the delimiter of *source*
        is kept, falling back to comma for spreadsheet sources.
        """
        if self.request.delimiter:
            return self.request.delimiter
        if source is not None and source.format.is_text:
            return self.input_delimiter(source) or DEFAULT_DELIMITER
        return DEFAULT_DELIMITER

    def writer(self, path: Path, fmt: FileFormat, delimiter: str) -> TabularWriter:
        return writer_for(
            path, fmt, self.tracker, delimiter=delimiter, encoding=self.config.output_encoding
        )

    def iter_rows(self, descriptor: FileDescriptor):
        """Stream the rows of *descriptor* with its inferred delimiter."""
        self.current = descriptor
        return self.reader(descriptor).iter_rows(descriptor, self.input_delimiter(descriptor))

    def read_all(self, descriptor: FileDescriptor) -> list[Row]:
        """Load every row of *descriptor* with its inferred delimiter."""
        self.current = descriptor
        return self.reader(descriptor).read_all(descriptor, self.input_delimiter(descriptor))


def data_row_count(rows_written: int) -> int:
    """Data rows in an output whose first row is a header."""
    return max(rows_written - 1, 0)


class BaseOperation(ABC):
    """Abstract base class for merge / convert / split.

    Subclasses implement both strategies and may add request checks in
    ``validate()``, which the engine calls before any file is opened.
    """

    name: str = ""

    def __init__(self, ctx: OperationContext) -> None:
        self.ctx = ctx

    @classmethod
    def validate(cls, request: OperationRequest, inputs: list[FileDescriptor]) -> None:
        """Reject requests this operation cannot run. No I/O allowed here."""

    @abstractmethod
    def run_buffered(self) -> OperationResult:
        """Run with every input loaded into memory."""

    @abstractmethod
    def run_streaming(self) -> OperationResult:
        """Run with rows flowing one at a time from reader to writer."""
