"""
Read-only file analysis for the host's preview pane.

``analyze(path)`` reports size, row and column counts, headers and a few
sample rows.  Text files are scanned incrementally; spreadsheets are
loaded as a grid (``streaming`` is ``False`` for them).

The scan runs against a deadline (``analysis_timeout_seconds``, 5 s by
default).  When it is exceeded the scan stops and the partial counts are
returned with ``partial=True`` and ``error="Timeout"`` instead of
failing.  Other failures (missing file, corrupt workbook) come back as
an ``error`` kind plus message; nothing is raised to the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from tabflow.config import EngineConfig
from tabflow.errors import classify_error, user_message
from tabflow.exceptions import AnalysisTimeout, TabflowError
from tabflow.formats import FileDescriptor
from tabflow.readers import Row, reader_for
from tabflow.tracker import ResourceTracker

logger = logging.getLogger(__name__)


@dataclass
class FileAnalysis:
    """Outcome of ``analyze()``.

    ``total_rows`` counts data rows (header excluded); ``columns`` is
    the width of the header row.
    """

    path: str
    size: int = 0
    last_modified: str | None = None
    type: str = ""
    streaming: bool = False
    delimiter: str | None = None
    total_rows: int = 0
    columns: int = 0
    headers: Row = field(default_factory=list)
    sample_data: list[Row] = field(default_factory=list)
    partial: bool = False
    error: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "size": self.size,
            "lastModified": self.last_modified,
            "totalRows": self.total_rows,
            "columns": self.columns,
            "headers": self.headers,
            "sampleData": self.sample_data,
            "type": self.type,
            "streaming": self.streaming,
            "partial": self.partial,
        }
        if self.delimiter is not None:
            data["delimiter"] = self.delimiter
        if self.error is not None:
            data["error"] = self.error
            data["message"] = self.message
        return data


def _scan(
    result: FileAnalysis,
    descriptor: FileDescriptor,
    tracker: ResourceTracker,
    config: EngineConfig,
    deadline: float,
    clock: Callable[[], float],
) -> None:
    """Fill *result* from the rows of *descriptor*, stopping at *deadline*."""
    reader = reader_for(descriptor, tracker, config)
    result.delimiter = reader.detect_delimiter(descriptor)
    rows = reader.iter_rows(descriptor, result.delimiter)
    try:
        for row in rows:
            if clock() > deadline:
                raise AnalysisTimeout(
                    f"Analysis of {descriptor.path} exceeded "
                    f"{config.analysis_timeout_seconds:g}s after {result.total_rows} rows",
                    path=str(descriptor.path),
                )
            if not result.headers:
                result.headers = row
                result.columns = len(row)
                continue
            if len(result.sample_data) < config.analysis_sample_rows:
                result.sample_data.append(row)
            result.total_rows += 1
    finally:
        rows.close()


def analyze(
    path: str | Path,
    config: EngineConfig | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> FileAnalysis:
    """Analyze the tabular file at *path*.

    Args:
        path: File to inspect.
        config: Engine settings (timeout, sample size).
        clock: Monotonic clock, replaceable for tests.

    Returns:
        A ``FileAnalysis``; check ``error`` / ``partial`` before trusting
        the counts.
    """
    config = config or EngineConfig()
    result = FileAnalysis(path=str(path))
    deadline = clock() + config.analysis_timeout_seconds

    try:
        descriptor = FileDescriptor.from_path(path)
        result.type = descriptor.format.value
        result.streaming = descriptor.format.is_text
        stat = descriptor.path.stat()
        result.size = stat.st_size
        result.last_modified = datetime.fromtimestamp(stat.st_mtime).isoformat()

        with ResourceTracker("analyze") as tracker:
            _scan(result, descriptor, tracker, config, deadline, clock)
    except AnalysisTimeout as exc:
        logger.warning("%s", exc)
        result.partial = True
        result.error = exc.kind
        result.message = user_message(exc.kind)
    except Exception as exc:
        error: TabflowError = classify_error(exc, str(path))
        logger.warning("Analysis of %s failed: %s: %s", path, error.kind, error)
        result.error = error.kind
        result.message = user_message(error.kind)
    else:
        logger.info(
            "Analyzed %s: %d rows x %d columns (%s)",
            path, result.total_rows, result.columns, result.type,
        )
    return result
