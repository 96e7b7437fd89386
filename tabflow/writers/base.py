"""
Base writer ABC for tabflow.

A writer is a context manager bound to one output file:

    with TextWriter(path, tracker, delimiter=";") as sink:
        sink.append(rows)

``open()`` creates the destination directory (recursively, idempotent)
and the output handle through the operation's ``ResourceTracker``.
Leaving the ``with`` block normally calls ``close()``, which finalizes
the file; leaving it with an exception calls ``abort()``, which only
releases the handle.  What was already written stays on disk.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from tabflow.errors import classify_error
from tabflow.tracker import ResourceTracker, TrackedStream

logger = logging.getLogger(__name__)


class TabularWriter(ABC):
    """Abstract base class for tabular sinks.

    Attributes:
        path: Destination file.
        rows_written: Number of rows accepted so far (header included).
    """

    def __init__(self, path: str | Path, tracker: ResourceTracker) -> None:
        self.path = Path(path)
        self.tracker = tracker
        self.rows_written = 0
        self._handle: TrackedStream | None = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> TabularWriter:
        """Create the parent directory and open the destination handle."""
        if self._handle is not None:
            return self
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self.tracker.open(self.path, **self._open_kwargs())
        except OSError as exc:
            raise classify_error(exc, str(self.path)) from exc
        logger.debug("Opened output %s", self.path)
        return self

    @abstractmethod
    def _open_kwargs(self) -> dict[str, Any]:
        """Arguments for the builtin ``open`` (mode, encoding...)."""

    @abstractmethod
    def write_row(self, row: list[str]) -> None:
        """Accept one row."""

    def append(self, rows: Iterable[list[str]]) -> int:
        """Accept every row of *rows*, in order.

        Returns:
            Number of rows accepted by this call.
        """
        count = 0
        for row in rows:
            self.write_row(row)
            count += 1
        return count

    def _finalize(self) -> None:
        """Hook run by ``close()`` before the handle is released."""

    def close(self) -> None:
        """Finalize the output file and release its handle."""
        if not self.is_open:
            return
        try:
            self._finalize()
        except OSError as exc:
            raise classify_error(exc, str(self.path)) from exc
        finally:
            self.abort()
        logger.info("Wrote %s (%d rows)", self.path, self.rows_written)

    def abort(self) -> None:
        """Release the handle without finalizing."""
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def __enter__(self) -> TabularWriter:
        return self.open()

    def __exit__(self, exc_type: type[BaseException] | None, *exc_info: object) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()
