"""
Base reader ABC for tabflow.

All format-specific readers implement this interface. The contract is:
1. ``iter_rows()`` yields the non-blank rows of a file one at a time; the
   first row yielded is the header.
2. ``read_all()`` returns the same rows as a list.
3. Every handle is opened through the operation's ``ResourceTracker`` and
   closed when the generator finishes, fails, or is closed early.

Rows are lists of strings.  Widths may vary between rows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from tabflow.config import EngineConfig
from tabflow.errors import classify_error
from tabflow.formats import FileDescriptor
from tabflow.tracker import ResourceTracker, TrackedStream

Row = list[str]


def is_blank_row(row: Row) -> bool:
    """True when every cell of *row* is empty or whitespace."""
    return not any(cell.strip() for cell in row)


class TabularReader(ABC):
    """Abstract base class for tabular source readers.

    Attributes:
        tracker: Registry for every handle this reader opens.
        config: Engine settings (sample size, slice size...).
    """

    def __init__(self, tracker: ResourceTracker, config: EngineConfig | None = None) -> None:
        self.tracker = tracker
        self.config = config or EngineConfig()

    def detect_delimiter(self, descriptor: FileDescriptor) -> str | None:
        """Delimiter of a text input, or ``None`` for containers without one."""
        return None

    @abstractmethod
    def iter_rows(
        self, descriptor: FileDescriptor, delimiter: str | None = None
    ) -> Iterator[Row]:
        """Yield the non-blank rows of *descriptor*, header first.

        Raises:
            FileAccessError: If the file cannot be opened or read.
            FileFormatError: If its structure cannot be parsed.
        """

    def read_all(self, descriptor: FileDescriptor, delimiter: str | None = None) -> list[Row]:
        """Read every non-blank row of *descriptor* into memory."""
        return list(self.iter_rows(descriptor, delimiter))

    def _open(self, path: Path, mode: str, **kwargs: Any) -> TrackedStream:
        """Open *path* through the tracker, classifying OS errors."""
        try:
            return self.tracker.open(path, mode, **kwargs)
        except OSError as exc:
            raise classify_error(exc, str(path)) from exc
