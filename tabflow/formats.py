"""
File formats and descriptors.

The format of a file is resolved exactly once, when its ``FileDescriptor``
is built.  Everything downstream dispatches on ``FileFormat`` rather than
re-inspecting extensions.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

from tabflow.exceptions import RequestValidationError

logger = logging.getLogger(__name__)


class FileFormat(enum.Enum):
    """Tabular file formats understood by the engine."""

    CSV = "CSV"
    TXT = "TXT"
    XLSX = "XLSX"

    @property
    def is_text(self) -> bool:
        return self is not FileFormat.XLSX


_EXTENSIONS: dict[str, FileFormat] = {
    ".csv": FileFormat.CSV,
    ".txt": FileFormat.TXT,
    ".xlsx": FileFormat.XLSX,
    ".xls": FileFormat.XLSX,
}

SUPPORTED_EXTENSIONS = tuple(_EXTENSIONS)


def format_for_path(path: str | Path) -> FileFormat:
    """Resolve the ``FileFormat`` for *path* from its extension.

    Raises:
        RequestValidationError: If the extension is not supported.
    """
    ext = Path(path).suffix.lower()
    try:
        return _EXTENSIONS[ext]
    except KeyError:
        raise RequestValidationError(
            f"Unsupported file extension '{ext or '(none)'}' for {path}. "
            f"Supported extensions: {list(SUPPORTED_EXTENSIONS)}",
            path=str(path),
        ) from None


@dataclass(frozen=True)
class FileDescriptor:
    """An input file selected for an operation.

    Attributes:
        path: Location on disk.
        format: Format resolved from the extension.
        size: Size in bytes at selection time (0 if the file was missing).
    """

    path: Path
    format: FileFormat
    size: int

    @classmethod
    def from_path(cls, path: str | Path) -> FileDescriptor:
        p = Path(path)
        fmt = format_for_path(p)
        try:
            size = p.stat().st_size
        except OSError as exc:
            # Opening the file later raises the proper FileAccess error
            logger.warning("Cannot stat %s (%s); counting it as 0 bytes", p, exc)
            size = 0
        return cls(path=p, format=fmt, size=size)

    @property
    def base_name(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        return self.path.suffix
