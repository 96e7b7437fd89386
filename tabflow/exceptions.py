"""
Custom exception hierarchy for tabflow.

Every exception carries a ``kind`` string from the error taxonomy
(``FileAccess``, ``FormatError``, ``ValidationError``, ``ProcessingError``,
``Timeout``).  The engine turns these into structured failure results, so
callers of the public API only ever see the ``kind`` and a message.

An optional ``path`` attribute names the file that caused the failure.
"""

from __future__ import annotations


class TabflowError(Exception):
    """Base exception for all tabflow errors."""

    kind = "ProcessingError"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class FileAccessError(TabflowError):
    """Raised when a file cannot be opened, read or written.

    Covers missing files, permission problems and running out of
    file handles.
    """

    kind = "FileAccess"


class FileFormatError(TabflowError):
    """Raised when a file's structure cannot be parsed.

    For example a corrupt ``.xlsx`` container, a workbook without a sheet
    or data range, or text that is not valid UTF-8.
    """

    kind = "FormatError"


class RequestValidationError(TabflowError):
    """Raised when an operation request is malformed.

    Detected before any file is opened: unknown operation, empty input
    list, bad delimiter, invalid split value, or converting a file into
    its own format.
    """

    kind = "ValidationError"


class ProcessingError(TabflowError):
    """Raised for transform failures that fit no other category."""

    kind = "ProcessingError"


class AnalysisTimeout(TabflowError):
    """Raised when file analysis exceeds its deadline.

    Only used by the read-only analysis path, which catches it and
    returns the partial result gathered so far.
    """

    kind = "Timeout"
