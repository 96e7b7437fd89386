"""
Error classification and user-facing messages.

Two pure functions back the failure path of the engine:

- ``classify_error(exc, path)`` maps any exception (builtin, pandas,
  openpyxl, pydantic or our own) onto the ``TabflowError`` taxonomy.
- ``user_message(kind)`` looks up the message shown to the end user.

``error_to_result`` combines both into the failure dict returned by
``process_files``.  There is no shared state here; every call is
independent.
"""

from __future__ import annotations

import csv
import errno
import logging
import zipfile
from typing import Any

from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError

from tabflow.exceptions import (
    FileAccessError,
    FileFormatError,
    ProcessingError,
    RequestValidationError,
    TabflowError,
)

logger = logging.getLogger(__name__)

_USER_MESSAGES: dict[str, str] = {
    "FileAccess": "File not found or not accessible",
    "FormatError": "Unsupported or invalid file format",
    "ValidationError": "Invalid request parameters",
    "ProcessingError": "Error while processing the file",
    "Timeout": "File analysis took too long; showing partial results",
}

_UNKNOWN_MESSAGE = "Unexpected internal error"

# Errno values that mean "the file is there but we can't get a handle"
_HANDLE_ERRNOS = {errno.EMFILE, errno.ENFILE, errno.EACCES, errno.EPERM}


def user_message(kind: str) -> str:
    """Return the end-user message for an error *kind*."""
    return _USER_MESSAGES.get(kind, _UNKNOWN_MESSAGE)


def classify_error(exc: BaseException, path: str | None = None) -> TabflowError:
    """Map an arbitrary exception onto the tabflow taxonomy.

    Already-classified errors are returned unchanged (their ``path`` is
    filled in from *path* when missing).

    Args:
        exc: The exception to classify.
        path: File being processed when the error happened, if known.

    Returns:
        A ``TabflowError`` subclass instance with ``__cause__`` set to *exc*.
    """
    if isinstance(exc, TabflowError):
        if exc.path is None:
            exc.path = path
        return exc

    filename = getattr(exc, "filename", None)
    where = str(filename) if filename else path

    if isinstance(exc, ValidationError):
        classified: TabflowError = RequestValidationError(
            f"Invalid request: {exc.error_count()} validation error(s): "
            f"{exc.errors()[0].get('msg', '')}",
            path=where,
        )
    elif isinstance(exc, (FileNotFoundError, PermissionError, IsADirectoryError)):
        classified = FileAccessError(f"Cannot access file: {where}: {exc}", path=where)
    elif isinstance(exc, OSError) and exc.errno in _HANDLE_ERRNOS:
        classified = FileAccessError(f"Cannot open file: {where}: {exc}", path=where)
    elif isinstance(
        exc,
        (UnicodeDecodeError, csv.Error, zipfile.BadZipFile, InvalidFileException),
    ):
        classified = FileFormatError(f"Invalid file structure: {where}: {exc}", path=where)
    else:
        classified = ProcessingError(
            f"File processing failed: {type(exc).__name__}: {exc}", path=where
        )
    classified.__cause__ = exc
    return classified


def error_to_result(error: TabflowError) -> dict[str, Any]:
    """Build the structured failure result for a classified error.

    Validation and file access problems are logged as warnings; anything
    else is logged as an error.
    """
    if error.kind in ("ValidationError", "FileAccess"):
        logger.warning("%s: %s", error.kind, error)
    else:
        logger.error("%s: %s", error.kind, error)

    result: dict[str, Any] = {
        "success": False,
        "error": error.kind,
        "message": user_message(error.kind),
        "reason": str(error),
    }
    if error.path is not None:
        result["path"] = error.path
    return result
