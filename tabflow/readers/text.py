"""
Delimited-text reader (``.csv`` / ``.txt``).

Parsing is truly incremental: the stdlib ``csv`` reader pulls one line at
a time from a tracked handle, so memory use is bounded by the longest
row, not the file size.  The delimiter is inferred per file from its
first lines unless the caller passes one in.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator

from tabflow.detect import TEXT_ENCODING, detect_delimiter, read_sample
from tabflow.errors import classify_error
from tabflow.exceptions import FileFormatError
from tabflow.formats import FileDescriptor
from tabflow.readers.base import Row, TabularReader, is_blank_row

logger = logging.getLogger(__name__)


class TextReader(TabularReader):
    """Reader for delimited-text files."""

    def detect_delimiter(self, descriptor: FileDescriptor) -> str:
        try:
            sample = read_sample(descriptor.path, self.tracker, self.config.sample_lines)
        except OSError as exc:
            raise classify_error(exc, str(descriptor.path)) from exc
        except UnicodeDecodeError as exc:
            raise FileFormatError(
                f"File is not valid UTF-8 text: {descriptor.path}", path=str(descriptor.path)
            ) from exc
        delimiter = detect_delimiter(sample, self.config.sample_lines)
        logger.info("Detected delimiter %r for %s", delimiter, descriptor.path.name)
        return delimiter

    def iter_rows(
        self, descriptor: FileDescriptor, delimiter: str | None = None
    ) -> Iterator[Row]:
        if delimiter is None:
            delimiter = self.detect_delimiter(descriptor)
        path = descriptor.path

        handle = self._open(path, "r", encoding=TEXT_ENCODING, newline="")
        try:
            for row in csv.reader(handle, delimiter=delimiter):
                if is_blank_row(row):
                    continue
                yield row
        except UnicodeDecodeError as exc:
            raise FileFormatError(f"File is not valid UTF-8 text: {path}", path=str(path)) from exc
        except csv.Error as exc:
            raise FileFormatError(f"Malformed delimited text in {path}: {exc}", path=str(path)) from exc
        except OSError as exc:
            raise classify_error(exc, str(path)) from exc
        finally:
            handle.close()
