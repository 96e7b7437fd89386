"""
Progress reporting for multi-file operations.

A ``ProgressReporter`` is created per operation with the number of input
files and an optional sink callable.  The engine calls ``advance()`` after
each input file is fully processed; the sink receives a ``ProgressEvent``
synchronously.  Throttling, if any, is the sink's business.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Callable

from tabflow.exceptions import ProcessingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """Progress after a completed input file."""

    current: int
    total: int
    percentage: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


ProgressSink = Callable[[ProgressEvent], None]


def percentage(current: int, total: int) -> int:
    """``current / total`` as a whole percentage, halves rounded up."""
    if total <= 0:
        return 100
    return int(math.floor(current / total * 100 + 0.5))


class ProgressReporter:
    """Counts completed files and forwards events to a sink."""

    def __init__(self, total: int, sink: ProgressSink | None = None) -> None:
        self.total = total
        self.current = 0
        self._sink = sink

    def advance(self) -> ProgressEvent:
        """Mark one more input file as done and notify the sink.

        Raises:
            ProcessingError: If called more often than there are files.
        """
        if self.current >= self.total:
            raise ProcessingError(
                f"Progress overflow: {self.current + 1} of {self.total} files"
            )
        self.current += 1
        event = ProgressEvent(
            current=self.current,
            total=self.total,
            percentage=percentage(self.current, self.total),
        )
        logger.info("Progress: %d/%d (%d%%)", event.current, event.total, event.percentage)
        if self._sink is not None:
            self._sink(event)
        return event
