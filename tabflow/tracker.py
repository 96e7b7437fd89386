"""
Resource tracking for open file handles.

Every handle an operation opens goes through a ``ResourceTracker``.  The
tracker wraps it in a ``TrackedStream`` that removes itself from the
tracker's live set as soon as it is closed, whatever the reason (normal
end of input, explicit close, error unwinding).  ``cleanup()`` force-closes
whatever is still live.

Each operation owns its own tracker and uses it as a context manager, so
no handle outlives the operation that opened it:

    with ResourceTracker("merge") as tracker:
        handle = tracker.open(path, "r", encoding="utf-8-sig", newline="")
        ...
    assert tracker.live_count == 0
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any

logger = logging.getLogger(__name__)


class TrackedStream:
    """A file handle registered with a ``ResourceTracker``.

    Attribute access and iteration are delegated to the wrapped handle.
    Closing is idempotent.
    """

    def __init__(self, handle: IO[Any], tracker: ResourceTracker, label: str) -> None:
        self._handle = handle
        self._tracker = tracker
        self.label = label

    @property
    def raw(self) -> IO[Any]:
        """The underlying file object (for libraries that need the real thing)."""
        return self._handle

    @property
    def closed(self) -> bool:
        return self._handle.closed

    def close(self) -> None:
        try:
            if not self._handle.closed:
                self._handle.close()
        finally:
            self._tracker._release(self)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._handle, name)

    def __iter__(self):
        return iter(self._handle)

    def __enter__(self) -> TrackedStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"TrackedStream({self.label!r}, {state})"


class ResourceTracker:
    """Registry of the open handles of one operation.

    Attributes:
        name: Label used in log messages (usually the operation name).
    """

    def __init__(self, name: str = "operation") -> None:
        self.name = name
        self._live: dict[int, TrackedStream] = {}

    @property
    def live_count(self) -> int:
        return len(self._live)

    def live(self) -> list[TrackedStream]:
        """Snapshot of the handles that are still open."""
        return list(self._live.values())

    def track(self, handle: IO[Any], label: str | None = None) -> TrackedStream:
        """Register an already-open *handle* and return its tracked wrapper."""
        stream = TrackedStream(handle, self, label or getattr(handle, "name", repr(handle)))
        self._live[id(stream)] = stream
        logger.debug("[%s] tracking %s (%d live)", self.name, stream.label, self.live_count)
        return stream

    def open(self, path: str | Path, mode: str = "r", **kwargs: Any) -> TrackedStream:
        """Open *path* with the builtin ``open`` and track the handle."""
        handle = open(path, mode, **kwargs)
        return self.track(handle, label=str(path))

    def _release(self, stream: TrackedStream) -> None:
        if self._live.pop(id(stream), None) is not None:
            logger.debug("[%s] released %s (%d live)", self.name, stream.label, self.live_count)

    def cleanup(self) -> int:
        """Force-close every live handle.

        Returns:
            Number of handles that had to be closed.
        """
        leftovers = self.live()
        for stream in leftovers:
            try:
                stream.close()
            except OSError as exc:
                # The handle is dropped from the live set even if close fails
                logger.warning("[%s] error closing %s: %s", self.name, stream.label, exc)
        if leftovers:
            logger.info("[%s] cleanup closed %d handle(s)", self.name, len(leftovers))
        return len(leftovers)

    def __enter__(self) -> ResourceTracker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()
