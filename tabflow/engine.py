"""
Transform engine: request validation, strategy selection, execution.

Orchestration of ``TransformEngine.process()``:
  1. Validate the request shape (``OperationRequest``) and resolve inputs
     to ``FileDescriptor``s.  Operation-specific checks run here too.
     Nothing is opened yet; failures return immediately.
  2. Pick a strategy: streaming when the summed input size exceeds
     ``config.streaming_threshold_bytes``, buffered otherwise.
  3. Run the operation inside its own ``ResourceTracker``; the tracker
     closes any handle still open when the run ends, however it ends.
  4. Translate the outcome into a result dict.  Failures are classified
     into the error taxonomy; no exception leaves ``process()``.

Already-written output is left in place when a run fails.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from tabflow.config import EngineConfig
from tabflow.errors import classify_error, error_to_result
from tabflow.exceptions import RequestValidationError
from tabflow.formats import FileDescriptor
from tabflow.models import OperationRequest
from tabflow.operations import OPERATIONS, OperationContext
from tabflow.progress import ProgressReporter, ProgressSink
from tabflow.tracker import ResourceTracker

logger = logging.getLogger(__name__)

Strategy = Literal["buffered", "streaming"]
STRATEGIES = ("buffered", "streaming")


class TransformEngine:
    """Runs merge / convert / split requests.

    The engine itself holds no per-operation state besides the set of
    trackers of runs in flight, which ``shutdown()`` cleans up.

    Attributes:
        config: Engine settings shared by every run.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._active: set[ResourceTracker] = set()

    # -- Validation ---------------------------------------------------------

    def prepare(
        self, request: OperationRequest | dict[str, Any]
    ) -> tuple[OperationRequest, list[FileDescriptor]]:
        """Validate *request* and resolve its inputs, without opening files.

        Raises:
            RequestValidationError: If anything about the request is wrong.
            pydantic.ValidationError: If the request shape is invalid
                (classified as a validation error by the caller).
        """
        if not isinstance(request, OperationRequest):
            request = OperationRequest.model_validate(request)

        if len(request.file_paths) > self.config.max_input_files:
            raise RequestValidationError(
                f"Too many input files: {len(request.file_paths)} "
                f"(maximum {self.config.max_input_files})"
            )

        inputs = [FileDescriptor.from_path(p) for p in request.file_paths]
        OPERATIONS[request.operation].validate(request, inputs)
        return request, inputs

    def select_strategy(self, inputs: list[FileDescriptor]) -> Strategy:
        """Streaming above the size threshold, buffered at or below it."""
        total = sum(d.size for d in inputs)
        strategy: Strategy = (
            "streaming" if total > self.config.streaming_threshold_bytes else "buffered"
        )
        logger.info(
            "Input size %d bytes (threshold %d): using %s strategy",
            total, self.config.streaming_threshold_bytes, strategy,
        )
        return strategy

    # -- Execution ----------------------------------------------------------

    def process(
        self,
        request: OperationRequest | dict[str, Any],
        progress: ProgressSink | None = None,
        *,
        strategy: Strategy | None = None,
        tracker: ResourceTracker | None = None,
    ) -> dict[str, Any]:
        """Run one operation and return its result dict.

        Args:
            request: ``OperationRequest`` or its wire-shaped dict.
            progress: Optional sink receiving a ``ProgressEvent`` after
                each completed input file.
            strategy: Force ``"buffered"`` or ``"streaming"``; chosen by
                input size when ``None``.
            tracker: Tracker for this run; a fresh one is created when
                ``None``.  It must not be shared with another run.

        Returns:
            ``{"success": True, ...}`` or a failure dict with ``error``
            set to the taxonomy kind.
        """
        try:
            request, inputs = self.prepare(request)
            if strategy is not None and strategy not in STRATEGIES:
                raise RequestValidationError(
                    f"Unknown strategy '{strategy}'. Valid strategies: {list(STRATEGIES)}"
                )
        except Exception as exc:
            return error_to_result(classify_error(exc))

        chosen = strategy or self.select_strategy(inputs)
        tracker = tracker or ResourceTracker(request.operation)
        ctx = OperationContext(
            request=request,
            inputs=inputs,
            config=self.config,
            tracker=tracker,
            progress=ProgressReporter(len(inputs), progress),
        )
        operation = OPERATIONS[request.operation](ctx)
        logger.info(
            "Starting %s of %d file(s) -> %s (%s)",
            request.operation, len(inputs), request.output_path, chosen,
        )

        self._active.add(tracker)
        try:
            with tracker:
                if chosen == "streaming":
                    result = operation.run_streaming()
                else:
                    result = operation.run_buffered()
        except Exception as exc:
            current = str(ctx.current.path) if ctx.current is not None else None
            return error_to_result(classify_error(exc, current))
        finally:
            self._active.discard(tracker)

        result.strategy = chosen
        logger.info("%s completed: %s", request.operation, result.message)
        return result.to_dict()

    def shutdown(self) -> int:
        """Force-close the handles of every run still in flight.

        Returns:
            Number of handles closed.
        """
        closed = 0
        for tracker in list(self._active):
            closed += tracker.cleanup()
        self._active.clear()
        return closed
