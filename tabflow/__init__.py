"""
tabflow: merge, convert and split delimited-text and spreadsheet files.

Public API surface:

- ``process_files(request, progress=None)`` -- **main entry point**. Runs
  a merge / convert / split request (wire-shaped dict or
  ``OperationRequest``) and returns a result dict.  Never raises:
  failures come back as ``{"success": False, "error": <kind>, ...}``.

- ``analyze_file(path)`` -- Read-only analysis for previews (size, rows,
  columns, headers, sample rows).  Bounded by a 5-second deadline,
  after which partial results are returned.

- ``detect_delimiter(sample)`` -- Infer the delimiter of a text sample.

- ``preview_delimiter(path)`` -- Delimiter plus a short preview of a
  text file.  Never raises: failures come back as ``error`` / ``message``.

Engine settings live in ``EngineConfig`` (see ``load_config``); the
defaults switch to the streaming strategy above 50 MiB of input.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from tabflow.analyze import FileAnalysis, analyze
from tabflow.config import EngineConfig, load_config, save_config
from tabflow.detect import DelimiterPreview, detect_delimiter, preview_file
from tabflow.engine import TransformEngine
from tabflow.models import OperationRequest, SplitSpec
from tabflow.progress import ProgressEvent, ProgressSink
from tabflow.tracker import ResourceTracker

__all__ = [
    "process_files",
    "analyze_file",
    "detect_delimiter",
    "preview_delimiter",
    "TransformEngine",
    "EngineConfig",
    "load_config",
    "save_config",
    "OperationRequest",
    "SplitSpec",
    "ProgressEvent",
    "ResourceTracker",
    "FileAnalysis",
    "DelimiterPreview",
]

logger = logging.getLogger(__name__)


def process_files(
    request: OperationRequest | dict[str, Any],
    progress: ProgressSink | None = None,
    *,
    config: EngineConfig | None = None,
    strategy: str | None = None,
    tracker: ResourceTracker | None = None,
) -> dict[str, Any]:
    """Run one merge / convert / split request.

    Args:
        request: Wire-shaped dict (``filePaths``, ``operation``,
            ``outputPath``, optional ``delimiter`` and ``splitOptions``)
            or an ``OperationRequest``.
        progress: Optional callable receiving a ``ProgressEvent`` after
            each completed input file.
        config: Engine settings; defaults when ``None``.
        strategy: Force ``"buffered"`` or ``"streaming"``.
        tracker: Resource tracker for this run (created when ``None``).

    Returns:
        Result dict.  On success: ``success``, ``message``, ``totalRows``
        and ``results`` (convert) or ``details`` (split).  On failure:
        ``success=False``, ``error`` (taxonomy kind), ``message``,
        ``reason`` and, when known, ``path``.

    Examples::

        result = tabflow.process_files({
            "filePaths": ["jan.csv", "feb.csv"],
            "operation": "merge",
            "outputPath": "out/q1.csv",
        })

        result = tabflow.process_files({
            "filePaths": ["big.csv"],
            "operation": "split",
            "outputPath": "out/parts",
            "splitOptions": {"type": "lines", "value": "100000"},
        })
    """
    engine = TransformEngine(config)
    return engine.process(request, progress, strategy=strategy, tracker=tracker)


def analyze_file(path: str | Path, config: EngineConfig | None = None) -> dict[str, Any]:
    """Analyze *path* for a preview; see ``tabflow.analyze.analyze``."""
    return analyze(path, config).to_dict()


def preview_delimiter(path: str | Path, config: EngineConfig | None = None) -> dict[str, Any]:
    """Delimiter, first-row fields and a short preview of the text file *path*.

    Returns:
        Dict with ``delimiter``, ``fields``, ``preview`` and ``totalLines``;
        ``error`` and ``message`` are added when the file cannot be read.
    """
    config = config or EngineConfig()
    return preview_file(path, sample_lines=config.sample_lines).to_dict()
