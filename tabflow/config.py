"""
Engine configuration and YAML I/O for tabflow.

``EngineConfig`` holds the performance knobs of the transform engine.
None of them change output content; they only decide how much is held in
memory at once and how long the analysis preview may run.

Key functions:
- load_config(path) -> EngineConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.

A missing config file is not an error for callers that pass ``None``;
they simply get ``EngineConfig()`` defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from tabflow.exceptions import RequestValidationError

logger = logging.getLogger(__name__)

DEFAULT_STREAMING_THRESHOLD = 50 * 1024 * 1024


class EngineConfig(BaseModel):
    """Tunable settings of the transform engine.

    Maps 1:1 to ``tabflow.yaml``.
    """

    streaming_threshold_bytes: int = Field(
        DEFAULT_STREAMING_THRESHOLD,
        ge=0,
        description="Aggregate input size above which the streaming strategy is used",
    )
    spreadsheet_slice_rows: int = Field(
        1000, gt=0, description="Rows handed over per slice when reading a spreadsheet grid"
    )
    sample_lines: int = Field(
        5, gt=0, description="Leading lines sampled for delimiter inference"
    )
    analysis_timeout_seconds: float = Field(
        5.0, gt=0, description="Deadline for the read-only analysis preview"
    )
    analysis_sample_rows: int = Field(
        5, ge=0, le=5, description="Data rows returned as sampleData by analysis"
    )
    max_input_files: int = Field(
        50, gt=0, description="Maximum number of input files per operation"
    )
    output_encoding: str = Field(
        "utf-8", description="Encoding used when writing delimited text"
    )

    @model_validator(mode="after")
    def _check_encoding(self) -> EngineConfig:
        """Reject encodings Python does not know about."""
        try:
            "".encode(self.output_encoding)
        except LookupError as exc:
            raise ValueError(f"Unknown output_encoding: '{self.output_encoding}'") from exc
        return self


def load_config(path: str | Path) -> EngineConfig:
    """Load and validate ``tabflow.yaml`` into an EngineConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        RequestValidationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise RequestValidationError(f"Config file is empty: {path}", path=str(path))
    logger.info("Loaded config from %s", path)
    return EngineConfig.model_validate(raw)


def save_config(config: EngineConfig, path: str | Path) -> None:
    """Serialize an EngineConfig to YAML with a short header comment."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# tabflow engine configuration\n")
        f.write("# These settings affect memory use and timing only, never output content.\n\n")
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info("Saved config to %s", path)
