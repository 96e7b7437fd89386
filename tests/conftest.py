"""
Shared test fixtures and sample data for tabflow tests.

The fixtures below write sample rows into ``tmp_path`` so each test
works on its own copies; inline samples live in the test modules.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest


# ---------------------------------------------------------------------------
# Sample data helpers
# ---------------------------------------------------------------------------
def numbered_csv(n_rows: int, delimiter: str = ",") -> str:
    """Header ``id,value`` followed by *n_rows* numbered data rows."""
    lines = [f"id{delimiter}value"]
    lines += [f"{i}{delimiter}v{i}" for i in range(1, n_rows + 1)]
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def numbered():
    """Expose ``numbered_csv`` to tests."""
    return numbered_csv


@pytest.fixture()
def write_text(tmp_path: Path):
    """Factory: write *content* to ``tmp_path / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def write_xlsx(tmp_path: Path):
    """Factory: write *rows* (header first) as a one-sheet ``.xlsx``."""

    def _write(name: str, rows: list[list[str]]) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows, dtype=object).to_excel(
            path, sheet_name="Sheet1", header=False, index=False, engine="openpyxl"
        )
        return path

    return _write


def read_xlsx_rows(path: Path) -> list[list[str]]:
    """Cell values of the first sheet of *path*, as strings."""
    frame = pd.read_excel(path, header=None, dtype=str, keep_default_na=False, engine="openpyxl")
    return [list(row) for row in frame.itertuples(index=False, name=None)]


@pytest.fixture()
def xlsx_rows():
    """Expose ``read_xlsx_rows`` to tests."""
    return read_xlsx_rows


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs the public API end to end)",
    )
