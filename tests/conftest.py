# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from ic_reconcile.config.loader import OUTPUT_DIR_ENV
from ic_reconcile.excel.grid import MemoryGrid
from ic_reconcile.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv(OUTPUT_DIR_ENV, raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
output_prefix: reconciled_
position_header_label: Jawatan
header_variants:
  identity_number: ["I.C. No.", "No. KP"]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "reconcile.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[[str, list[list[object]]], Path]:
    """Write rows (header first) as the only sheet of data/<name>."""
    def _make(name: str, rows: list[list[object]]) -> Path:
        path = temp_workdir / "data" / name
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
        return path
    return _make


@pytest.fixture()
def staff_grid() -> MemoryGrid:
    return MemoryGrid([
        ["No", "Name", "I.C. No.", "Position"],
        [1, "Alice Tan", "old-1", "Clerk"],
        [2, "Bob Lim", "old-2", "Driver"],
        [3, "Chong Wei", None, None],
    ])


@pytest.fixture()
def source_grid() -> MemoryGrid:
    return MemoryGrid([
        ["NAMA", "IC No", "Designation"],
        ["alice tan", "800101-01-1111", "Senior Clerk"],
        ["CHONG  WEI", "850505-05-5555", "Technician"],
        ["Devi Nair", "900909-09-9999", "Nurse"],
    ])
