from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import openpyxl
import pandas as pd
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .grid import is_blank

"""Spreadsheet file adapters.

- load_active_sheet / save_workbook: openpyxl workbook I/O; only the active sheet
  is wrapped as a Grid, other sheets are carried through untouched on save.
- read_sheet_preview: pandas based raw read used by ``--inspect-data``.

Row 1 is the header row, data starts at row 2.
"""

__all__ = [
    "WorkbookLoadError",
    "WorksheetGrid",
    "LoadedSheet",
    "load_active_sheet",
    "save_workbook",
    "read_sheet_preview",
]

SUPPORTED_SUFFIXES = (".xlsx",)


class WorkbookLoadError(Exception):
    """Raised when a file cannot be opened as an .xlsx workbook."""


class WorksheetGrid:
    """Grid protocol over an openpyxl worksheet.

    ``Worksheet.cell`` and ``iter_rows`` create every cell they visit, and
    ``max_row`` / ``max_column`` count cells holding None. Reads therefore go
    through the worksheet's cell store directly so that reading never grows
    the sheet, and the extent covers non-blank cells only.
    """

    def __init__(self, worksheet: Worksheet) -> None:
        self.worksheet = worksheet

    @property
    def title(self) -> str:
        return self.worksheet.title

    def _populated(self) -> list[tuple[int, int]]:
        # keys are (row, column)
        return [pos for pos, cell in self.worksheet._cells.items() if not is_blank(cell.value)]

    def last_column(self) -> int:
        return max((col for _, col in self._populated()), default=0)

    def last_row(self) -> int:
        return max((row for row, _ in self._populated()), default=0)

    def get(self, column: int, row: int) -> Any:
        cell = self.worksheet._cells.get((row, column))
        return None if cell is None else cell.value

    def set(self, column: int, row: int, value: Any) -> None:
        self.worksheet.cell(row=row, column=column, value=value)

    def remove_row(self, row: int) -> None:
        self.worksheet.delete_rows(row, 1)


@dataclass
class LoadedSheet:
    path: Path
    workbook: Workbook
    grid: WorksheetGrid


def load_active_sheet(path: Path) -> LoadedSheet:
    """Open ``path`` and wrap its active worksheet.

    Raises:
        WorkbookLoadError: missing file, unsupported suffix, or unreadable content
    """
    if not path.exists():
        raise WorkbookLoadError(f"file not found: {path}")
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise WorkbookLoadError(f"unsupported file type '{path.suffix}': {path.name} (expected .xlsx)")
    try:
        wb = openpyxl.load_workbook(path)
    except Exception as e:
        raise WorkbookLoadError(f"cannot read workbook {path.name}: {e}") from e
    ws = wb.active
    if ws is None:
        raise WorkbookLoadError(f"workbook has no active sheet: {path.name}")
    return LoadedSheet(path=path, workbook=wb, grid=WorksheetGrid(ws))


def save_workbook(workbook: Workbook, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    return path


def read_sheet_preview(path: Path, rows: int = 3) -> tuple[list[Any], list[list[Any]]]:
    """Return (header cells, first ``rows`` data rows) of the first sheet.

    Cells pandas reads as NaN come back as None.
    """
    df = pd.read_excel(path, sheet_name=0, header=None, nrows=rows + 1)
    if df.empty:
        return [], []
    df = df.astype(object).where(pd.notna(df), None)
    records = df.values.tolist()
    return records[0], records[1:]
