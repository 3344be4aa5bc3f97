from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, Protocol, runtime_checkable

"""Grid abstraction consumed by the matching engine.

A grid is one worksheet: cells addressed by 1-based (column, row), row 1 being
the header row. The engine only needs the five operations of the Grid protocol.

MemoryGrid keeps rows as plain lists and is what tests and in-process callers
use; WorksheetGrid (excel.workbook) wraps an openpyxl worksheet.
"""

__all__ = [
    "Grid",
    "MemoryGrid",
    "is_blank",
]


@runtime_checkable
class Grid(Protocol):
    def last_column(self) -> int: ...

    def last_row(self) -> int: ...

    def get(self, column: int, row: int) -> Any: ...

    def set(self, column: int, row: int, value: Any) -> None: ...

    def remove_row(self, row: int) -> None: ...


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class MemoryGrid:
    """List-of-rows grid.

    ``last_row`` / ``last_column`` report the last row / column holding a
    non-blank value, so trailing blanks written by ``set`` do not count.
    """

    def __init__(self, rows: Iterable[Sequence[Any]] | None = None) -> None:
        self._rows: list[list[Any]] = [list(r) for r in rows] if rows is not None else []

    @classmethod
    def from_records(cls, headers: Sequence[Any], records: Iterable[dict[str, Any]]) -> MemoryGrid:
        """Build a grid from a header list and dict rows keyed by header."""
        rows: list[list[Any]] = [list(headers)]
        for rec in records:
            rows.append([rec.get(h) for h in headers])
        return cls(rows)

    def last_column(self) -> int:
        last = 0
        for r in self._rows:
            for idx in range(len(r), 0, -1):
                if not is_blank(r[idx - 1]):
                    last = max(last, idx)
                    break
        return last

    def last_row(self) -> int:
        for idx in range(len(self._rows), 0, -1):
            if any(not is_blank(v) for v in self._rows[idx - 1]):
                return idx
        return 0

    def get(self, column: int, row: int) -> Any:
        _check_position(column, row)
        if row > len(self._rows):
            return None
        r = self._rows[row - 1]
        if column > len(r):
            return None
        return r[column - 1]

    def set(self, column: int, row: int, value: Any) -> None:
        _check_position(column, row)
        while len(self._rows) < row:
            self._rows.append([])
        r = self._rows[row - 1]
        if len(r) < column:
            r.extend([None] * (column - len(r)))
        r[column - 1] = value

    def remove_row(self, row: int) -> None:
        _check_position(1, row)
        if row <= len(self._rows):
            del self._rows[row - 1]

    def to_rows(self) -> list[list[Any]]:
        """Rows up to the last populated row, padded to the last populated column."""
        width = self.last_column()
        out: list[list[Any]] = []
        for idx in range(1, self.last_row() + 1):
            out.append([self.get(c, idx) for c in range(1, width + 1)])
        return out

    def __repr__(self) -> str:  # pragma: no cover (debug helper)
        return f"MemoryGrid(rows={self.last_row()}, columns={self.last_column()})"


def _check_position(column: int, row: int) -> None:
    if column < 1 or row < 1:
        raise IndexError(f"grid positions are 1-based, got column={column} row={row}")
