from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from openpyxl.utils import get_column_letter

from ..excel.grid import Grid, is_blank
from ..models.column_map import (
    DEFAULT_HEADER_VARIANTS,
    DEFAULT_POSITION_LABEL,
    ColumnMap,
    ColumnRole,
    HeaderVariants,
)
from ..models.events import EventType, Observer, emit
from ..models.reconcile_result import ColumnResolutionError, ErrorKind
from .normalizer import normalize

"""Header resolution: locate the name / IC / position columns of both sheets.

Row 1 of each sheet is scanned from column 1 to the last populated column. A
header is assigned a role when its normalized text is in that role's variant
set; the first matching column wins and later duplicates are ignored.

Rules once both header rows are scanned:
- name column required in both sheets, IC column required in the secondary
- primary IC column missing -> placed at name column + 1. No header label is
  written and the position is not checked for an existing column.
- primary position column missing -> appended after the last populated column
  and the position label ("Designation") is written into row 1.

Nothing is written to the primary sheet unless resolution succeeds.
"""

__all__ = [
    "HeaderCell",
    "ColumnResolution",
    "MSG_NAME_MISSING",
    "MSG_IDENTITY_MISSING",
    "read_headers",
    "find_role_columns",
    "resolve_columns",
]

MSG_NAME_MISSING = "Name column not found in one or both files."
MSG_IDENTITY_MISSING = "I.C. No. column not found in the second file."


@dataclass(frozen=True)
class HeaderCell:
    column: int
    raw: Any
    normalized: str

    @property
    def letter(self) -> str:
        return get_column_letter(self.column)


@dataclass(frozen=True)
class ColumnResolution:
    column_map: ColumnMap | None = None
    error: ColumnResolutionError | None = None


def read_headers(grid: Grid) -> list[HeaderCell]:
    """Row 1 cells from column 1 to the last populated column."""
    return [
        HeaderCell(column=col, raw=grid.get(col, 1), normalized=normalize(grid.get(col, 1)))
        for col in range(1, grid.last_column() + 1)
    ]


def find_role_columns(headers: list[HeaderCell], variants: HeaderVariants) -> dict[ColumnRole, int]:
    """Map each recognized role to its first matching column."""
    found: dict[ColumnRole, int] = {}
    for h in headers:
        role = variants.role_of(h.normalized)
        if role is not None and role not in found:
            found[role] = h.column
    return found


def resolve_columns(
    primary: Grid,
    secondary: Grid,
    variants: HeaderVariants = DEFAULT_HEADER_VARIANTS,
    position_label: str = DEFAULT_POSITION_LABEL,
    observer: Observer | None = None,
) -> ColumnResolution:
    """Resolve the column map for a primary/secondary pair.

    Returns a ColumnResolution holding either the ColumnMap or a
    ColumnResolutionError. On success the primary grid may have been given a
    position header cell; on error it is untouched.
    """
    headers1 = read_headers(primary)
    headers2 = read_headers(secondary)
    emit(observer, EventType.HEADERS_DISCOVERED, sheet="primary", headers=_describe(headers1))
    emit(observer, EventType.HEADERS_DISCOVERED, sheet="secondary", headers=_describe(headers2))

    found1 = find_role_columns(headers1, variants)
    found2 = find_role_columns(headers2, variants)

    name1 = found1.get(ColumnRole.NAME)
    name2 = found2.get(ColumnRole.NAME)
    ic2 = found2.get(ColumnRole.IDENTITY_NUMBER)
    if name1 is None or name2 is None:
        return ColumnResolution(error=ColumnResolutionError(ErrorKind.NAME_COLUMN_MISSING, MSG_NAME_MISSING))
    if ic2 is None:
        return ColumnResolution(
            error=ColumnResolutionError(ErrorKind.IDENTITY_COLUMN_MISSING, MSG_IDENTITY_MISSING)
        )

    synthesized: set[ColumnRole] = set()
    occupied = primary.last_column()

    ic1 = found1.get(ColumnRole.IDENTITY_NUMBER)
    collision: Any = None
    if ic1 is None:
        ic1 = name1 + 1
        synthesized.add(ColumnRole.IDENTITY_NUMBER)
        # Existing header at the target column is overwritten row by row later on
        existing = primary.get(ic1, 1)
        if not is_blank(existing):
            collision = existing
        occupied = max(occupied, ic1)

    position1 = found1.get(ColumnRole.POSITION)
    if position1 is None:
        position1 = occupied + 1
        synthesized.add(ColumnRole.POSITION)
        primary.set(position1, 1, position_label)

    column_map = ColumnMap(
        name1=name1,
        ic1=ic1,
        position1=position1,
        name2=name2,
        ic2=ic2,
        position2=found2.get(ColumnRole.POSITION),
        synthesized=frozenset(synthesized),
    )
    emit(
        observer,
        EventType.COLUMNS_RESOLVED,
        columns={
            "name1": get_column_letter(name1),
            "ic1": get_column_letter(ic1),
            "position1": get_column_letter(position1),
            "name2": get_column_letter(name2),
            "ic2": get_column_letter(ic2),
            "position2": get_column_letter(column_map.position2) if column_map.position2 else None,
        },
        synthesized=sorted(r.value for r in synthesized),
        identity_collision=collision,
    )
    return ColumnResolution(column_map=column_map)


def _describe(headers: list[HeaderCell]) -> list[dict[str, Any]]:
    return [{"column": h.letter, "raw": h.raw, "normalized": h.normalized} for h in headers]
