from __future__ import annotations

from collections.abc import Mapping

from ..excel.grid import Grid
from ..models.column_map import ColumnMap
from ..models.events import EventType, Observer, RowClass, emit
from ..models.reconcile_result import LookupEntry, ReconcileStats
from .normalizer import normalize

"""Three-way reconciliation of the primary sheet against the lookup.

Passes, in order:
1. update/classify - rows 2..last ascending; matched rows get the IC and, when
   the primary has a position column, the lookup position; unmatched rows are
   only marked
2. delete - marked rows removed bottom-up so pending indices stay valid
3. insert - lookup entries no row consumed are appended below the last
   populated row, in lookup order

The column map must already be validated; grid errors propagate unchanged.
"""

__all__ = [
    "reconcile",
    "update_matched_rows",
    "remove_rows",
    "append_new_rows",
]


def update_matched_rows(
    primary: Grid,
    lookup: Mapping[str, LookupEntry],
    column_map: ColumnMap,
    observer: Observer | None = None,
) -> tuple[int, set[str], list[int]]:
    """Pass 1. Returns (updated count, consumed keys, rows marked for removal)."""
    updated = 0
    consumed: set[str] = set()
    marked: list[int] = []
    write_position = column_map.position1 is not None

    for row in range(2, primary.last_row() + 1):
        key = normalize(primary.get(column_map.name1, row))
        entry = lookup.get(key)
        if entry is None:
            marked.append(row)
            emit(observer, EventType.ROW_CLASSIFIED, sheet="primary", row=row, name=key, classification=RowClass.UNMATCHED)
            continue
        primary.set(column_map.ic1, row, entry.identity_number)
        if write_position:
            primary.set(column_map.position1, row, entry.position)
        consumed.add(key)
        updated += 1
        emit(observer, EventType.ROW_CLASSIFIED, sheet="primary", row=row, name=key, classification=RowClass.MATCHED)
    return updated, consumed, marked


def remove_rows(primary: Grid, rows: list[int], observer: Observer | None = None) -> int:
    """Pass 2. Remove ``rows`` highest first; returns the number removed."""
    removed = 0
    for row in sorted(set(rows), reverse=True):
        primary.remove_row(row)
        removed += 1
        emit(observer, EventType.ROW_REMOVED, sheet="primary", row=row)
    return removed


def append_new_rows(
    primary: Grid,
    lookup: Mapping[str, LookupEntry],
    consumed: set[str],
    column_map: ColumnMap,
    observer: Observer | None = None,
) -> int:
    """Pass 3. Append unconsumed entries; returns the number added."""
    added = 0
    for key, entry in lookup.items():
        if key in consumed:
            continue
        row = primary.last_row() + 1
        primary.set(column_map.name1, row, entry.name)
        primary.set(column_map.ic1, row, entry.identity_number)
        if column_map.position1 is not None:
            primary.set(column_map.position1, row, entry.position)
        added += 1
        emit(observer, EventType.ROW_ADDED, sheet="primary", row=row, name=key, classification=RowClass.NEW)
    return added


def reconcile(
    primary: Grid,
    lookup: Mapping[str, LookupEntry],
    column_map: ColumnMap,
    observer: Observer | None = None,
) -> ReconcileStats:
    """Run the update, delete and insert passes over ``primary`` in place."""
    updated, consumed, marked = update_matched_rows(primary, lookup, column_map, observer)
    removed = remove_rows(primary, marked, observer)
    added = append_new_rows(primary, lookup, consumed, column_map, observer)
    return ReconcileStats(updated=updated, removed=removed, added=added)
