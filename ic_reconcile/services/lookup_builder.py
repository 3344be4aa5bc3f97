from __future__ import annotations

from ..excel.grid import Grid
from ..models.column_map import ColumnMap
from ..models.events import EventType, Observer, emit
from ..models.reconcile_result import LookupEntry
from .normalizer import normalize

"""Build the name -> (IC, position) lookup from the secondary sheet."""

__all__ = [
    "build_lookup",
]


def build_lookup(
    secondary: Grid,
    column_map: ColumnMap,
    observer: Observer | None = None,
) -> dict[str, LookupEntry]:
    """Scan secondary data rows (2..last) into a dict keyed by normalized name.

    Rows whose normalized name or normalized IC is empty are skipped. A later
    row with the same normalized name replaces the earlier entry's values; the
    key keeps the dict position of its first occurrence.

    IC and position values are stored raw, exactly as read.
    """
    lookup: dict[str, LookupEntry] = {}
    skipped = 0
    duplicates = 0
    for row in range(2, secondary.last_row() + 1):
        raw_name = secondary.get(column_map.name2, row)
        raw_ic = secondary.get(column_map.ic2, row)
        key = normalize(raw_name)
        if not key or not normalize(raw_ic):
            skipped += 1
            continue
        position = secondary.get(column_map.position2, row) if column_map.position2 is not None else None
        if key in lookup:
            duplicates += 1
        lookup[key] = LookupEntry(name=raw_name, identity_number=raw_ic, position=position)

    emit(observer, EventType.LOOKUP_BUILT, sheet="secondary", entries=len(lookup), skipped=skipped, duplicates=duplicates)
    return lookup
