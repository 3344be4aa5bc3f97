from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Structured events emitted while matching and reconciling.

The engine never logs on its own; it hands ReconcileEvent values to an optional
observer callable. Observers live with the presentation layer (see
ic_reconcile.logging.observer and ic_reconcile.services.progress).
"""

__all__ = [
    "EventType",
    "RowClass",
    "ReconcileEvent",
    "Observer",
    "emit",
    "combine_observers",
]


class EventType(Enum):
    HEADERS_DISCOVERED = "headers_discovered"
    COLUMNS_RESOLVED = "columns_resolved"
    LOOKUP_BUILT = "lookup_built"
    ROW_CLASSIFIED = "row_classified"
    ROW_REMOVED = "row_removed"
    ROW_ADDED = "row_added"


class RowClass(Enum):
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    NEW = "new"


@dataclass(frozen=True)
class ReconcileEvent:
    type: EventType
    sheet: str | None = None  # "primary" / "secondary"
    row: int | None = None  # 1-based row in the grid at the time of the event
    data: dict[str, Any] = field(default_factory=dict)


Observer = Callable[[ReconcileEvent], None]


def emit(observer: Observer | None, event_type: EventType, **kwargs: Any) -> None:
    """Send an event to ``observer`` if one was supplied."""
    if observer is None:
        return
    sheet = kwargs.pop("sheet", None)
    row = kwargs.pop("row", None)
    observer(ReconcileEvent(type=event_type, sheet=sheet, row=row, data=kwargs))


def combine_observers(*observers: Observer | None) -> Observer | None:
    """Fan out one event stream to several observers, skipping None entries."""
    active = [o for o in observers if o is not None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]

    def _fan_out(event: ReconcileEvent) -> None:
        for o in active:
            o(event)

    return _fan_out
