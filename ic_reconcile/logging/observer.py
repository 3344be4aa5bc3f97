from __future__ import annotations

import logging

from ..models.events import EventType, ReconcileEvent

"""Observer that turns engine events into log lines.

Header and column discovery go to INFO, per-row events to DEBUG so that normal
runs stay short. A synthesized IC column landing on an existing header is
reported as WARN since its cells get overwritten.
"""

__all__ = [
    "LoggingObserver",
]


class LoggingObserver:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def __call__(self, event: ReconcileEvent) -> None:
        handler = getattr(self, f"_on_{event.type.value}", None)
        if handler is not None:
            handler(event)

    def _on_headers_discovered(self, event: ReconcileEvent) -> None:
        cells = ", ".join(f"{h['column']}={h['raw']!r}" for h in event.data["headers"])
        self.logger.info(f"{event.sheet} headers: {cells or '(none)'}")

    def _on_columns_resolved(self, event: ReconcileEvent) -> None:
        cols = event.data["columns"]
        self.logger.info(
            "columns: primary name=%s ic=%s position=%s | secondary name=%s ic=%s position=%s"
            % (
                cols["name1"],
                cols["ic1"],
                cols["position1"],
                cols["name2"],
                cols["ic2"],
                cols["position2"] or "-",
            )
        )
        if event.data["synthesized"]:
            self.logger.info(f"synthesized primary columns: {', '.join(event.data['synthesized'])}")
        collision = event.data.get("identity_collision")
        if collision is not None:
            self.logger.warning(
                f"IC column placed at {cols['ic1']} over existing header {collision!r}; its values will be overwritten"
            )

    def _on_lookup_built(self, event: ReconcileEvent) -> None:
        d = event.data
        self.logger.info(f"lookup entries={d['entries']} skipped_rows={d['skipped']} duplicate_names={d['duplicates']}")

    def _on_row_classified(self, event: ReconcileEvent) -> None:
        self.logger.debug(f"row {event.row} {event.data['classification'].value}: {event.data['name']!r}")

    def _on_row_removed(self, event: ReconcileEvent) -> None:
        self.logger.debug(f"row {event.row} removed")

    def _on_row_added(self, event: ReconcileEvent) -> None:
        self.logger.debug(f"row {event.row} added: {event.data['name']!r}")
