from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.events import EventType, ReconcileEvent, RowClass

"""Progress display with tqdm (TTY only).

ProgressTracker is an engine observer: it counts row events and shows them on a
single bar. In non-TTY environments (CI, pipes) no bar is created so no ANSI
control sequences end up in captured output.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Row progress bar fed by ReconcileEvent values.

    The number of primary rows is unknown until classification starts, so the
    bar has no total and shows a running count with updated/removed/added as
    postfix.
    """

    def __init__(self, *, description: str = "Reconciling", enabled: bool | None = None) -> None:
        self.description = description
        self.enabled = is_tty_enabled() if enabled is None else enabled
        self.counts = {"updated": 0, "removed": 0, "added": 0}
        self.pbar: TqdmType[Any] | None = None

    def _bar(self) -> TqdmType[Any] | None:
        if self.enabled and self.pbar is None:
            self.pbar = tqdm(
                total=None,
                desc=self.description,
                unit="row",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        return self.pbar

    def __call__(self, event: ReconcileEvent) -> None:
        if event.type is EventType.ROW_CLASSIFIED:
            if event.data["classification"] is RowClass.MATCHED:
                self.counts["updated"] += 1
        elif event.type is EventType.ROW_REMOVED:
            self.counts["removed"] += 1
        elif event.type is EventType.ROW_ADDED:
            self.counts["added"] += 1
        else:
            return
        pbar = self._bar()
        if pbar is not None:
            pbar.update(1)
            pbar.set_postfix(**self.counts)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
