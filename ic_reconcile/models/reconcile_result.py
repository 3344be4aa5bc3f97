from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

"""Result models for a reconciliation run.

Expected failures (a required column missing from a sheet) are carried as a
ColumnResolutionError value on the result rather than raised, so callers can
report them without unwinding. Genuine I/O failures are raised by the file
level driver instead.
"""

__all__ = [
    "ErrorKind",
    "ColumnResolutionError",
    "LookupEntry",
    "ReconcileStats",
    "CompareOutcome",
    "FileReconcileResult",
]


class ErrorKind(Enum):
    NAME_COLUMN_MISSING = "NAME_COLUMN_MISSING"
    IDENTITY_COLUMN_MISSING = "IDENTITY_COLUMN_MISSING"


@dataclass(frozen=True)
class ColumnResolutionError:
    """A required header could not be found.

    Attributes:
        kind: Which role/sheet combination is missing
        message: Human readable message, suitable for showing to the end user
    """
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class LookupEntry:
    """Authoritative values for one person, as read from the secondary sheet."""
    name: Any  # raw name cell, written back for newly inserted rows
    identity_number: Any  # raw, not normalized
    position: Any = None  # raw; None when the secondary sheet has no position column


@dataclass(frozen=True)
class ReconcileStats:
    updated: int = 0
    removed: int = 0
    added: int = 0


@dataclass(frozen=True)
class CompareOutcome:
    """Result of comparing two grids.

    Exactly one of ``stats`` / ``error`` is set. When ``error`` is set the
    primary grid has not been modified.
    """
    grid: Any  # Grid protocol (see ic_reconcile.excel.grid)
    stats: ReconcileStats | None = None
    error: ColumnResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FileReconcileResult:
    """File-level outcome returned to the CLI."""
    primary_file: str
    secondary_file: str
    elapsed_seconds: float
    stats: ReconcileStats | None = None
    error: ColumnResolutionError | None = None
    output_path: Path | None = None  # None when nothing was written
