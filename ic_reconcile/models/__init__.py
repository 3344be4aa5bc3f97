"""Domain models for the IC reconciliation tool.

This package contains the value types shared between the matching engine, the
file level driver and the CLI.
"""

from .column_map import DEFAULT_HEADER_VARIANTS, DEFAULT_POSITION_LABEL, ColumnMap, ColumnRole, HeaderVariants
from .error_record import ErrorRecord
from .events import EventType, ReconcileEvent, RowClass
from .reconcile_result import (
    ColumnResolutionError,
    CompareOutcome,
    ErrorKind,
    FileReconcileResult,
    LookupEntry,
    ReconcileStats,
)

__all__ = [
    # Columns
    "ColumnMap",
    "ColumnRole",
    "HeaderVariants",
    "DEFAULT_HEADER_VARIANTS",
    "DEFAULT_POSITION_LABEL",
    # Results
    "ColumnResolutionError",
    "CompareOutcome",
    "ErrorKind",
    "FileReconcileResult",
    "LookupEntry",
    "ReconcileStats",
    # Events / logging
    "ErrorRecord",
    "EventType",
    "ReconcileEvent",
    "RowClass",
]
