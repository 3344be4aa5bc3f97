from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ReconcileConfig, default_config
from ..excel.grid import Grid
from ..excel.workbook import WorkbookLoadError, load_active_sheet, save_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.column_map import DEFAULT_HEADER_VARIANTS, DEFAULT_POSITION_LABEL, HeaderVariants
from ..models.events import Observer
from ..models.reconcile_result import CompareOutcome, FileReconcileResult
from .header_resolver import resolve_columns
from .lookup_builder import build_lookup
from .reconciler import reconcile

logger = logging.getLogger(__name__)

__all__ = [
    "ProcessingError",
    "compare_and_update",
    "output_path_for",
    "reconcile_files",
]


class ProcessingError(Exception):
    """Fatal failure reading or writing a file; no partial result exists."""


def compare_and_update(
    primary: Grid,
    secondary: Grid,
    *,
    variants: HeaderVariants = DEFAULT_HEADER_VARIANTS,
    position_label: str = DEFAULT_POSITION_LABEL,
    observer: Observer | None = None,
) -> CompareOutcome:
    """Reconcile ``primary`` against ``secondary`` in place.

    Column resolution errors come back on ``CompareOutcome.error`` with the
    primary grid unmodified. ``secondary`` is only read.
    """
    resolution = resolve_columns(primary, secondary, variants, position_label, observer)
    column_map = resolution.column_map
    if column_map is None:
        return CompareOutcome(grid=primary, error=resolution.error)

    lookup = build_lookup(secondary, column_map, observer)
    stats = reconcile(primary, lookup, column_map, observer)
    return CompareOutcome(grid=primary, stats=stats)


def output_path_for(config: ReconcileConfig, now: float | None = None) -> Path:
    """``<output_directory>/<output_prefix><unix time>.xlsx``"""
    stamp = int(now if now is not None else time.time())
    return Path(config.output_directory) / f"{config.output_prefix}{stamp}.xlsx"


def reconcile_files(
    primary_path: Path,
    secondary_path: Path,
    config: ReconcileConfig | None = None,
    *,
    observer: Observer | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> FileReconcileResult:
    """Load both files, reconcile the primary's active sheet and save the result.

    Returns a FileReconcileResult; when column resolution fails the result
    carries the error and no file is written.

    Raises:
        ProcessingError: a file could not be loaded or the output not saved.
            The failure is also appended to ``error_log`` when one is given.
    """
    cfg = config if config is not None else default_config()
    start = datetime.now(UTC)

    primary = _load(primary_path, "LOAD_PRIMARY", error_log)
    secondary = _load(secondary_path, "LOAD_SECONDARY", error_log)
    logger.debug(
        "loaded primary=%s sheet=%s secondary=%s sheet=%s",
        primary_path.name,
        primary.grid.title,
        secondary_path.name,
        secondary.grid.title,
    )

    outcome = compare_and_update(
        primary.grid,
        secondary.grid,
        variants=cfg.header_variants,
        position_label=cfg.position_header_label,
        observer=observer,
    )

    output_path: Path | None = None
    if outcome.ok:
        target = output_path_for(cfg)
        try:
            output_path = save_workbook(primary.workbook, target)
        except OSError as e:
            _record(error_log, target.name, "SAVE_OUTPUT", e)
            raise ProcessingError(f"cannot save {target}: {e}") from e

    elapsed = (datetime.now(UTC) - start).total_seconds()
    return FileReconcileResult(
        primary_file=primary_path.name,
        secondary_file=secondary_path.name,
        elapsed_seconds=elapsed,
        stats=outcome.stats,
        error=outcome.error,
        output_path=output_path,
    )


def _load(path: Path, stage: str, error_log: ErrorLogBuffer | None):
    try:
        return load_active_sheet(path)
    except WorkbookLoadError as e:
        _record(error_log, path.name, stage, e)
        raise ProcessingError(str(e)) from e


def _record(error_log: ErrorLogBuffer | None, file: str, stage: str, error: BaseException) -> None:
    if error_log is not None:
        error_log.append(ErrorRecord.create(file=file, stage=stage, error=error))
