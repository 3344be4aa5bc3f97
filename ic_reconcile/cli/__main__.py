from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ic_reconcile.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ReconcileConfig, default_config, load_config
from ic_reconcile.excel.workbook import read_sheet_preview
from ic_reconcile.logging.error_log import ErrorLogBuffer
from ic_reconcile.logging.init import log_summary, setup_logging
from ic_reconcile.logging.observer import LoggingObserver
from ic_reconcile.models.column_map import ColumnRole
from ic_reconcile.models.events import combine_observers
from ic_reconcile.models.reconcile_result import ReconcileStats
from ic_reconcile.services.normalizer import normalize
from ic_reconcile.services.orchestrator import ProcessingError, reconcile_files
from ic_reconcile.services.progress import ProgressTracker
from ic_reconcile.services.summary import render_success_message, render_summary

"""CLI entrypoint.

ic-reconcile PRIMARY SECONDARY [--config PATH] [--output-dir DIR] [--debug] [--inspect-data]

Exit codes:
    0  reconciled and saved
    1  fatal: bad config, unreadable input, output not writable
    2  a required column was not found (nothing written)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_COLUMN_ERROR = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="ic-reconcile",
        description="Update a staff sheet with IC numbers and positions from a second sheet, matched by name",
    )
    p.add_argument("primary", type=Path, help="Workbook to update (.xlsx)")
    p.add_argument("secondary", type=Path, help="Workbook holding the IC numbers (.xlsx)")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--output-dir", default=None, help="Directory for the updated workbook")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print headers & first rows of both files then exit")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> ReconcileConfig:
    if args.config is not None:
        cfg = load_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = default_config()
    if args.output_dir:
        cfg = ReconcileConfig(
            output_directory=args.output_dir,
            output_prefix=cfg.output_prefix,
            position_header_label=cfg.position_header_label,
            header_variants=cfg.header_variants,
        )
    return cfg


def _inspect_data(paths: list[Path], cfg: ReconcileConfig) -> int:
    for path in paths:
        print(f"FILE: {path.name}")
        try:
            headers, rows = read_sheet_preview(path)
        except Exception as e:  # pragma: no cover
            print(f"  read_error: {e}")
            return EXIT_FATAL
        for idx, raw in enumerate(headers, start=1):
            key = normalize(raw)
            role: ColumnRole | None = cfg.header_variants.role_of(key)
            print(f"  col {idx}: {raw!r} -> {key!r} role={role.value if role else '-'}")
        for r in rows:
            print(f"    row: {r}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # None -> read sys.argv; an explicit [] from tests must not pick up pytest's own args
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    load_dotenv(dotenv_path=Path(".env"), override=True)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data([args.primary, args.secondary], cfg)

    logger.info(f"primary={args.primary} secondary={args.secondary}")
    error_log = ErrorLogBuffer()
    with ProgressTracker() as progress:
        observer = combine_observers(LoggingObserver(logger), progress)
        try:
            result = reconcile_files(args.primary, args.secondary, cfg, observer=observer, error_log=error_log)
        except ProcessingError as e:
            logger.error(f"processing: {e}")
            log_path = error_log.flush()
            if log_path is not None:
                logger.info(f"error log: {log_path}")
            return EXIT_FATAL

    if result.error is not None:
        logger.error(result.error.message)
        return EXIT_COLUMN_ERROR

    logger.info(render_success_message(result.stats or ReconcileStats()))
    if result.output_path is not None:
        logger.info(f"saved: {result.output_path}")
    log_summary(render_summary(result))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
