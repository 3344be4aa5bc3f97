from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import openpyxl
import pytest

from ic_reconcile.config.loader import ReconcileConfig
from ic_reconcile.excel.grid import MemoryGrid
from ic_reconcile.excel.workbook import WorksheetGrid
from ic_reconcile.logging.error_log import ErrorLogBuffer
from ic_reconcile.models.events import EventType
from ic_reconcile.models.reconcile_result import ErrorKind, ReconcileStats
from ic_reconcile.services.orchestrator import (
    ProcessingError,
    compare_and_update,
    output_path_for,
    reconcile_files,
)


def test_alice_bob_carol_scenario():
    primary = MemoryGrid.from_records(["Name"], [{"Name": "Alice"}, {"Name": "Bob"}])
    secondary = MemoryGrid.from_records(
        ["Name", "I.C. No."],
        [{"Name": "alice", "I.C. No.": "123"}, {"Name": "Carol", "I.C. No.": "999"}],
    )
    outcome = compare_and_update(primary, secondary)
    assert outcome.ok
    assert outcome.grid is primary
    assert outcome.stats == ReconcileStats(updated=1, removed=1, added=1)
    assert primary.to_rows() == [
        ["Name", None, "Designation"],
        ["Alice", "123", None],
        ["Carol", "999", None],
    ]


def test_full_sheet_with_positions(staff_grid, source_grid):
    outcome = compare_and_update(staff_grid, source_grid)
    assert outcome.stats == ReconcileStats(updated=2, removed=1, added=1)
    assert staff_grid.to_rows() == [
        ["No", "Name", "I.C. No.", "Position"],
        [1, "Alice Tan", "800101-01-1111", "Senior Clerk"],
        [3, "Chong Wei", "850505-05-5555", "Technician"],
        [None, "Devi Nair", "900909-09-9999", "Nurse"],
    ]


def test_secondary_never_modified(staff_grid, source_grid):
    before = source_grid.to_rows()
    compare_and_update(staff_grid, source_grid)
    assert source_grid.to_rows() == before


def test_secondary_worksheet_not_grown_by_reads():
    wb = openpyxl.Workbook()
    primary_ws = wb.active
    for r in [["Name", "IC", "Position"], ["Alice", None, None], ["Bob", None, None]]:
        primary_ws.append(r)
    secondary_ws = wb.create_sheet("source")
    for r in [["Name", "IC"], ["alice", "123"], ["Carol", "999"]]:
        secondary_ws.append(r)
    cells_before = set(secondary_ws._cells)

    outcome = compare_and_update(WorksheetGrid(primary_ws), WorksheetGrid(secondary_ws))

    assert outcome.stats == ReconcileStats(updated=1, removed=1, added=1)
    assert set(secondary_ws._cells) == cells_before
    assert (secondary_ws.max_row, secondary_ws.max_column) == (3, 2)


def test_position_cleared_when_secondary_has_no_position_column():
    primary = MemoryGrid([["Name", "IC", "Position"], ["Alice", None, "Clerk"]])
    secondary = MemoryGrid([["Name", "IC"], ["alice", "123"]])
    outcome = compare_and_update(primary, secondary)
    assert outcome.stats == ReconcileStats(updated=1, removed=0, added=0)
    assert primary.to_rows() == [["Name", "IC", "Position"], ["Alice", "123", None]]


def test_missing_name_returns_error_and_leaves_primary_unmodified():
    primary = MemoryGrid([["Staff", "IC"], ["Alice", None]])
    secondary = MemoryGrid([["Name", "IC"], ["alice", "1"]])
    before = primary.to_rows()
    outcome = compare_and_update(primary, secondary)
    assert not outcome.ok
    assert outcome.stats is None
    assert outcome.error.kind is ErrorKind.NAME_COLUMN_MISSING
    assert primary.to_rows() == before


def test_missing_identity_in_secondary():
    outcome = compare_and_update(MemoryGrid([["Name"]]), MemoryGrid([["Name", "Dept"]]))
    assert outcome.error.kind is ErrorKind.IDENTITY_COLUMN_MISSING


def test_rerun_with_same_secondary_is_stable(staff_grid, source_grid):
    compare_and_update(staff_grid, source_grid)
    first = staff_grid.to_rows()
    outcome = compare_and_update(staff_grid, source_grid)
    assert outcome.stats == ReconcileStats(updated=3, removed=0, added=0)
    assert staff_grid.to_rows() == first


def test_observer_receives_events_in_pipeline_order(staff_grid, source_grid):
    events = []
    compare_and_update(staff_grid, source_grid, observer=events.append)
    kinds = [e.type for e in events]
    assert kinds[:4] == [
        EventType.HEADERS_DISCOVERED,
        EventType.HEADERS_DISCOVERED,
        EventType.COLUMNS_RESOLVED,
        EventType.LOOKUP_BUILT,
    ]
    assert kinds.count(EventType.ROW_CLASSIFIED) == 3
    assert kinds[-1] is EventType.ROW_ADDED


def test_output_path_for():
    cfg = ReconcileConfig(output_directory="store", output_prefix="updated_excel_")
    assert output_path_for(cfg, now=1700000000.7) == Path("store") / "updated_excel_1700000000.xlsx"


def test_reconcile_files_writes_output(temp_workdir: Path, make_workbook):
    primary = make_workbook("staff.xlsx", [["Name", "IC"], ["Alice", None], ["Bob", None]])
    secondary = make_workbook("ic.xlsx", [["Nama", "I.C. No."], ["ALICE", "123"], ["Carol", "999"]])
    cfg = ReconcileConfig(output_directory=str(temp_workdir / "out"))
    result = reconcile_files(primary, secondary, cfg)
    assert result.error is None
    assert result.stats == ReconcileStats(updated=1, removed=1, added=1)
    assert result.output_path.exists()
    assert result.output_path.parent == temp_workdir / "out"
    assert result.primary_file == "staff.xlsx"
    assert result.elapsed_seconds >= 0


def test_reconcile_files_column_error_writes_nothing(temp_workdir: Path, make_workbook):
    primary = make_workbook("staff.xlsx", [["Name"], ["Alice"]])
    secondary = make_workbook("ic.xlsx", [["Name", "Dept"], ["alice", "HR"]])
    cfg = ReconcileConfig(output_directory=str(temp_workdir / "out"))
    result = reconcile_files(primary, secondary, cfg)
    assert result.error.kind is ErrorKind.IDENTITY_COLUMN_MISSING
    assert result.output_path is None
    assert not (temp_workdir / "out").exists()


def test_reconcile_files_missing_input_is_fatal(temp_workdir: Path, make_workbook):
    secondary = make_workbook("ic.xlsx", [["Name", "IC"]])
    error_log = ErrorLogBuffer(logs_dir=temp_workdir / "logs")
    with pytest.raises(ProcessingError, match="file not found"):
        reconcile_files(temp_workdir / "data" / "nope.xlsx", secondary, error_log=error_log)
    assert len(error_log) == 1
    path = error_log.flush()
    assert '"stage": "LOAD_PRIMARY"' in path.read_text(encoding="utf-8")


def test_reconcile_files_rejects_non_xlsx(temp_workdir: Path, make_workbook):
    primary = make_workbook("staff.xlsx", [["Name"]])
    bogus = temp_workdir / "data" / "ic.csv"
    bogus.write_text("Name,IC\n", encoding="utf-8")
    with pytest.raises(ProcessingError, match="unsupported file type"):
        reconcile_files(primary, bogus)


def test_reconcile_files_save_failure_is_fatal(temp_workdir: Path, make_workbook):
    primary = make_workbook("staff.xlsx", [["Name", "IC"], ["Alice", None]])
    secondary = make_workbook("ic.xlsx", [["Name", "IC"], ["alice", "1"]])
    error_log = ErrorLogBuffer(logs_dir=temp_workdir / "logs")
    cfg = ReconcileConfig(output_directory=str(temp_workdir / "out"))
    with patch("ic_reconcile.services.orchestrator.save_workbook", side_effect=PermissionError("read-only")):
        with pytest.raises(ProcessingError, match="cannot save"):
            reconcile_files(primary, secondary, cfg, error_log=error_log)
    assert len(error_log) == 1
