from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from ic_reconcile.cli import main as cli_main

"""Exit code contract: 0 saved, 1 fatal, 2 required column missing."""


def test_exit_code_success(temp_workdir: Path, make_workbook, capsys):
    primary = make_workbook("staff.xlsx", [["Name", "IC"], ["Alice", None]])
    secondary = make_workbook("ic.xlsx", [["Name", "IC"], ["alice", "1"]])
    code = cli_main([str(primary), str(secondary)])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Updated 1 records successfully (removed 0, added 0)" in out
    assert "SUMMARY updated=1 removed=0 added=0" in out


def test_exit_code_fatal_missing_input(temp_workdir: Path, make_workbook, capsys):
    secondary = make_workbook("ic.xlsx", [["Name", "IC"]])
    code = cli_main([str(temp_workdir / "data" / "missing.xlsx"), str(secondary)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR processing: file not found" in out
    assert "INFO error log:" in out
    assert list((temp_workdir / "logs").glob("errors-*.log"))


def test_exit_code_fatal_bad_config(temp_workdir: Path, make_workbook, capsys):
    primary = make_workbook("staff.xlsx", [["Name"]])
    secondary = make_workbook("ic.xlsx", [["Name", "IC"]])
    code = cli_main([str(primary), str(secondary), "--config", str(temp_workdir / "config" / "nope.yml")])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_exit_code_fatal_save_failure(temp_workdir: Path, make_workbook, capsys):
    primary = make_workbook("staff.xlsx", [["Name", "IC"], ["Alice", None]])
    secondary = make_workbook("ic.xlsx", [["Name", "IC"], ["alice", "1"]])
    with patch("ic_reconcile.services.orchestrator.save_workbook", side_effect=OSError("disk full")):
        code = cli_main([str(primary), str(secondary)])
    assert code == 1
    assert "ERROR processing: cannot save" in capsys.readouterr().out


def test_exit_code_name_column_missing(temp_workdir: Path, make_workbook, capsys):
    primary = make_workbook("staff.xlsx", [["Staff", "IC"], ["Alice", None]])
    secondary = make_workbook("ic.xlsx", [["Name", "IC"], ["alice", "1"]])
    code = cli_main([str(primary), str(secondary)])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR Name column not found in one or both files." in out
    assert "SUMMARY" not in out


def test_exit_code_identity_column_missing(temp_workdir: Path, make_workbook, capsys):
    primary = make_workbook("staff.xlsx", [["Name"], ["Alice"]])
    secondary = make_workbook("ic.xlsx", [["Name", "Dept"], ["alice", "HR"]])
    code = cli_main([str(primary), str(secondary)])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR I.C. No. column not found in the second file." in out
    assert not (temp_workdir / "storage").exists()
