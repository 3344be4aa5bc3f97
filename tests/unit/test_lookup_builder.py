from __future__ import annotations

from ic_reconcile.excel.grid import MemoryGrid
from ic_reconcile.models.column_map import ColumnMap
from ic_reconcile.models.events import EventType
from ic_reconcile.services.lookup_builder import build_lookup

CM = ColumnMap(name1=1, ic1=2, position1=3, name2=1, ic2=2, position2=3)
CM_NO_POSITION = ColumnMap(name1=1, ic1=2, position1=3, name2=1, ic2=2)


def test_lookup_keys_are_normalized_values_raw():
    grid = MemoryGrid([
        ["Name", "IC", "Position"],
        ["  ALICE  Tan ", 800101011111, " Clerk "],
    ])
    lookup = build_lookup(grid, CM)
    assert list(lookup) == ["alice tan"]
    entry = lookup["alice tan"]
    assert entry.identity_number == 800101011111
    assert entry.position == " Clerk "
    assert entry.name == "  ALICE  Tan "


def test_rows_with_blank_name_or_ic_are_skipped():
    grid = MemoryGrid([
        ["Name", "IC", "Position"],
        [None, "111", "A"],
        ["Bob", None, "B"],
        ["Carol", "---", "C"],  # normalizes to empty
        ["***", "444", "D"],
        ["Dan", "555", None],
    ])
    events = []
    lookup = build_lookup(grid, CM, observer=events.append)
    assert list(lookup) == ["dan"]
    built = events[-1]
    assert built.type is EventType.LOOKUP_BUILT
    assert built.data == {"entries": 1, "skipped": 4, "duplicates": 0}


def test_duplicate_names_last_row_wins():
    grid = MemoryGrid([
        ["Name", "IC", "Position"],
        ["Alice", "first", "Clerk"],
        ["Bob", "b", "Driver"],
        ["ALICE", "second", "Manager"],
    ])
    lookup = build_lookup(grid, CM)
    assert lookup["alice"].identity_number == "second"
    assert lookup["alice"].position == "Manager"
    # key keeps its first position in iteration order
    assert list(lookup) == ["alice", "bob"]


def test_without_position_column_position_is_none():
    grid = MemoryGrid([["Name", "IC", "Something"], ["Alice", "1", "ignored"]])
    lookup = build_lookup(grid, CM_NO_POSITION)
    assert lookup["alice"].position is None


def test_secondary_grid_not_modified():
    rows = [["Name", "IC"], ["Alice", "1"], ["Bob", "2"]]
    grid = MemoryGrid(rows)
    build_lookup(grid, CM_NO_POSITION)
    assert grid.to_rows() == rows


def test_header_only_sheet_gives_empty_lookup():
    assert build_lookup(MemoryGrid([["Name", "IC"]]), CM_NO_POSITION) == {}
