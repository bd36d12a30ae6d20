"""Tests for cell-name geometry, Grid snapshots and the grid-backed provider."""

from __future__ import annotations

import pytest

from gridcalc import Cell, Grid
from gridcalc._utils import (
    cell_name_to_index,
    expand_range,
    index_to_cell_name,
    name_to_rowcol,
    rowcol_to_name,
)
from gridcalc.calc import (
    CellLookupError,
    CellValue,
    CellValueProvider,
    GridCellProvider,
    InterpretErrorKind,
    RangeValues,
)


class TestNames:
    @pytest.mark.parametrize(
        ("name", "rowcol"),
        [("A0", (0, 0)), ("B3", (3, 1)), ("z99", (99, 25)), ("C10", (10, 2))],
    )
    def test_name_to_rowcol(self, name: str, rowcol: tuple[int, int]) -> None:
        assert name_to_rowcol(name) == rowcol

    def test_rowcol_to_name(self) -> None:
        assert rowcol_to_name(3, 1) == "B3"
        assert rowcol_to_name(99, 25) == "Z99"

    @pytest.mark.parametrize("name", ["", "A", "1A", "AA1", "A100", "A-1", "$A1"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            name_to_rowcol(name)

    def test_out_of_range_position(self) -> None:
        with pytest.raises(ValueError):
            rowcol_to_name(100, 0)
        with pytest.raises(ValueError):
            rowcol_to_name(0, 26)

    def test_index_round_trip(self) -> None:
        assert cell_name_to_index("A0") == 0
        assert cell_name_to_index("B1") == 27
        assert cell_name_to_index("B1", num_cols=2) == 3
        assert index_to_cell_name(27) == "B1"
        assert index_to_cell_name(3, num_cols=2) == "B1"

    def test_column_outside_narrow_grid(self) -> None:
        with pytest.raises(ValueError):
            cell_name_to_index("C0", num_cols=2)

    def test_negative_index(self) -> None:
        with pytest.raises(ValueError):
            index_to_cell_name(-1)


class TestExpandRange:
    def test_row_major(self) -> None:
        assert expand_range("A0", "B1", num_cols=3) == [0, 1, 3, 4]

    def test_reversed_corners(self) -> None:
        assert expand_range("B1", "A0", num_cols=3) == [0, 1, 3, 4]
        assert expand_range("A1", "B0", num_cols=3) == [0, 1, 3, 4]

    def test_single_cell(self) -> None:
        assert expand_range("C2", "C2") == [2 * 26 + 2]

    def test_column_slice(self) -> None:
        assert expand_range("A0", "A3", num_cols=4) == [0, 4, 8, 12]

    def test_outside_grid(self) -> None:
        with pytest.raises(ValueError):
            expand_range("A0", "D0", num_cols=3)


class TestGrid:
    def test_empty_default_shape(self) -> None:
        grid = Grid.empty()
        assert len(grid) == 2600
        assert grid.num_cols == 26
        assert grid.num_rows == 100
        assert all(cell == Cell(cell.index) for cell in grid)

    def test_empty_rejects_bad_shape(self) -> None:
        with pytest.raises(ValueError):
            Grid.empty(num_cols=27)
        with pytest.raises(ValueError):
            Grid.empty(num_rows=0)

    def test_lookup_by_name_and_index(self) -> None:
        grid = Grid.empty(3, 3)
        assert grid["B1"] is grid[4]
        assert grid.index_of("b1") == 4
        assert grid.name_of(4) == "B1"

    def test_index_of_off_grid(self) -> None:
        grid = Grid.empty(3, 3)
        with pytest.raises(KeyError):
            grid.index_of("A3")
        with pytest.raises(KeyError):
            grid.index_of("D0")
        with pytest.raises(KeyError):
            grid.index_of("nope")

    def test_replace_returns_new_snapshot(self) -> None:
        grid = Grid.empty(2, 2)
        updated = grid.replace(Cell(1, content="5", value=5.0))
        assert updated[1].value == 5.0
        assert grid[1].value is None
        assert grid.replace() is grid

    def test_dependent_helpers_idempotent(self) -> None:
        cell = Cell(0)
        once = cell.with_dependent(3)
        assert once.with_dependent(3) is once
        assert once.dependents == (3,)
        assert once.without_dependent(3).dependents == ()
        assert cell.without_dependent(3) is cell


def _grid(values: dict[int, float | None], deps: dict[int, tuple[int, ...]] | None = None) -> Grid:
    """3x3 grid with the given values; *deps* sets dependencies only."""
    deps = deps or {}
    cells = [
        Cell(i, value=values.get(i), dependencies=deps.get(i, ()))
        for i in range(9)
    ]
    return Grid(tuple(cells), num_cols=3)


class TestGridCellProvider:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(GridCellProvider(Grid.empty(1, 1)), CellValueProvider)

    def test_value(self) -> None:
        provider = GridCellProvider(_grid({1: 2.5}))
        assert provider.get_cell_value("B0", 8) == CellValue(2.5, 1)

    def test_undefined(self) -> None:
        provider = GridCellProvider(_grid({}))
        found = provider.get_cell_value("A3", 0)
        assert found == CellLookupError(InterpretErrorKind.CELL_UNDEFINED)

    def test_not_a_number(self) -> None:
        provider = GridCellProvider(_grid({}))
        found = provider.get_cell_value("C2", 0)
        assert found == CellLookupError(InterpretErrorKind.CELL_NOT_A_NUMBER, 8)

    def test_self_reference_is_circular(self) -> None:
        provider = GridCellProvider(_grid({4: 1.0}))
        found = provider.get_cell_value("B1", 4)
        assert isinstance(found, CellLookupError)
        assert found.kind is InterpretErrorKind.CIRCULAR_CELL_REF

    def test_transitive_circularity(self) -> None:
        # 1 reads 2, 2 reads 0; cell 0 asking for 1 would close the loop
        grid = _grid({1: 3.0, 2: 3.0}, deps={1: (2,), 2: (0,)})
        found = GridCellProvider(grid).get_cell_value("B0", 0)
        assert found == CellLookupError(InterpretErrorKind.CIRCULAR_CELL_REF, 1)

    def test_unrelated_chain_is_fine(self) -> None:
        grid = _grid({1: 3.0, 2: 3.0}, deps={1: (2,)})
        assert GridCellProvider(grid).get_cell_value("B0", 0) == CellValue(3.0, 1)

    def test_range(self) -> None:
        grid = _grid({0: 1.0, 1: 2.0, 3: 3.0, 4: 4.0})
        found = GridCellProvider(grid).get_range_values("B1", "A0", 8)
        assert found == RangeValues((1.0, 2.0, 3.0, 4.0), (0, 1, 3, 4))

    def test_range_containing_current_cell(self) -> None:
        grid = _grid({0: 1.0, 1: 2.0, 3: 3.0})
        found = GridCellProvider(grid).get_range_values("A0", "B1", 4)
        assert found == CellLookupError(InterpretErrorKind.CIRCULAR_CELL_REF, 4)

    def test_range_circularity_reported_before_missing_value(self) -> None:
        # cell 1 has no value but cell 3 loops back to 5
        grid = _grid({0: 1.0, 3: 3.0, 4: 4.0}, deps={3: (5,)})
        found = GridCellProvider(grid).get_range_values("A0", "B1", 5)
        assert isinstance(found, CellLookupError)
        assert found.kind is InterpretErrorKind.CIRCULAR_CELL_REF

    def test_range_not_a_number(self) -> None:
        grid = _grid({0: 1.0, 3: 3.0})
        found = GridCellProvider(grid).get_range_values("A0", "B1", 8)
        assert found == CellLookupError(InterpretErrorKind.CELL_NOT_A_NUMBER, 1)

    @pytest.mark.parametrize(("start", "end"), [("A0", "A3"), ("A0", "D0")])
    def test_range_off_grid(self, start: str, end: str) -> None:
        found = GridCellProvider(_grid({})).get_range_values(start, end, 8)
        assert found == CellLookupError(InterpretErrorKind.CELL_UNDEFINED)
