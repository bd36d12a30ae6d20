"""CellValueProvider backed by a Grid snapshot."""

from __future__ import annotations

from gridcalc._grid import Grid
from gridcalc._utils import expand_range
from gridcalc.calc._errors import InterpretErrorKind
from gridcalc.calc._protocol import CellLookupError, CellValue, RangeValues


class GridCellProvider:
    """Resolves names against one grid.

    A cell is circular when it is the current cell or when following its
    ``dependencies`` leads back to the current cell.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    def get_cell_value(self, name: str, current_index: int) -> CellValue | CellLookupError:
        try:
            index = self._grid.index_of(name)
        except KeyError:
            return CellLookupError(InterpretErrorKind.CELL_UNDEFINED)

        if self._leads_back(index, current_index):
            return CellLookupError(InterpretErrorKind.CIRCULAR_CELL_REF, index)

        value = self._grid.cells[index].value
        if value is None:
            return CellLookupError(InterpretErrorKind.CELL_NOT_A_NUMBER, index)
        return CellValue(value, index)

    def get_range_values(
        self,
        from_name: str,
        to_name: str,
        current_index: int,
    ) -> RangeValues | CellLookupError:
        try:
            indices = expand_range(from_name, to_name, self._grid.num_cols)
        except ValueError:
            return CellLookupError(InterpretErrorKind.CELL_UNDEFINED)
        if indices[-1] >= len(self._grid):
            return CellLookupError(InterpretErrorKind.CELL_UNDEFINED)

        # Circularity first, so a range holding the current cell reports as such
        for index in indices:
            if self._leads_back(index, current_index):
                return CellLookupError(InterpretErrorKind.CIRCULAR_CELL_REF, index)

        values: list[float] = []
        for index in indices:
            value = self._grid.cells[index].value
            if value is None:
                return CellLookupError(InterpretErrorKind.CELL_NOT_A_NUMBER, index)
            values.append(value)
        return RangeValues(tuple(values), tuple(indices))

    def _leads_back(self, start: int, target: int) -> bool:
        stack = [start]
        seen: set[int] = set()
        while stack:
            index = stack.pop()
            if index == target:
                return True
            if index in seen:
                continue
            seen.add(index)
            stack.extend(self._grid.cells[index].dependencies)
        return False
