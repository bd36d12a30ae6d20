"""Grid snapshot: a fixed-size, immutable collection of cells.

Every engine operation takes a :class:`Grid` and returns a new one, so the
caller keeps the single authoritative copy.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace

from gridcalc._utils import (
    DEFAULT_NUM_COLS,
    DEFAULT_NUM_ROWS,
    cell_name_to_index,
    index_to_cell_name,
)


@dataclass(frozen=True)
class Cell:
    """One grid slot. ``content`` is authoritative; the rest is derived."""

    index: int
    content: str = ""
    value: float | None = None
    dependencies: tuple[int, ...] = ()  # cells this formula reads
    dependents: tuple[int, ...] = ()  # cells whose formulas read this one

    def with_dependent(self, index: int) -> Cell:
        if index in self.dependents:
            return self
        return replace(self, dependents=self.dependents + (index,))

    def without_dependent(self, index: int) -> Cell:
        if index not in self.dependents:
            return self
        return replace(self, dependents=tuple(d for d in self.dependents if d != index))


@dataclass(frozen=True)
class Grid:
    """Row-major collection of cells, *num_cols* wide."""

    cells: tuple[Cell, ...]
    num_cols: int = DEFAULT_NUM_COLS

    @classmethod
    def empty(cls, num_cols: int = DEFAULT_NUM_COLS, num_rows: int = DEFAULT_NUM_ROWS) -> Grid:
        if not 0 < num_cols <= 26 or not 0 < num_rows <= 100:
            raise ValueError(f"Unsupported grid shape: {num_cols} x {num_rows}")
        return cls(tuple(Cell(i) for i in range(num_cols * num_rows)), num_cols)

    @property
    def num_rows(self) -> int:
        return len(self.cells) // self.num_cols

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __getitem__(self, key: int | str) -> Cell:
        """``grid[3]`` or ``grid["D0"]`` -> Cell."""
        if isinstance(key, str):
            key = self.index_of(key)
        return self.cells[key]

    def index_of(self, name: str) -> int:
        """Index of *name*; raises ``KeyError`` when it is not on this grid."""
        try:
            index = cell_name_to_index(name, self.num_cols)
        except ValueError as e:
            raise KeyError(name) from e
        if index >= len(self.cells):
            raise KeyError(name)
        return index

    def name_of(self, index: int) -> str:
        return index_to_cell_name(index, self.num_cols)

    def replace(self, *updated: Cell) -> Grid:
        """New snapshot with each of *updated* swapped in at its own index."""
        if not updated:
            return self
        cells = list(self.cells)
        for cell in updated:
            cells[cell.index] = cell
        return Grid(tuple(cells), self.num_cols)
