"""Cell-name geometry: ``A0``-style names to flat grid indices and back."""

from __future__ import annotations

import re

DEFAULT_NUM_COLS = 26
DEFAULT_NUM_ROWS = 100

COLUMN_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# One column letter, 0-based row of one or two digits: A0, b12, Z99
_CELL_NAME_RE = re.compile(r"^([A-Za-z])([0-9]{1,2})$")


def name_to_rowcol(name: str) -> tuple[int, int]:
    """Convert ``"B3"`` to 0-based ``(row, col)`` -> ``(3, 1)``."""
    m = _CELL_NAME_RE.match(name.strip())
    if not m:
        raise ValueError(f"Invalid cell name: {name!r}")
    col = COLUMN_LETTERS.index(m.group(1).upper())
    return int(m.group(2)), col


def rowcol_to_name(row: int, col: int) -> str:
    """Convert 0-based ``(row, col)`` to a cell name -> ``(3, 1)`` is ``"B3"``."""
    if not 0 <= col < len(COLUMN_LETTERS) or not 0 <= row <= 99:
        raise ValueError(f"Cell position out of range: ({row}, {col})")
    return f"{COLUMN_LETTERS[col]}{row}"


def cell_name_to_index(name: str, num_cols: int = DEFAULT_NUM_COLS) -> int:
    """Flat, row-major index of a cell name in a grid *num_cols* wide.

    A name whose column lies outside the grid raises ``ValueError``; rows are
    not bounded here since the grid length decides that.
    """
    row, col = name_to_rowcol(name)
    if col >= num_cols:
        raise ValueError(f"Column of {name!r} outside a {num_cols}-column grid")
    return row * num_cols + col


def index_to_cell_name(index: int, num_cols: int = DEFAULT_NUM_COLS) -> str:
    if index < 0:
        raise ValueError(f"Negative cell index: {index}")
    row, col = divmod(index, num_cols)
    return rowcol_to_name(row, col)


def expand_range(from_name: str, to_name: str, num_cols: int = DEFAULT_NUM_COLS) -> list[int]:
    """Expand two corner names into every index of the inclusive rectangle.

    Corners may be given in any order; ``B1:A0`` expands like ``A0:B1``.
    Indices come back row-major.
    """
    start_row, start_col = name_to_rowcol(from_name)
    end_row, end_col = name_to_rowcol(to_name)

    # Normalize order
    r_min, r_max = min(start_row, end_row), max(start_row, end_row)
    c_min, c_max = min(start_col, end_col), max(start_col, end_col)
    if c_max >= num_cols:
        raise ValueError(
            f"Range {from_name}:{to_name} outside a {num_cols}-column grid"
        )

    return [
        r * num_cols + c
        for r in range(r_min, r_max + 1)
        for c in range(c_min, c_max + 1)
    ]
