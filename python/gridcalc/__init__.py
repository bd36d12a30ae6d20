"""gridcalc - spreadsheet cells with formulas that stay consistent after edits.

Usage::

    from gridcalc import SheetEvaluator

    sheet = SheetEvaluator()          # 26 columns (A-Z) x 100 rows (0-99)
    sheet.edit("A0", "5")
    sheet.edit("A1", "6")
    sheet.edit("B0", "=A0*2+SUM(A0:A1)")
    sheet.edit("A0", "7")             # B0 is recomputed
    sheet.value("B0")                 # 27.0
"""

from gridcalc._grid import Cell, Grid
from gridcalc._utils import cell_name_to_index, expand_range, index_to_cell_name
from gridcalc.calc import (
    CalcSettings,
    EditError,
    GridCellProvider,
    PropagationResult,
    SheetEvaluator,
    apply_edit,
    propagate,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CalcSettings",
    "Cell",
    "EditError",
    "Grid",
    "GridCellProvider",
    "PropagationResult",
    "SheetEvaluator",
    "apply_edit",
    "cell_name_to_index",
    "expand_range",
    "index_to_cell_name",
    "propagate",
]
