"""Edit entry points: evaluate cell content, apply edits, propagate changes.

Every function takes a :class:`~gridcalc.Grid` snapshot and returns a new
one. :class:`SheetEvaluator` holds the current snapshot for callers that
want one object to send edits to.

Usage::

    sheet = SheetEvaluator()
    sheet.edit("A0", "10")
    sheet.edit("A1", "=A0*2")
    sheet.edit("A0", "21")
    sheet.value("A1")  # 42.0
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import replace

from gridcalc._grid import Cell, Grid
from gridcalc.calc._errors import EditError, FormulaError, LexError, ParseError, is_error
from gridcalc.calc._functions import FunctionRegistry
from gridcalc.calc._graph import apply_dependency_diff, diff_dependencies, propagation_order
from gridcalc.calc._interpreter import interpret
from gridcalc.calc._lexer import is_number, to_number
from gridcalc.calc._parser import parse_formula
from gridcalc.calc._protocol import CalcSettings, CellDelta, PropagationResult
from gridcalc.calc._provider import GridCellProvider

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = CalcSettings()


def evaluate_content(
    grid: Grid,
    index: int,
    content: str,
    settings: CalcSettings | None = None,
) -> Cell | FormulaError:
    """Turn raw *content* into the new state of cell *index*.

    Dependents are carried over untouched. Error offsets are relative to the
    formula body, i.e. the content after the marker.
    """
    settings = settings or _DEFAULT_SETTINGS
    cell = grid.cells[index]
    marker = settings.formula_marker

    if content.startswith(marker):
        body = content[len(marker):]
        if not body.strip():
            # Bare marker: nothing to evaluate yet
            return replace(cell, content=content, value=None, dependencies=())

        functions = settings.functions or FunctionRegistry()
        tree = parse_formula(
            body,
            keywords=functions.supported_functions,
            max_length=settings.max_formula_length,
        )
        if isinstance(tree, (LexError, ParseError)):
            return tree

        evaluation = interpret(tree, GridCellProvider(grid), index, functions)
        if is_error(evaluation):
            return evaluation
        return replace(
            cell,
            content=content,
            value=evaluation.result,
            dependencies=evaluation.dependencies,
        )

    stripped = content.strip()
    if is_number(stripped):
        return replace(cell, content=content, value=to_number(stripped), dependencies=())

    # Plain text
    return replace(cell, content=content, value=None, dependencies=())


def _same_value(old: float | None, new: float | None) -> bool:
    if old is None or new is None:
        return old is new
    # NaN never equals itself
    return old == new or (math.isnan(old) and math.isnan(new))


def _commit(grid: Grid, old: Cell, new: Cell) -> Grid:
    """Swap *new* in for *old*, fixing reverse edges in the same snapshot."""
    diff = diff_dependencies(old.dependencies, new.dependencies)
    grid = apply_dependency_diff(grid, new.index, diff)
    return grid.replace(new)


def apply_edit(
    grid: Grid,
    index: int,
    content: str,
    settings: CalcSettings | None = None,
) -> Grid | EditError:
    """Accept *content* into cell *index*, or explain why not.

    On error the input grid is not touched. Dependents of the cell are not
    recomputed here; call :func:`propagate` for that.
    """
    new_cell = evaluate_content(grid, index, content, settings)
    if is_error(new_cell):
        logger.debug("Rejected edit of cell %d (%r): %s", index, content, new_cell.message)
        return EditError(index, new_cell)
    return _commit(grid, grid.cells[index], new_cell)


def propagate(
    grid: Grid,
    index: int,
    settings: CalcSettings | None = None,
) -> PropagationResult:
    """Recompute every transitive dependent of cell *index*.

    Each dependent is visited once, after all of its inputs. A dependent
    that fails is recorded, left without a value (its dependencies stay) and
    the pass moves on.
    """
    errors: list[EditError] = []
    deltas: list[CellDelta] = []
    order = propagation_order(grid, index)

    for dep_index in order:
        old = grid.cells[dep_index]
        new = evaluate_content(grid, dep_index, old.content, settings)
        if is_error(new):
            logger.debug("Propagation failed at cell %d: %s", dep_index, new.message)
            errors.append(EditError(dep_index, new))
            new = replace(old, value=None)
        grid = _commit(grid, old, new)
        if not _same_value(old.value, new.value):
            deltas.append(CellDelta(dep_index, old.value, new.value))

    return PropagationResult(
        grid=grid,
        errors=tuple(errors),
        visited=tuple(order),
        deltas=tuple(deltas),
    )


class SheetEvaluator:
    """Holds the authoritative grid and applies edits one at a time.

    Each :meth:`edit` fully resolves, propagation included, before it
    returns, so edits never interleave.
    """

    def __init__(self, grid: Grid | None = None, settings: CalcSettings | None = None) -> None:
        self._grid = grid if grid is not None else Grid.empty()
        self._settings = settings or _DEFAULT_SETTINGS

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def settings(self) -> CalcSettings:
        return self._settings

    def _resolve(self, target: int | str) -> int:
        if isinstance(target, str):
            return self._grid.index_of(target)
        if not 0 <= target < len(self._grid):
            raise IndexError(f"Cell index {target} outside grid of {len(self._grid)}")
        return target

    def edit(self, target: int | str, content: str) -> PropagationResult | EditError:
        """Set a cell's content and bring all of its dependents up to date."""
        index = self._resolve(target)
        edited = apply_edit(self._grid, index, content, self._settings)
        if isinstance(edited, EditError):
            return edited
        result = propagate(edited, index, self._settings)
        self._grid = result.grid
        if result.errors:
            logger.debug(
                "Edit of cell %d left %d dependent(s) in error",
                index, len(result.errors),
            )
        return result

    def load(self, contents: Mapping[str, str]) -> list[EditError]:
        """Apply several edits in order; return every error met on the way."""
        errors: list[EditError] = []
        for name, content in contents.items():
            result = self.edit(name, content)
            if isinstance(result, EditError):
                errors.append(result)
            else:
                errors.extend(result.errors)
        return errors

    def cell(self, target: int | str) -> Cell:
        return self._grid.cells[self._resolve(target)]

    def value(self, target: int | str) -> float | None:
        return self.cell(target).value
