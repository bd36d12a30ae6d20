"""CellValueProvider protocol, result dataclasses and engine settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gridcalc._grid import Grid
    from gridcalc.calc._errors import EditError, InterpretErrorKind
    from gridcalc.calc._functions import FunctionRegistry


@dataclass(frozen=True)
class CellValue:
    """A single resolved cell."""

    value: float
    index: int


@dataclass(frozen=True)
class RangeValues:
    """Every resolved cell of a range, in matching order."""

    values: tuple[float, ...]
    indices: tuple[int, ...]


@dataclass(frozen=True)
class CellLookupError:
    """Why a provider could not hand out a number."""

    kind: InterpretErrorKind  # CIRCULAR_CELL_REF, CELL_NOT_A_NUMBER or CELL_UNDEFINED
    cell_index: int | None = None


@runtime_checkable
class CellValueProvider(Protocol):
    """Resolves cell names to numbers for the interpreter."""

    def get_cell_value(self, name: str, current_index: int) -> CellValue | CellLookupError:
        """Value of the cell called *name*, as seen from *current_index*."""
        ...

    def get_range_values(
        self,
        from_name: str,
        to_name: str,
        current_index: int,
    ) -> RangeValues | CellLookupError:
        """Values of every cell in the inclusive range between two corners."""
        ...


@dataclass(frozen=True)
class Evaluation:
    """Result of interpreting one formula."""

    result: float
    dependencies: tuple[int, ...]  # cells read, first-read order, no repeats


@dataclass(frozen=True)
class CellDelta:
    """A single cell's value change from propagation."""

    index: int
    old_value: float | None
    new_value: float | None


@dataclass(frozen=True)
class PropagationResult:
    """Outcome of recomputing every dependent of an edited cell."""

    grid: Grid
    errors: tuple[EditError, ...] = ()
    visited: tuple[int, ...] = ()  # recomputed cells, evaluation order
    deltas: tuple[CellDelta, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class CalcSettings:
    """Knobs shared by the edit entry points."""

    formula_marker: str = "="
    max_formula_length: int | None = None
    functions: FunctionRegistry | None = None
