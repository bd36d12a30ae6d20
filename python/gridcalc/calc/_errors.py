"""Typed formula errors.

Errors a user can fix are plain values, returned instead of raised, so they
flow back to the edit boundary the same way a result does. Only a broken
contract between parser and interpreter is raised (``InvariantViolation``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from gridcalc.calc._ast import Node
    from gridcalc.calc._lexer import Token, TokenKind


class LexErrorKind(Enum):
    INVALID_CHAR = "INVALID_CHAR"
    INVALID_NUMBER = "INVALID_NUMBER"
    INVALID_CELL = "INVALID_CELL"
    UNKNOWN_FUNCTION = "UNKNOWN_FUNCTION"
    FORMULA_TOO_LONG = "FORMULA_TOO_LONG"


class ParseErrorKind(Enum):
    UNEXPECTED_TOKEN = "UNEXPECTED_TOKEN"


class InterpretErrorKind(Enum):
    DIVIDE_BY_0 = "DIVIDE_BY_0"
    CIRCULAR_CELL_REF = "CIRCULAR_CELL_REF"
    CELL_NOT_A_NUMBER = "CELL_NOT_A_NUMBER"
    CELL_UNDEFINED = "CELL_UNDEFINED"
    UNKNOWN_FUNCTION = "UNKNOWN_FUNCTION"
    FUNCTION_ERROR = "FUNCTION_ERROR"


class InvariantViolation(RuntimeError):
    """Parser and interpreter disagree about the tree; not a user error."""


class FormulaError(ABC):
    """Base for every user-facing formula error value."""

    __slots__ = ()

    @property
    @abstractmethod
    def start(self) -> int:
        """Offset in the formula text to highlight."""

    @property
    @abstractmethod
    def message(self) -> str: ...

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class LexError(FormulaError):
    kind: LexErrorKind
    char: str
    char_index: int
    text: str = ""

    @property
    def start(self) -> int:
        return self.char_index

    @property
    def message(self) -> str:
        if self.kind is LexErrorKind.FORMULA_TOO_LONG:
            return f"Formula longer than {self.char_index} characters"
        shown = self.text or self.char
        return f"{self.kind.value}: {shown!r} at position {self.char_index}"


@dataclass(frozen=True)
class ParseError(FormulaError):
    expected: tuple[TokenKind, ...]
    received: Token
    index: int
    kind: ParseErrorKind = ParseErrorKind.UNEXPECTED_TOKEN

    @property
    def expected_kind(self) -> TokenKind:
        return self.expected[0]

    @property
    def start(self) -> int:
        return self.received.start

    @property
    def message(self) -> str:
        wanted = " or ".join(k.name for k in self.expected)
        got = self.received.text or self.received.kind.name
        return f"Expected {wanted}, got {got!r} (token {self.index})"


@dataclass(frozen=True)
class InterpretError(FormulaError):
    kind: InterpretErrorKind
    node: Node
    cell_index: int | None = None
    detail: str = ""

    @property
    def start(self) -> int:
        return self.node.start

    @property
    def message(self) -> str:
        msg = self.kind.value
        if self.cell_index is not None:
            msg += f" (cell {self.cell_index})"
        if self.detail:
            msg += f": {self.detail}"
        return msg


@dataclass(frozen=True)
class EditError:
    """A formula error tied to the cell it happened in."""

    cell_index: int
    cause: Union[LexError, ParseError, InterpretError]

    @property
    def message(self) -> str:
        return f"Cell {self.cell_index}: {self.cause.message}"


def is_error(val: Any) -> bool:
    """Return True if *val* is a formula error value."""
    return isinstance(val, (FormulaError, EditError))
