"""gridcalc.calc - Formula engine: lexer, parser, interpreter, dependency graph."""

from gridcalc.calc._ast import BinaryOp, CellRef, FuncRange, Node, NumberLit, format_formula, iter_leaves
from gridcalc.calc._errors import (
    EditError,
    FormulaError,
    InterpretError,
    InterpretErrorKind,
    InvariantViolation,
    LexError,
    LexErrorKind,
    ParseError,
    ParseErrorKind,
    is_error,
)
from gridcalc.calc._evaluator import SheetEvaluator, apply_edit, evaluate_content, propagate
from gridcalc.calc._functions import FUNCTION_KEYWORDS, FunctionRegistry
from gridcalc.calc._graph import (
    DependencyDiff,
    apply_dependency_diff,
    check_consistency,
    diff_dependencies,
    propagation_order,
)
from gridcalc.calc._interpreter import interpret
from gridcalc.calc._lexer import Token, TokenKind, tokenize
from gridcalc.calc._parser import FormulaParser, parse, parse_formula
from gridcalc.calc._protocol import (
    CalcSettings,
    CellDelta,
    CellLookupError,
    CellValue,
    CellValueProvider,
    Evaluation,
    PropagationResult,
    RangeValues,
)
from gridcalc.calc._provider import GridCellProvider

__all__ = [
    "BinaryOp",
    "CalcSettings",
    "CellDelta",
    "CellLookupError",
    "CellRef",
    "CellValue",
    "CellValueProvider",
    "DependencyDiff",
    "EditError",
    "Evaluation",
    "FUNCTION_KEYWORDS",
    "FormulaError",
    "FormulaParser",
    "FuncRange",
    "FunctionRegistry",
    "GridCellProvider",
    "InterpretError",
    "InterpretErrorKind",
    "InvariantViolation",
    "LexError",
    "LexErrorKind",
    "Node",
    "NumberLit",
    "ParseError",
    "ParseErrorKind",
    "PropagationResult",
    "RangeValues",
    "SheetEvaluator",
    "Token",
    "TokenKind",
    "apply_dependency_diff",
    "apply_edit",
    "check_consistency",
    "diff_dependencies",
    "evaluate_content",
    "format_formula",
    "interpret",
    "is_error",
    "iter_leaves",
    "parse",
    "parse_formula",
    "propagate",
    "propagation_order",
    "tokenize",
]
