"""Interpreter: evaluates an expression tree against a CellValueProvider."""

from __future__ import annotations

import logging

from gridcalc.calc._ast import BinaryOp, CellRef, FuncRange, Node, NumberLit
from gridcalc.calc._errors import InterpretError, InterpretErrorKind, InvariantViolation
from gridcalc.calc._functions import FunctionRegistry
from gridcalc.calc._protocol import CellLookupError, CellValueProvider, Evaluation

logger = logging.getLogger(__name__)

_DEFAULT_FUNCTIONS = FunctionRegistry()


def _binary_op(node: BinaryOp, left: float, right: float) -> float | InterpretError:
    op = node.operator
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        if right == 0:
            # Blame the divisor, not the whole expression
            return InterpretError(InterpretErrorKind.DIVIDE_BY_0, node.right)
        return left / right
    raise InvariantViolation(f"Unknown operator {op!r} in {node!r}")


class _TreeInterpreter:
    """Walks one tree, collecting every cell index it reads."""

    def __init__(
        self,
        provider: CellValueProvider,
        current_index: int,
        functions: FunctionRegistry,
    ) -> None:
        self._provider = provider
        self._current = current_index
        self._functions = functions
        self.dependencies: list[int] = []

    def solve(self, node: Node) -> float | InterpretError:
        if isinstance(node, NumberLit):
            return node.value

        if isinstance(node, CellRef):
            found = self._provider.get_cell_value(node.name, self._current)
            if isinstance(found, CellLookupError):
                return InterpretError(found.kind, node, found.cell_index)
            self.dependencies.append(found.index)
            return found.value

        if isinstance(node, BinaryOp):
            left = self.solve(node.left)
            if isinstance(left, InterpretError):
                return left
            right = self.solve(node.right)
            if isinstance(right, InterpretError):
                return right
            return _binary_op(node, left, right)

        if isinstance(node, FuncRange):
            return self._solve_function(node)

        raise InvariantViolation(f"Interpreter received unknown node: {node!r}")

    def _solve_function(self, node: FuncRange) -> float | InterpretError:
        func = self._functions.get(node.name)
        if func is None:
            return InterpretError(
                InterpretErrorKind.UNKNOWN_FUNCTION, node, detail=node.name,
            )

        found = self._provider.get_range_values(
            node.from_ref.name, node.to_ref.name, self._current,
        )
        if isinstance(found, CellLookupError):
            return InterpretError(found.kind, node, found.cell_index)

        try:
            result = func(found.values)
        except Exception as e:
            logger.debug("Error evaluating %s: %s", node.name, e)
            return InterpretError(InterpretErrorKind.FUNCTION_ERROR, node, detail=str(e))

        self.dependencies.extend(found.indices)
        return result


def interpret(
    tree: Node,
    provider: CellValueProvider,
    current_index: int,
    functions: FunctionRegistry | None = None,
) -> Evaluation | InterpretError:
    """Evaluate *tree* as the formula of cell *current_index*.

    Returns the numeric result with the de-duplicated cells read, or the
    first :class:`InterpretError` met. Evaluation stops at that error.
    """
    walker = _TreeInterpreter(provider, current_index, functions or _DEFAULT_FUNCTIONS)
    result = walker.solve(tree)
    if isinstance(result, InterpretError):
        return result
    return Evaluation(float(result), tuple(dict.fromkeys(walker.dependencies)))
