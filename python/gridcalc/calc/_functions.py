"""Range-aggregate functions callable from formulas, e.g. ``SUM(A0:B3)``."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Callable

RangeFunction = Callable[[Sequence[float]], float]


# ---------------------------------------------------------------------------
# Builtin implementations - each takes the resolved values of one range.
# ---------------------------------------------------------------------------


def _builtin_sum(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("SUM requires at least one value")
    return math.fsum(values)


_BUILTINS: dict[str, RangeFunction] = {
    "SUM": _builtin_sum,
}

# Keywords the lexer recognizes by default
FUNCTION_KEYWORDS: frozenset[str] = frozenset(_BUILTINS)


class FunctionRegistry:
    """Registry of range-aggregate implementations.

    Starts with builtins and can be extended with custom functions.
    Names are case-insensitive.
    """

    def __init__(self) -> None:
        self._functions: dict[str, RangeFunction] = dict(_BUILTINS)

    def register(self, name: str, func: RangeFunction) -> None:
        if not name.isalpha():
            raise ValueError(f"Function name must be alphabetic: {name!r}")
        self._functions[name.upper()] = func

    def get(self, name: str) -> RangeFunction | None:
        return self._functions.get(name.upper())

    def has(self, name: str) -> bool:
        return name.upper() in self._functions

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(self._functions.keys())
