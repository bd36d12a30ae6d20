"""Expression tree produced by the parser.

Every node is immutable and owns its children; trees are never shared.
``start`` is the offset of the node's first token in the formula text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class NumberLit:
    value: float
    text: str  # literal as written, e.g. "1,5"
    start: int


@dataclass(frozen=True)
class CellRef:
    name: str
    start: int


@dataclass(frozen=True)
class BinaryOp:
    operator: str  # one of + - * /
    left: Node
    right: Node
    start: int


@dataclass(frozen=True)
class FuncRange:
    name: str
    from_ref: CellRef
    to_ref: CellRef
    start: int


Node = Union[NumberLit, CellRef, BinaryOp, FuncRange]


def iter_leaves(node: Node) -> Iterator[NumberLit | CellRef]:
    """Yield literal and reference leaves left to right."""
    if isinstance(node, (NumberLit, CellRef)):
        yield node
    elif isinstance(node, BinaryOp):
        yield from iter_leaves(node.left)
        yield from iter_leaves(node.right)
    elif isinstance(node, FuncRange):
        yield node.from_ref
        yield node.to_ref


def format_formula(node: Node) -> str:
    """Print *node* back as formula text, parenthesizing every binary op."""
    if isinstance(node, NumberLit):
        return node.text
    if isinstance(node, CellRef):
        return node.name
    if isinstance(node, BinaryOp):
        return f"({format_formula(node.left)}{node.operator}{format_formula(node.right)})"
    if isinstance(node, FuncRange):
        return f"{node.name}({node.from_ref.name}:{node.to_ref.name})"
    raise TypeError(f"Not an expression node: {node!r}")
