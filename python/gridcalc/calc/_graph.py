"""Dependency graph maintenance over grid snapshots.

Edges live on the cells themselves: ``dependencies`` (cells a formula reads)
and the reverse ``dependents``. Both sides must always agree.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from gridcalc._grid import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyDiff:
    stale: tuple[int, ...]  # cells that lost the changed cell as a dependent
    fresh: tuple[int, ...]  # cells that gained it


def diff_dependencies(old: Sequence[int], new: Sequence[int]) -> DependencyDiff:
    old_set, new_set = set(old), set(new)
    return DependencyDiff(
        stale=tuple(i for i in old if i not in new_set),
        fresh=tuple(i for i in new if i not in old_set),
    )


def apply_dependency_diff(grid: Grid, changed: int, diff: DependencyDiff) -> Grid:
    """Update reverse edges after cell *changed* swapped its dependencies.

    Both steps are idempotent: removing an absent dependent or adding a
    present one leaves the cell as is.
    """
    updated = {}
    for index in diff.stale:
        cell = updated.get(index, grid.cells[index])
        updated[index] = cell.without_dependent(changed)
    for index in diff.fresh:
        cell = updated.get(index, grid.cells[index])
        updated[index] = cell.with_dependent(changed)
    return grid.replace(*updated.values())


def check_consistency(grid: Grid) -> list[tuple[int, int]]:
    """Return every ``(dependency, dependent)`` pair missing one of its two edges."""
    broken: list[tuple[int, int]] = []
    for cell in grid:
        for dep in cell.dependencies:
            if cell.index not in grid.cells[dep].dependents:
                broken.append((dep, cell.index))
        for dependent in cell.dependents:
            if cell.index not in grid.cells[dependent].dependencies:
                broken.append((cell.index, dependent))
    return broken


def propagation_order(grid: Grid, root: int) -> list[int]:
    """All transitive dependents of *root*, each once, inputs before readers.

    BFS over ``dependents`` collects the affected cells, then Kahn's
    algorithm restricted to them gives the evaluation order. Cells stuck on a
    cycle are appended in discovery order so the walk always ends.
    """
    discovered: list[int] = []
    visited: set[int] = {root}
    queue: deque[int] = deque([root])

    while queue:
        index = queue.popleft()
        for dep in grid.cells[index].dependents:
            if dep not in visited:
                visited.add(dep)
                discovered.append(dep)
                queue.append(dep)

    if not discovered:
        return []

    affected = set(discovered)
    in_degree: dict[int, int] = {i: 0 for i in discovered}
    for index in discovered:
        for dep in grid.cells[index].dependents:
            if dep in affected:
                in_degree[dep] += 1

    ready: deque[int] = deque(i for i in discovered if in_degree[i] == 0)
    order: list[int] = []
    while ready:
        index = ready.popleft()
        order.append(index)
        for dep in grid.cells[index].dependents:
            if dep in affected:
                in_degree[dep] -= 1
                if in_degree[dep] == 0:
                    ready.append(dep)

    if len(order) != len(discovered):
        placed = set(order)
        stuck = [i for i in discovered if i not in placed]
        logger.warning("Circular dependency among cells %s during propagation", stuck)
        order.extend(stuck)

    return order
