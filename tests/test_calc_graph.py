"""Tests for gridcalc.calc dependency diffing and propagation ordering."""

from __future__ import annotations

import logging

import pytest

from gridcalc._grid import Cell, Grid
from gridcalc.calc._graph import (
    DependencyDiff,
    apply_dependency_diff,
    check_consistency,
    diff_dependencies,
    propagation_order,
)


def _wired(num_cells: int, edges: dict[int, tuple[int, ...]]) -> Grid:
    """Grid where ``edges[reader] = (cells it reads, ...)``, both sides filled in."""
    dependents: dict[int, list[int]] = {i: [] for i in range(num_cells)}
    for reader, deps in edges.items():
        for dep in deps:
            dependents[dep].append(reader)
    cells = tuple(
        Cell(i, dependencies=edges.get(i, ()), dependents=tuple(dependents[i]))
        for i in range(num_cells)
    )
    return Grid(cells, num_cols=num_cells)


class TestDiff:
    def test_stale_and_fresh(self) -> None:
        diff = diff_dependencies((0, 1, 2), (2, 3))
        assert diff == DependencyDiff(stale=(0, 1), fresh=(3,))

    def test_identical(self) -> None:
        assert diff_dependencies((4, 5), (5, 4)) == DependencyDiff((), ())

    def test_from_empty(self) -> None:
        assert diff_dependencies((), (1,)) == DependencyDiff((), (1,))


class TestApplyDiff:
    def test_adds_and_removes_dependents(self) -> None:
        grid = _wired(4, {3: (0, 1)})
        updated = apply_dependency_diff(grid, 3, DependencyDiff(stale=(0,), fresh=(2,)))
        assert updated[0].dependents == ()
        assert updated[1].dependents == (3,)
        assert updated[2].dependents == (3,)

    def test_idempotent(self) -> None:
        grid = _wired(3, {2: (0,)})
        diff = DependencyDiff(stale=(1,), fresh=(0,))
        once = apply_dependency_diff(grid, 2, diff)
        twice = apply_dependency_diff(once, 2, diff)
        assert once == twice
        assert twice[0].dependents == (2,)
        assert twice[1].dependents == ()

    def test_input_grid_untouched(self) -> None:
        grid = _wired(3, {2: (0,)})
        apply_dependency_diff(grid, 2, DependencyDiff(stale=(0,), fresh=(1,)))
        assert grid[0].dependents == (2,)
        assert grid[1].dependents == ()

    def test_empty_diff_returns_same_grid(self) -> None:
        grid = _wired(2, {})
        assert apply_dependency_diff(grid, 0, DependencyDiff((), ())) is grid


class TestConsistency:
    def test_consistent(self) -> None:
        assert check_consistency(_wired(4, {1: (0,), 2: (0, 1), 3: (2,)})) == []

    def test_missing_dependent(self) -> None:
        grid = Grid((Cell(0), Cell(1, dependencies=(0,))), num_cols=2)
        assert check_consistency(grid) == [(0, 1)]

    def test_missing_dependency(self) -> None:
        grid = Grid((Cell(0, dependents=(1,)), Cell(1)), num_cols=2)
        assert check_consistency(grid) == [(0, 1)]


class TestPropagationOrder:
    def test_no_dependents(self) -> None:
        assert propagation_order(_wired(3, {}), 0) == []

    def test_linear_chain(self) -> None:
        """0 <- 1 <- 2 <- 3"""
        grid = _wired(4, {1: (0,), 2: (1,), 3: (2,)})
        assert propagation_order(grid, 0) == [1, 2, 3]

    def test_diamond(self) -> None:
        """0 feeds 1 and 2, both feed 3."""
        grid = _wired(4, {1: (0,), 2: (0,), 3: (1, 2)})
        order = propagation_order(grid, 0)
        assert sorted(order) == [1, 2, 3]
        assert order[-1] == 3

    def test_uneven_diamond(self) -> None:
        """3 reads 0 directly and through 1 -> 2; it must still come last."""
        grid = _wired(4, {1: (0,), 2: (1,), 3: (0, 2)})
        assert propagation_order(grid, 0) == [1, 2, 3]

    def test_unrelated_cells_excluded(self) -> None:
        grid = _wired(4, {1: (0,), 3: (2,)})
        assert propagation_order(grid, 0) == [1]

    def test_starts_mid_chain(self) -> None:
        grid = _wired(4, {1: (0,), 2: (1,), 3: (2,)})
        assert propagation_order(grid, 2) == [3]

    def test_cycle_terminates(self, caplog: pytest.LogCaptureFixture) -> None:
        """1 and 2 read each other, which edits should never allow."""
        grid = _wired(3, {1: (0, 2), 2: (1,)})
        with caplog.at_level(logging.WARNING, logger="gridcalc.calc._graph"):
            order = propagation_order(grid, 0)
        assert sorted(order) == [1, 2]
        assert "Circular dependency" in caplog.text

    def test_cycle_through_root(self) -> None:
        grid = _wired(2, {0: (1,), 1: (0,)})
        assert propagation_order(grid, 0) == [1]
