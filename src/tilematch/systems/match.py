"""Cluster detection and move enumeration.

Both passes treat the board row by row. Vertical work is done by running the
same row scan over the transposed cells, so horizontal and vertical results
follow one ordering rule: horizontal clusters first (top to bottom, left to
right), then vertical clusters (left to right, top to bottom).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, TypeVar

from tilematch.components.grid import Cell, Grid, Position
from tilematch.constants import MIN_RUN_LENGTH
from tilematch.systems.board_ops import dry_swap

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Cluster:
    """A maximal straight run of same-colored tokens, anchored at its top-left cell."""
    column: int
    row: int
    length: int
    horizontal: bool

    def positions(self) -> List[Position]:
        if self.horizontal:
            return [(self.column + offset, self.row) for offset in range(self.length)]
        return [(self.column, self.row + offset) for offset in range(self.length)]


@dataclass(slots=True, frozen=True)
class Movable:
    """Adjacent pair whose swap produces at least one cluster; (x1, y1) is the left/upper cell."""
    x1: int
    y1: int
    x2: int
    y2: int

    @property
    def src(self) -> Position:
        return self.x1, self.y1

    @property
    def dst(self) -> Position:
        return self.x2, self.y2


def transpose(matrix: Sequence[Sequence[T]]) -> List[List[T]]:
    """Return a new matrix with rows and columns exchanged; the input is left as is."""
    if not matrix:
        return []
    return [[line[index] for line in matrix] for index in range(len(matrix[0]))]


def _matches(cell: Cell, other: Cell) -> bool:
    # Empty never matches anything, not even another empty cell.
    return cell is not None and other is not None and cell.color == other.color


def _line_clusters(lines: Sequence[Sequence[Cell]], horizontal: bool) -> Iterator[Cluster]:
    for line_index, line in enumerate(lines):
        run = 1
        for index, cell in enumerate(line):
            following = line[index + 1] if index + 1 < len(line) else None
            if _matches(cell, following):
                run += 1
                continue
            if run >= MIN_RUN_LENGTH:
                start = index + 1 - run
                if horizontal:
                    yield Cluster(column=start, row=line_index, length=run, horizontal=True)
                else:
                    yield Cluster(column=line_index, row=start, length=run, horizontal=False)
            run = 1


def _iter_clusters(grid: Grid) -> Iterator[Cluster]:
    yield from _line_clusters(grid.cells, horizontal=True)
    yield from _line_clusters(grid.transposed(), horizontal=False)


def detect_clusters(grid: Grid) -> List[Cluster]:
    """Return every cluster on the grid, horizontal ones first."""
    return list(_iter_clusters(grid))


def has_clusters(grid: Grid) -> bool:
    return any(True for _ in _iter_clusters(grid))


def _trial_pairs(grid: Grid) -> Iterator[Tuple[Position, Position]]:
    # Horizontal pass row-major, vertical pass column-major; each adjacency once.
    for row in range(grid.rows):
        for column in range(grid.columns - 1):
            yield (column, row), (column + 1, row)
    for column in range(grid.columns):
        for row in range(grid.rows - 1):
            yield (column, row), (column, row + 1)


def _iter_movables(grid: Grid) -> Iterator[Movable]:
    for (x1, y1), (x2, y2) in _trial_pairs(grid):
        trial = dry_swap(grid, x1, y1, x2, y2)
        if has_clusters(trial):
            yield Movable(x1=x1, y1=y1, x2=x2, y2=y2)


def find_movables(grid: Grid) -> List[Movable]:
    """Enumerate adjacent swaps that would produce a cluster.

    Every pair is checked by swapping it on a copy of the grid and rescanning
    the whole copy, so a swap that only shuffles tokens without completing a
    run is never reported.
    """
    return list(_iter_movables(grid))


def has_movables(grid: Grid) -> bool:
    return any(True for _ in _iter_movables(grid))
