from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Hashable, Iterable, List, Sequence, Set

from esper import World

from tilematch.components.grid import Cell, Grid, Position
from tilematch.factories.tokens import create_token, destroy_token

if TYPE_CHECKING:
    from tilematch.systems.match import Cluster


@dataclass(slots=True, frozen=True)
class Removal:
    column: int
    row: int
    entity: int
    color: Hashable


@dataclass(slots=True, frozen=True)
class GravityMove:
    entity: int
    source: Position
    target: Position

    @property
    def distance(self) -> int:
        return self.target[1] - self.source[1]


@dataclass(slots=True, frozen=True)
class Spawn:
    """A token created by refill.

    ``drop`` is the number of cells the token falls into its column from above
    the board, i.e. how many cells that column had to refill.
    """
    entity: int
    column: int
    row: int
    color: Hashable
    drop: int


def is_adjacent(a: Position, b: Position) -> bool:
    ac, ar = a
    bc, br = b
    return (abs(ac - bc) == 1 and ar == br) or (abs(ar - br) == 1 and ac == bc)


def swap(grid: Grid, x1: int, y1: int, x2: int, y2: int) -> None:
    """Exchange two cells in place. Adjacency is board policy and is not checked here."""
    grid.check(x1, y1)
    grid.check(x2, y2)
    cells = grid.cells
    cells[y1][x1], cells[y2][x2] = cells[y2][x2], cells[y1][x1]


def dry_swap(grid: Grid, x1: int, y1: int, x2: int, y2: int) -> Grid:
    """Return an independent copy of ``grid`` with the swap applied."""
    trial = grid.copy()
    swap(trial, x1, y1, x2, y2)
    return trial


def clear_clusters(world: World, grid: Grid, clusters: Iterable["Cluster"]) -> List[Removal]:
    """Empty every cell covered by ``clusters`` and destroy the tokens there.

    A cell shared by a horizontal and a vertical cluster is removed once.
    """
    removed: List[Removal] = []
    seen: Set[Position] = set()
    for cluster in clusters:
        for column, row in cluster.positions():
            if (column, row) in seen:
                continue
            seen.add((column, row))
            token = grid.get(column, row)
            if token is None:
                continue
            removed.append(Removal(column=column, row=row, entity=token.entity, color=token.color))
            grid.set(column, row, None)
            destroy_token(world, token)
    return removed


def column_shifts(grid: Grid) -> Dict[int, int]:
    """Number of empty cells per column, for columns that have any."""
    shifts: Dict[int, int] = {}
    for column, cells in enumerate(grid.transposed()):
        empty = sum(1 for cell in cells if cell is None)
        if empty:
            shifts[column] = empty
    return shifts


def _compact_column(cells: Sequence[Cell]) -> List[Cell]:
    survivors = [cell for cell in cells if cell is not None]
    return [None] * (len(cells) - len(survivors)) + survivors


def compact(grid: Grid) -> List[GravityMove]:
    """Let tokens fall to the bottom of their column, keeping their order.

    Returns one move per token whose row changed.
    """
    moves: List[GravityMove] = []
    for column, cells in enumerate(grid.transposed()):
        settled = _compact_column(cells)
        if settled == cells:
            continue
        source_rows = {cell.entity: row for row, cell in enumerate(cells) if cell is not None}
        for row, cell in enumerate(settled):
            grid.cells[row][column] = cell
            if cell is None:
                continue
            source_row = source_rows[cell.entity]
            if source_row != row:
                moves.append(GravityMove(entity=cell.entity, source=(column, source_row), target=(column, row)))
    return moves


def refill(world: World, grid: Grid, palette: Sequence[Hashable], rng: random.Random | None = None) -> List[Spawn]:
    """Fill every empty cell with a new token of a uniformly random palette color."""
    rng = rng or random.Random()
    colors = list(palette)
    shifts = column_shifts(grid)
    spawned: List[Spawn] = []
    for column, row in grid.empty_positions():
        token = create_token(world, rng.choice(colors))
        grid.set(column, row, token)
        spawned.append(Spawn(entity=token.entity, column=column, row=row, color=token.color, drop=shifts[column]))
    return spawned
