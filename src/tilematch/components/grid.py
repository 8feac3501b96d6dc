from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from tilematch.components.token import Token
from tilematch.errors import OutOfRange

Cell = Optional[Token]
Position = Tuple[int, int]


@dataclass(slots=True)
class Grid:
    """Rectangular token store addressed by ``(column, row)``.

    Cells are kept row-major: ``cells[row][column]``. ``None`` marks an empty
    cell. Dimensions are fixed for the lifetime of the grid.
    """
    columns: int
    rows: int
    cells: List[List[Cell]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.columns <= 0 or self.rows <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.columns}x{self.rows}")
        if not self.cells:
            self.cells = [[None] * self.columns for _ in range(self.rows)]
        elif len(self.cells) != self.rows or any(len(row) != self.columns for row in self.cells):
            raise ValueError("cells do not match the declared grid dimensions")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> Grid:
        if not rows or not rows[0]:
            raise ValueError("Grid needs at least one row and one column")
        return cls(columns=len(rows[0]), rows=len(rows), cells=[list(row) for row in rows])

    def in_bounds(self, column: int, row: int) -> bool:
        return 0 <= column < self.columns and 0 <= row < self.rows

    def check(self, column: int, row: int) -> None:
        if not self.in_bounds(column, row):
            raise OutOfRange(column, row, self.columns, self.rows)

    def get(self, column: int, row: int) -> Cell:
        self.check(column, row)
        return self.cells[row][column]

    def set(self, column: int, row: int, cell: Cell) -> None:
        self.check(column, row)
        self.cells[row][column] = cell

    def copy(self) -> Grid:
        # Tokens are immutable, so only the row lists need duplicating.
        return Grid(columns=self.columns, rows=self.rows, cells=[list(row) for row in self.cells])

    def transposed(self) -> List[List[Cell]]:
        """Return the cells column-major (one list per column)."""
        return [[row[column] for row in self.cells] for column in range(self.columns)]

    def colors(self) -> List[list]:
        return [[cell.color if cell is not None else None for cell in row] for row in self.cells]

    def snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        return tuple(tuple(row) for row in self.cells)

    def positions(self) -> Iterator[Position]:
        for row in range(self.rows):
            for column in range(self.columns):
                yield column, row

    def tokens(self) -> List[Token]:
        return [cell for row in self.cells for cell in row if cell is not None]

    def empty_positions(self) -> List[Position]:
        return [(column, row) for column, row in self.positions() if self.cells[row][column] is None]

    def locate(self, entity: int) -> Position | None:
        for column, row in self.positions():
            cell = self.cells[row][column]
            if cell is not None and cell.entity == entity:
                return column, row
        return None
