"""Error taxonomy raised by the rules engine.

All of these are raised before the grid is touched, so a caller that catches
one can keep using the board as it was.
"""


class TileMatchError(Exception):
    """Base class for every rules-engine error."""


class OutOfRange(TileMatchError, IndexError):
    """A coordinate lies outside the grid."""

    def __init__(self, column: int, row: int, columns: int, rows: int):
        super().__init__(
            f"({column}, {row}) is outside a {columns}x{rows} grid"
        )
        self.column = column
        self.row = row


class InvalidPalette(TileMatchError, ValueError):
    """Palette has too few (or duplicated) colors."""


class InvalidMove(TileMatchError, ValueError):
    """Swap rejected by board policy (not adjacent, or board not idle)."""


class UnsolvableConfiguration(TileMatchError, RuntimeError):
    """Board generation exceeded its retry budget."""
