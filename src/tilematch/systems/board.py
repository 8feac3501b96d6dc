from __future__ import annotations

import logging
from typing import Hashable, List, Optional, Sequence

from esper import World

from tilematch.components.board_state import BoardPhase, BoardState
from tilematch.components.grid import Grid, Position
from tilematch.constants import DEFAULT_MAX_ATTEMPTS, GRID_COLUMNS, GRID_ROWS
from tilematch.errors import InvalidMove, UnsolvableConfiguration
from tilematch.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_BOARD_RESET_REQUEST,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_VALID,
)
from tilematch.factories.tokens import destroy_token, grid_from_colors
from tilematch.systems.board_ops import is_adjacent, swap
from tilematch.systems.match import has_clusters, has_movables
from tilematch.world import get_palette, get_random

logger = logging.getLogger(__name__)

Layout = List[List[Hashable]]


class BoardSystem:
    """Owns the board entity: its Grid, its BoardState and the swap policy."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        columns: Optional[int] = None,
        rows: Optional[int] = None,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        layout: Optional[Sequence[Sequence[Hashable | None]]] = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.max_attempts = max_attempts
        if layout is not None:
            grid = grid_from_colors(world, layout)
            if (columns is not None and columns != grid.columns) or (rows is not None and rows != grid.rows):
                self._discard(grid)
                raise ValueError(
                    f"Layout is {grid.columns}x{grid.rows} but {columns}x{rows} was requested"
                )
        else:
            grid = Grid(
                columns=GRID_COLUMNS if columns is None else columns,
                rows=GRID_ROWS if rows is None else rows,
            )
        self.board_entity = self.world.create_entity(grid, BoardState())
        self.event_bus.subscribe(EVENT_BOARD_RESET_REQUEST, self.on_reset_request)
        if layout is None:
            self.reset(reason="initialize")
        else:
            self.event_bus.emit(EVENT_BOARD_RESET, reason="layout", columns=grid.columns, rows=grid.rows, attempts=0)

    @property
    def grid(self) -> Grid:
        return self.world.component_for_entity(self.board_entity, Grid)

    @property
    def state(self) -> BoardState:
        return self.world.component_for_entity(self.board_entity, BoardState)

    def on_reset_request(self, sender, **kwargs):
        self.reset(reason=kwargs.get("reason", "request"))

    def reset(self, reason: str = "reset") -> int:
        """Replace every token with a fresh layout that has no clusters and at least one move.

        Candidates are built off-board, so the current board survives a failed
        reset untouched. Returns the number of attempts used.
        """
        grid = self.grid
        rng = get_random(self.world)
        palette = get_palette(self.world).colors
        candidate: Grid | None = None
        attempts = 0
        for attempts in range(1, self.max_attempts + 1):
            candidate = grid_from_colors(self.world, self._generate_layout(grid.columns, grid.rows, palette, rng))
            if not has_clusters(candidate) and has_movables(candidate):
                break
            logger.debug("Board candidate %d rejected", attempts)
            self._discard(candidate)
            candidate = None
        if candidate is None:
            logger.warning(
                "Gave up generating a playable %dx%d board after %d attempts",
                grid.columns, grid.rows, self.max_attempts,
            )
            raise UnsolvableConfiguration(
                f"Unable to generate a {grid.columns}x{grid.rows} board without matches "
                f"and with a valid swap in {self.max_attempts} attempts"
            )
        self._discard(grid)
        grid.cells = candidate.cells
        state = self.state
        state.phase = BoardPhase.IDLE
        state.cascade_depth = 0
        logger.info("Board reset (%s) after %d attempt(s)", reason, attempts)
        self.event_bus.emit(EVENT_BOARD_RESET, reason=reason, columns=grid.columns, rows=grid.rows, attempts=attempts)
        return attempts

    @staticmethod
    def _generate_layout(columns: int, rows: int, palette: Sequence[Hashable], rng) -> Layout:
        # A color that would complete a triple with the two cells to the left
        # or the two cells above is excluded; with four colors something is always left.
        layout: Layout = []
        for row in range(rows):
            values: List[Hashable] = []
            for column in range(columns):
                available = list(palette)
                if column >= 2 and values[column - 1] == values[column - 2]:
                    available = [color for color in available if color != values[column - 1]]
                if row >= 2 and layout[row - 1][column] == layout[row - 2][column]:
                    available = [color for color in available if color != layout[row - 1][column]]
                values.append(rng.choice(available))
            layout.append(values)
        return layout

    def _discard(self, grid: Grid) -> None:
        for token in grid.tokens():
            destroy_token(self.world, token)

    def attempt_swap(self, src: Position, dst: Position) -> bool:
        """Swap two adjacent tokens if that produces a cluster.

        Every check runs before the grid is touched. A swap that produces no
        cluster is swapped back and reported as rejected (``False``); an
        accepted swap leaves the board RESOLVING until the cascade settles.
        """
        grid = self.grid
        grid.check(*src)
        grid.check(*dst)
        if not is_adjacent(src, dst):
            raise InvalidMove(f"{src} and {dst} are not orthogonally adjacent")
        state = self.state
        if state.phase is not BoardPhase.IDLE:
            raise InvalidMove(f"Board does not accept swaps while {state.phase.name}")
        swap(grid, *src, *dst)
        if not has_clusters(grid):
            swap(grid, *src, *dst)
            logger.debug("Swap %s <-> %s rejected, no match", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            return False
        state.phase = BoardPhase.RESOLVING
        state.cascade_depth = 0
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        return True
