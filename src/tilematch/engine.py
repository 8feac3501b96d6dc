"""Public entry point of the rules engine.

Wires the event bus, the esper world and the board systems together the same
way a game window would, and exposes the board as plain method calls::

    engine = Engine(8, 8, ["red", "green", "blue", "yellow", "purple"], seed=7)
    result = engine.attempt_swap(0, 0, 1, 0)
    for step in result.steps:
        ...  # animate step.removed, step.moves, step.spawned
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from tilematch.components.board_state import BoardPhase
from tilematch.components.grid import Cell, Grid, Position
from tilematch.components.token import Token
from tilematch.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_PALETTE
from tilematch.events.bus import EventBus, EVENT_TILE_SWAP_REQUEST
from tilematch.systems import board_ops
from tilematch.systems.board import BoardSystem
from tilematch.systems.board_ops import GravityMove, Removal, Spawn
from tilematch.systems.match import Cluster, Movable, detect_clusters, find_movables
from tilematch.systems.match_resolution import CascadeStep, MatchResolutionSystem
from tilematch.world import create_world, get_palette, get_random


@dataclass(slots=True)
class SwapResult:
    accepted: bool
    steps: List[CascadeStep] = field(default_factory=list)
    game_over: bool = False


class Engine:
    def __init__(
        self,
        columns: Optional[int] = None,
        rows: Optional[int] = None,
        palette: Iterable[Hashable] = DEFAULT_PALETTE,
        *,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        reset_on_stalemate: bool = False,
        layout: Optional[Sequence[Sequence[Hashable | None]]] = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.world = create_world(palette=palette, rng=rng, seed=seed)
        self.board = BoardSystem(
            self.world,
            self.event_bus,
            columns,
            rows,
            max_attempts=max_attempts,
            layout=layout,
        )
        self.resolution = MatchResolutionSystem(
            self.world,
            self.event_bus,
            self.board,
            reset_on_stalemate=reset_on_stalemate,
        )
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    @classmethod
    def from_layout(
        cls,
        layout: Sequence[Sequence[Hashable | None]],
        palette: Iterable[Hashable] = DEFAULT_PALETTE,
        **kwargs,
    ) -> Engine:
        """Build an engine over a fixed row-major color matrix, skipping generation checks."""
        return cls(palette=palette, layout=layout, **kwargs)

    # -- queries ---------------------------------------------------------

    @property
    def grid(self) -> Grid:
        return self.board.grid

    @property
    def columns(self) -> int:
        return self.grid.columns

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def phase(self) -> BoardPhase:
        return self.board.state.phase

    @property
    def is_game_over(self) -> bool:
        return self.phase is BoardPhase.NO_MOVES_LEFT

    @property
    def palette(self) -> List[Hashable]:
        return list(get_palette(self.world).colors)

    def get_field(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self.grid.snapshot()

    def get_colors(self) -> List[list]:
        return self.grid.colors()

    def get_clusters(self) -> List[Cluster]:
        return detect_clusters(self.grid)

    def get_movables(self) -> List[Movable]:
        return find_movables(self.grid)

    def tokens(self) -> List[Token]:
        return self.grid.tokens()

    def locate(self, entity: int) -> Position | None:
        return self.grid.locate(entity)

    # -- low-level commands ----------------------------------------------

    def swap(self, x1: int, y1: int, x2: int, y2: int) -> None:
        board_ops.swap(self.grid, x1, y1, x2, y2)

    def dry_swap(self, x1: int, y1: int, x2: int, y2: int) -> Grid:
        return board_ops.dry_swap(self.grid, x1, y1, x2, y2)

    def clear_clusters(self) -> List[Removal]:
        return board_ops.clear_clusters(self.world, self.grid, detect_clusters(self.grid))

    def compact(self) -> List[GravityMove]:
        return board_ops.compact(self.grid)

    def refill(self) -> List[Spawn]:
        return board_ops.refill(self.world, self.grid, get_palette(self.world).colors, get_random(self.world))

    # -- game loop -------------------------------------------------------

    def attempt_swap(self, x1: int, y1: int, x2: int, y2: int, *, resolve: bool = True) -> SwapResult:
        """Play a move.

        With ``resolve=False`` an accepted swap leaves the board RESOLVING and
        the caller drives the cascade with ``step()``.
        """
        accepted = self.board.attempt_swap((x1, y1), (x2, y2))
        if not accepted:
            return SwapResult(accepted=False)
        if not resolve:
            return SwapResult(accepted=True)
        steps = self.resolution.resolve()
        return SwapResult(accepted=True, steps=steps, game_over=self.is_game_over)

    def step(self) -> Optional[CascadeStep]:
        return self.resolution.step()

    def resolve(self) -> List[CascadeStep]:
        return self.resolution.resolve()

    def reset(self) -> None:
        self.board.reset(reason="reset")

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get("src")
        dst = kwargs.get("dst")
        if not src or not dst:
            return
        self.attempt_swap(src[0], src[1], dst[0], dst[1])
