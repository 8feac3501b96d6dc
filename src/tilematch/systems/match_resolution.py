from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from esper import World

from tilematch.components.board_state import BoardPhase
from tilematch.components.grid import Position
from tilematch.errors import UnsolvableConfiguration
from tilematch.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_NO_MOVES_LEFT,
    EVENT_REFILL_COMPLETED,
)
from tilematch.systems.board import BoardSystem
from tilematch.systems.board_ops import GravityMove, Removal, Spawn, clear_clusters, column_shifts, compact, refill
from tilematch.systems.match import Cluster, detect_clusters, has_movables
from tilematch.world import get_palette, get_random

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CascadeStep:
    """Everything one clear/compact/refill pass changed, in the order it happened."""
    depth: int
    clusters: List[Cluster] = field(default_factory=list)
    removed: List[Removal] = field(default_factory=list)
    moves: List[GravityMove] = field(default_factory=list)
    spawned: List[Spawn] = field(default_factory=list)
    shifts: Dict[int, int] = field(default_factory=dict)


class MatchResolutionSystem:
    """Runs the cascade: detect clusters, clear them, compact, refill, repeat.

    Each ``step`` is one synchronous pass so a renderer can animate between
    passes. Playability is only checked once the cascade has settled.
    """

    def __init__(self, world: World, event_bus: EventBus, board: BoardSystem, *, reset_on_stalemate: bool = False):
        self.world = world
        self.event_bus = event_bus
        self.board = board
        self.reset_on_stalemate = reset_on_stalemate

    def step(self) -> Optional[CascadeStep]:
        """Resolve one layer of clusters; ``None`` once nothing is left to clear."""
        grid = self.board.grid
        state = self.board.state
        clusters = detect_clusters(grid)
        if not clusters:
            if state.phase is BoardPhase.RESOLVING:
                self._settle()
            return None
        state.phase = BoardPhase.RESOLVING
        state.cascade_depth += 1
        depth = state.cascade_depth
        positions = _unique_positions(clusters)
        self.event_bus.emit(EVENT_MATCH_FOUND, clusters=clusters, positions=positions, depth=depth)

        removed = clear_clusters(self.world, grid, clusters)
        self.event_bus.emit(EVENT_MATCH_CLEARED, removed=removed, depth=depth)

        shifts = column_shifts(grid)
        moves = compact(grid)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, shifts=shifts, depth=depth)

        spawned = refill(self.world, grid, get_palette(self.world).colors, get_random(self.world))
        self.event_bus.emit(EVENT_REFILL_COMPLETED, spawned=spawned, depth=depth)

        result = CascadeStep(
            depth=depth,
            clusters=clusters,
            removed=removed,
            moves=moves,
            spawned=spawned,
            shifts=shifts,
        )
        logger.debug(
            "Cascade step %d: %d cluster(s), %d removed, %d fell, %d spawned",
            depth, len(clusters), len(removed), len(moves), len(spawned),
        )
        self.event_bus.emit(EVENT_CASCADE_STEP, step=result)
        return result

    def resolve(self) -> List[CascadeStep]:
        """Run steps until the board settles."""
        steps: List[CascadeStep] = []
        while True:
            result = self.step()
            if result is None:
                return steps
            steps.append(result)

    def _settle(self) -> None:
        state = self.board.state
        depth = state.cascade_depth
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)
        if has_movables(self.board.grid):
            state.phase = BoardPhase.IDLE
            return
        if self.reset_on_stalemate:
            logger.info("No moves left after cascade depth %d, respawning board", depth)
            try:
                self.board.reset(reason="stalemate_reset")
            except UnsolvableConfiguration:
                self._stalemate(depth)
                raise
            return
        logger.info("No moves left after cascade depth %d", depth)
        self._stalemate(depth)

    def _stalemate(self, depth: int) -> None:
        self.board.state.phase = BoardPhase.NO_MOVES_LEFT
        self.event_bus.emit(EVENT_NO_MOVES_LEFT, depth=depth)


def _unique_positions(clusters: List[Cluster]) -> List[Position]:
    positions: List[Position] = []
    seen = set()
    for cluster in clusters:
        for position in cluster.positions():
            if position not in seen:
                seen.add(position)
                positions.append(position)
    return positions
