from __future__ import annotations

import random
from typing import Optional

from esper import World

from tilematch.components.grid import Grid
from tilematch.components.random_agent import RandomAgent
from tilematch.events.bus import EventBus, EVENT_TILE_SWAP_REQUEST
from tilematch.systems.match import Movable, find_movables


class RandomAISystem:
    """Plays a uniformly random valid swap for the entity marked with RandomAgent."""

    def __init__(self, world: World, event_bus: EventBus, rng: Optional[random.Random] = None) -> None:
        self.world = world
        self.event_bus = event_bus
        self.agent_entity = self._agent_entity()
        if rng is None:
            agent = self.world.component_for_entity(self.agent_entity, RandomAgent)
            rng = random.Random(agent.seed)
        self.random = rng

    def _agent_entity(self) -> int:
        for entity, _ in self.world.get_component(RandomAgent):
            return entity
        return self.world.create_entity(RandomAgent())

    def choose_move(self, grid: Grid) -> Optional[Movable]:
        movables = find_movables(grid)
        if not movables:
            return None
        return self.random.choice(movables)

    def take_turn(self, grid: Grid) -> Optional[Movable]:
        """Request the chosen swap over the bus; returns the move or ``None`` when stuck."""
        move = self.choose_move(grid)
        if move is not None:
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=move.src, dst=move.dst)
        return move
