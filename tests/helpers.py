from __future__ import annotations

import random
from typing import Hashable, Sequence

from esper import World

from tilematch.components.grid import Grid
from tilematch.components.token import Token
from tilematch.events.bus import EventBus
from tilematch.factories.tokens import grid_from_colors

PALETTE = ["a", "b", "c", "d"]


class ScriptedRandom(random.Random):
    """Seeded Random whose first ``choice`` calls return scripted values."""

    def __init__(self, script: Sequence[Hashable] = (), seed: int = 0):
        super().__init__(seed)
        self.script = list(script)

    def choice(self, seq):
        if self.script:
            return self.script.pop(0)
        return super().choice(seq)


def build_grid(world: World, layout: Sequence[Sequence[Hashable | None]]) -> Grid:
    return grid_from_colors(world, layout)


def record(bus: EventBus, name: str) -> list[dict]:
    """Collect every payload emitted for ``name``."""
    received: list[dict] = []
    bus.subscribe(name, lambda sender, **payload: received.append(payload))
    return received


def live_token_count(world: World) -> int:
    return len(list(world.get_component(Token)))
