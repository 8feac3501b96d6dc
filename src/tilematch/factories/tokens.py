from typing import Hashable, Sequence

from esper import World

from tilematch.components.grid import Grid
from tilematch.components.token import Token


def create_token(world: World, color: Hashable) -> Token:
    entity = world.create_entity()
    token = Token(entity=entity, color=color)
    world.add_component(entity, token)
    return token


def destroy_token(world: World, token: Token) -> None:
    if world.entity_exists(token.entity):
        world.delete_entity(token.entity, immediate=True)


def grid_from_colors(world: World, layout: Sequence[Sequence[Hashable | None]]) -> Grid:
    """Build a grid from a row-major color matrix; ``None`` entries stay empty."""
    rows = [
        [create_token(world, color) if color is not None else None for color in row]
        for row in layout
    ]
    return Grid.from_rows(rows)
