import random
from typing import Hashable, Iterable

from esper import World

from tilematch.components.palette import Palette
from tilematch.constants import DEFAULT_PALETTE


def create_world(
    *,
    palette: Iterable[Hashable] = DEFAULT_PALETTE,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> World:
    """Create the esper world holding the palette resource and, later, every token.

    ``rng`` wins over ``seed``; with neither, an unseeded generator is used.
    The palette is validated here so a bad palette fails before any board exists.
    """
    world = World()
    if rng is None:
        rng = random.Random(seed)
    setattr(world, "random", rng)

    world.create_entity(Palette(colors=list(palette)))
    return world


def get_palette(world: World) -> Palette:
    for _, palette in world.get_component(Palette):
        return palette
    raise RuntimeError("Palette resource not found")


def get_random(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if rng is None:
        raise RuntimeError("World random generator not found")
    return rng
