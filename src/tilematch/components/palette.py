from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable, List

from tilematch.constants import MIN_PALETTE_SIZE
from tilematch.errors import InvalidPalette


@dataclass(slots=True)
class Palette:
    """Colors new tokens are drawn from.

    Lives on the single registry entity created by ``create_world``.
    """
    colors: List[Hashable] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.colors = validate_palette(self.colors)


def validate_palette(colors: Iterable[Hashable]) -> List[Hashable]:
    colors = list(colors)
    try:
        distinct = len(set(colors))
    except TypeError as exc:
        raise InvalidPalette(f"Palette colors must be hashable, got {colors!r}") from exc
    if distinct != len(colors):
        raise InvalidPalette(f"Palette colors must be distinct, got {colors!r}")
    if len(colors) < MIN_PALETTE_SIZE:
        raise InvalidPalette(
            f"Palette needs at least {MIN_PALETTE_SIZE} colors, got {len(colors)}"
        )
    return colors
