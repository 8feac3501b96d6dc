from dataclasses import dataclass
from typing import Hashable


@dataclass(slots=True, frozen=True)
class Token:
    """A colored piece living on the board.

    ``entity`` is the esper entity that owns this component; it stays the same
    while the token is swapped or falls, so renderers can follow a piece across
    a cascade. Only ``color`` takes part in matching.
    """
    entity: int
    color: Hashable
