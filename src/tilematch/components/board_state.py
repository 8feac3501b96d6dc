"""Board phase resource driving which commands the board accepts."""
from dataclasses import dataclass
from enum import Enum, auto


class BoardPhase(Enum):
    IDLE = auto()
    RESOLVING = auto()
    NO_MOVES_LEFT = auto()


@dataclass(slots=True)
class BoardState:
    """Singleton component stored next to the board's Grid."""
    phase: BoardPhase = BoardPhase.IDLE
    cascade_depth: int = 0
