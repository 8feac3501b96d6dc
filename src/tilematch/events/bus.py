from blinker import Signal
from typing import Callable, Dict


class EventBus:
    """Named blinker signals shared by the engine and its collaborators."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Callable) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so handlers defined inline (lambdas, bound methods of unreferenced systems) stay alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# REQUESTS (consumed by the engine)
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(col,row), dst=(col,row)
EVENT_BOARD_RESET_REQUEST = "board_reset_request"  # payload: none


# ============================================================================
# BOARD LIFECYCLE
# ============================================================================
EVENT_BOARD_RESET = "board_reset"                  # payload: reason=str, columns=int, rows=int, attempts=int
EVENT_NO_MOVES_LEFT = "no_moves_left"              # payload: depth=int


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(col,row), dst=(col,row)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(col,row), dst=(col,row)


# ============================================================================
# CASCADE
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: clusters=list[Cluster], positions=list[(col,row)], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: removed=list[Removal], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove], shifts=dict[int,int], depth=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: spawned=list[Spawn], depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: step=CascadeStep
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
