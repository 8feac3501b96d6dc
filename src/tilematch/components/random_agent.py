from dataclasses import dataclass


@dataclass(slots=True)
class RandomAgent:
    """Marker component for a simple random-move player."""

    seed: int | None = None
