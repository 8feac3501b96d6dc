import sys, os

import pytest

# Ensure the repo root and src are on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
for path in (ROOT, SRC):
    if path not in sys.path:
        sys.path.insert(0, path)

from tilematch.events.bus import EventBus
from tilematch.world import create_world
from tests.helpers import PALETTE, ScriptedRandom, build_grid, record

__all__ = [
    "PALETTE",
    "ScriptedRandom",
    "build_grid",
    "record",
]


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def world():
    return create_world(palette=PALETTE, seed=1234)
