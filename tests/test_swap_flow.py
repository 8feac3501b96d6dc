import pytest

from tilematch.components.board_state import BoardPhase
from tilematch.engine import Engine
from tilematch.errors import InvalidMove, OutOfRange
from tilematch.events.bus import (
    EventBus,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from tests.helpers import PALETTE, ScriptedRandom, record

DISTINCT = [
    [1, 2, 3, 4],
    [5, 6, 7, 8],
    [9, 10, 11, 12],
    [13, 14, 15, 16],
]


def test_swap_without_match_is_reverted():
    bus = EventBus()
    engine = Engine.from_layout(DISTINCT, PALETTE, event_bus=bus)
    invalid = record(bus, EVENT_TILE_SWAP_INVALID)
    before = engine.get_field()
    result = engine.attempt_swap(0, 0, 1, 0)
    assert not result.accepted
    assert result.steps == []
    assert engine.get_field() == before
    assert engine.phase is BoardPhase.IDLE
    assert invalid == [{"src": (0, 0), "dst": (1, 0)}]


def test_rejected_swap_round_trip_on_generated_board():
    engine = Engine(6, 6, PALETTE, seed=21)
    movable_pairs = {(move.src, move.dst) for move in engine.get_movables()}
    for column in range(engine.columns - 1):
        pair = ((column, 0), (column + 1, 0))
        if pair in movable_pairs:
            continue
        before = engine.get_field()
        assert not engine.attempt_swap(column, 0, column + 1, 0).accepted
        assert engine.get_field() == before


def test_non_adjacent_swap_is_rejected_before_mutation():
    engine = Engine.from_layout(DISTINCT, PALETTE)
    before = engine.get_field()
    for coords in [(0, 0, 2, 0), (0, 0, 1, 1), (1, 1, 1, 1)]:
        with pytest.raises(InvalidMove):
            engine.attempt_swap(*coords)
    assert engine.get_field() == before


def test_out_of_range_swap_is_rejected_before_mutation():
    engine = Engine.from_layout(DISTINCT, PALETTE)
    before = engine.get_field()
    with pytest.raises(OutOfRange):
        engine.attempt_swap(3, 0, 4, 0)
    with pytest.raises(OutOfRange):
        engine.attempt_swap(0, -1, 0, 0)
    assert engine.get_field() == before


def test_valid_swap_emits_and_resolves():
    bus = EventBus()
    layout = [
        [1, 2, 3, 4],
        [5, 6, 7, 8],
        ["a", "a", 9, "a"],
    ]
    engine = Engine.from_layout(layout, PALETTE, event_bus=bus, rng=ScriptedRandom(["b", "c", "d"]))
    valid = record(bus, EVENT_TILE_SWAP_VALID)
    result = engine.attempt_swap(2, 2, 3, 2)
    assert result.accepted
    assert valid == [{"src": (2, 2), "dst": (3, 2)}]
    assert len(result.steps) == 1
    assert engine.get_clusters() == []
    assert len(engine.tokens()) == 12


def test_swaps_rejected_while_resolving():
    layout = [
        [1, 2, 3, 4],
        [5, 6, 7, 8],
        ["a", "a", 9, "a"],
    ]
    engine = Engine.from_layout(layout, PALETTE, rng=ScriptedRandom(["b", "c", "d"]))
    result = engine.attempt_swap(2, 2, 3, 2, resolve=False)
    assert result.accepted and result.steps == []
    assert engine.phase is BoardPhase.RESOLVING
    before = engine.get_field()
    with pytest.raises(InvalidMove):
        engine.attempt_swap(0, 0, 1, 0)
    assert engine.get_field() == before


def test_swap_request_over_bus():
    bus = EventBus()
    layout = [
        [1, 2, 3, 4],
        [5, 6, 7, 8],
        ["a", "a", 9, "a"],
    ]
    engine = Engine.from_layout(layout, PALETTE, event_bus=bus, rng=ScriptedRandom(["b", "c", "d"]))
    moved = engine.grid.get(3, 2)
    bus.emit(EVENT_TILE_SWAP_REQUEST, src=(2, 2), dst=(3, 2))
    assert not engine.world.entity_exists(moved.entity), "Matched token should be cleared by the request"
    assert engine.get_clusters() == []
