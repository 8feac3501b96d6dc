"""Headless random-play simulator.

Plays a number of seeded games with the random player and prints how long
each game lasted and how deep its cascades went. Useful for eyeballing how a
board size and palette behave before wiring them into a renderer.

Run with: ``python simulate.py --games 20 --columns 8 --rows 8 --colors 5``
"""
from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
import sys

# Ensure src/ is on the import path when run from a checkout.
SRC_PATH = Path(__file__).parent / "src"
if SRC_PATH.exists() and str(SRC_PATH) not in sys.path:
    sys.path.append(str(SRC_PATH))

from tilematch.constants import DEFAULT_PALETTE, GRID_COLUMNS, GRID_ROWS  # type: ignore
from tilematch.engine import Engine  # type: ignore
from tilematch.events.bus import EVENT_CASCADE_STEP, EVENT_NO_MOVES_LEFT  # type: ignore
from tilematch.systems.random_ai_system import RandomAISystem  # type: ignore


def play_game(columns: int, rows: int, colors: int, seed: int, max_moves: int) -> dict:
    engine = Engine(columns, rows, DEFAULT_PALETTE[:colors], seed=seed)
    player = RandomAISystem(engine.world, engine.event_bus, rng=random.Random(seed))
    depths: list[int] = []
    engine.event_bus.subscribe(EVENT_CASCADE_STEP, lambda sender, **payload: depths.append(payload["step"].depth))
    stuck = []
    engine.event_bus.subscribe(EVENT_NO_MOVES_LEFT, lambda sender, **payload: stuck.append(payload["depth"]))
    moves = 0
    while moves < max_moves and not engine.is_game_over:
        if player.take_turn(engine.grid) is None:
            break
        moves += 1
    return {
        "seed": seed,
        "moves": moves,
        "cascade_steps": len(depths),
        "max_depth": max(depths, default=0),
        "game_over": bool(stuck),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--columns", type=int, default=GRID_COLUMNS)
    parser.add_argument("--rows", type=int, default=GRID_ROWS)
    parser.add_argument("--colors", type=int, default=len(DEFAULT_PALETTE), choices=range(4, len(DEFAULT_PALETTE) + 1))
    parser.add_argument("--max-moves", type=int, default=200)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    results = [
        play_game(args.columns, args.rows, args.colors, args.seed + index, args.max_moves)
        for index in range(args.games)
    ]
    for result in results:
        print(
            f"seed={result['seed']:>4} moves={result['moves']:>4} "
            f"cascade_steps={result['cascade_steps']:>4} max_depth={result['max_depth']:>2} "
            f"game_over={result['game_over']}"
        )
    finished = sum(1 for result in results if result["game_over"])
    print(f"{finished}/{len(results)} games ran out of moves")


if __name__ == "__main__":
    main()
