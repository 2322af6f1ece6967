"""Headless demo for the simulation core.

Run with: `python -m gmtris`

Plays a game with a seeded stream of random inputs and prints the final board
plus the player's stats.  Pass ``--help`` for options.
"""

from __future__ import annotations

import argparse
import logging
import random
from typing import Iterator, Optional

from . import GameState, render_grid
from .movement import Direction, Movement
from .tetromino import Rotation
from .utils import format_grid


LOGGER = logging.getLogger(__name__)

_DIRECTIONS: list[Optional[Direction]] = [None, None, Direction.LEFT, Direction.RIGHT, Direction.DOWN]
_ROTATIONS: list[Optional[Rotation]] = [None, None, None, Rotation.CW, Rotation.CCW]


def random_inputs(seed: int, hold: int = 4) -> Iterator[Movement]:
    """Yield random movements, each held for ``hold`` ticks."""

    rng = random.Random(seed)
    while True:
        movement = Movement(direction=rng.choice(_DIRECTIONS), rotation=rng.choice(_ROTATIONS))
        for _ in range(hold):
            yield movement


def simulate(ticks: int, seed: int, level: int = 0) -> GameState:
    game = GameState(seed=seed, level=level)
    inputs = random_inputs(seed + 1)
    for _ in range(ticks):
        game.step(next(inputs))
        if game.game_over:
            LOGGER.info("Game over after %d ticks", game.ticks)
            break
    return game


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--ticks", type=int, default=3600, help="Number of ticks to simulate.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for pieces and inputs.")
    parser.add_argument("--level", type=int, default=0, help="Starting level.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    game = simulate(args.ticks, args.seed, args.level)
    snap = game.snapshot()
    print(format_grid(render_grid(game.board, snap.active)))
    print(
        f"ticks={game.ticks} phase={snap.phase} level={snap.level} "
        f"score={snap.score} grade={snap.grade} next={snap.next_piece.value}"
    )


if __name__ == "__main__":
    main()
