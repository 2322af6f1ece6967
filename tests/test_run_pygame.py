from __future__ import annotations

from collections import defaultdict

import pytest

pygame = pytest.importorskip("pygame")

from gmtris.game_state import GameState
from gmtris.movement import Direction, Movement
from gmtris.run_pygame import GameRunner, parse_movement
from gmtris.tetromino import Rotation


def _pressed(*keys: int):
    table = defaultdict(bool)
    for key in keys:
        table[key] = True
    return table


def test_no_keys_means_no_input() -> None:
    assert parse_movement(_pressed()) == Movement()


def test_direction_priority() -> None:
    assert parse_movement(_pressed(pygame.K_s, pygame.K_a)).direction is Direction.LEFT
    assert parse_movement(_pressed(pygame.K_w, pygame.K_d)).direction is Direction.UP


def test_rotation_keys() -> None:
    assert parse_movement(_pressed(pygame.K_j)).rotation is Rotation.CW
    assert parse_movement(_pressed(pygame.K_k)).rotation is Rotation.CCW2
    assert parse_movement(_pressed(pygame.K_h, pygame.K_j)).rotation is Rotation.CCW


def test_runner_catches_up_on_slow_frames() -> None:
    game = GameState(seed=0)
    runner = GameRunner(game)
    assert runner.state is game

    # A 50ms frame owes three ticks at 60 ticks per second.
    assert runner.advance(50.0, Movement()) == 3
    assert game.ticks == 3
    # The leftover fraction is carried into the next frame.
    assert runner.advance(8, Movement()) == 0
    assert runner.advance(9, Movement()) == 1
    assert game.ticks == 4


def test_stop_clears_running_flag() -> None:
    runner = GameRunner()
    runner.stop()
    assert not runner.running
