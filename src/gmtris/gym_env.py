"""Gymnasium-compatible wrapper around the frame-stepped simulation.

One environment step is one game tick.  The action picks the input held for
that tick:

  - ``action // 4`` selects the direction from ``ACTION_DIRECTIONS``
  - ``action % 4`` selects the rotation from ``ACTION_ROTATIONS``

Observation is a flat float32 vector:
  - board occupancy (21x10=210, row 0 is the floor)
  - active piece cells (210, zero outside the active phase)
  - next piece one-hot (7)

Reward is the score gained on the tick.  The episode terminates on game over.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import HEIGHT, WIDTH
from .game_state import GameState
from .movement import Direction, Movement
from .tetromino import PieceType, Rotation
from .utils import format_grid, render_grid


ACTION_DIRECTIONS = (None, Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)
ACTION_ROTATIONS = (None, Rotation.CW, Rotation.CCW, Rotation.CCW2)
NUM_ACTIONS = len(ACTION_DIRECTIONS) * len(ACTION_ROTATIONS)

_PIECE_TYPES = list(PieceType)


def action_to_movement(action: int) -> Movement:
    """Decode a discrete action into a :class:`Movement`.

    Raises:
        ValueError: If ``action`` is outside ``[0, NUM_ACTIONS)``.
    """

    if not 0 <= action < NUM_ACTIONS:
        raise ValueError(f"Invalid action: {action}")
    direction, rotation = divmod(int(action), len(ACTION_ROTATIONS))
    return Movement(direction=ACTION_DIRECTIONS[direction], rotation=ACTION_ROTATIONS[rotation])


class TetrisFrameGymEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60,
    }

    def __init__(
        self,
        *,
        level: int = 0,
        max_steps: Optional[int] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._level = level
        self._max_steps = max_steps
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(NUM_ACTIONS)
        self._obs_size = 2 * HEIGHT * WIDTH + len(_PIECE_TYPES)
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(self._obs_size,), dtype=np.float32
        )
        self._game: Optional[GameState] = None
        self._steps = 0

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        game_seed = int(self.np_random.integers(0, 2**31 - 1))
        self._game = GameState(seed=game_seed, level=self._level)
        self._steps = 0
        return self._observation(), self._info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        if self._game is None:
            raise RuntimeError("Call reset() before step()")
        score_before = self._game.score
        self._game.step(action_to_movement(action))
        self._steps += 1
        reward = float(self._game.score - score_before)
        terminated = self._game.game_over
        truncated = self._max_steps is not None and self._steps >= self._max_steps
        return self._observation(), reward, terminated, truncated, self._info()

    def render(self):
        if self._game is None:
            return ""
        return format_grid(render_grid(self._game.board, self._game.active_piece))

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def _observation(self) -> np.ndarray:
        assert self._game is not None
        board = (self._game.board.grid != 0).astype(np.float32).reshape(-1)
        active = np.zeros((HEIGHT, WIDTH), dtype=np.float32)
        piece = self._game.active_piece
        if piece is not None:
            for row, col in piece.blocks():
                if 0 <= row < HEIGHT and 0 <= col < WIDTH:
                    active[row, col] = 1.0
        upcoming = np.zeros((len(_PIECE_TYPES),), dtype=np.float32)
        upcoming[_PIECE_TYPES.index(self._game.next_piece)] = 1.0
        return np.concatenate([board, active.reshape(-1), upcoming], dtype=np.float32)

    def _info(self) -> Dict:
        assert self._game is not None
        snap = self._game.snapshot()
        return {
            "phase": snap.phase,
            "level": snap.level,
            "score": snap.score,
            "grade": str(snap.grade),
            "lines_cleared": self._game.last_lines_cleared,
        }
