"""Frame-stepped game state machine.

Every call to :meth:`GameState.step` consumes the input sampled for one tick
and moves the simulation from one of three phases to the next:

``WaitingState``
    The gap between a lock and the next spawn.
``ActiveState``
    A piece is under player control.
``GameOverState``
    A spawned piece did not fit.  Nothing happens any more except the
    flash counter.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, ClassVar, Iterable, Optional, Union
import logging
import random
import time

import numpy as np

from .board import Board, Grid
from .gravity import fall
from .movement import (
    NO_INPUT,
    Direction,
    Movement,
    apply_movement,
    is_legal,
    update_charge,
)
from .randomizer import RandomSource, Randomizer
from .scoring import (
    Checkpoint,
    GMCondition,
    Grade,
    PlayerRecord,
    next_level,
    record_checkpoint,
    update_record,
)
from .tetromino import Piece, PieceType


LOGGER = logging.getLogger(__name__)

FPS = 60
# Ticks between a lock and the next spawn.
ARE_FRAMES = 30
# Same, when the lock cleared at least one line.
LINE_CLEAR_FRAMES = 41
LOCK_DELAY_FRAMES = 30
# Rows greyed out per this many game-over ticks.
FLASH_FRAMES_PER_ROW = 10


@dataclass(frozen=True)
class ActiveState:
    phase: ClassVar[str] = "active"

    piece: Piece
    lock_frames: int = 0
    das_frames: int = 0
    down_frames: int = 0
    gravity_frames: int = 0


@dataclass(frozen=True)
class WaitingState:
    phase: ClassVar[str] = "waiting"

    waiting_frames: int = 0
    das_frames: int = 0
    did_clear_line: bool = False


@dataclass(frozen=True)
class GameOverState:
    phase: ClassVar[str] = "game_over"

    flash_frames: int = 0


State = Union[ActiveState, WaitingState, GameOverState]


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the game after a tick, for renderers."""

    grid: Grid
    active: Optional[Piece]
    next_piece: PieceType
    level: int
    score: int
    grade: Grade
    combo: int
    lock_delay_remaining: Optional[int]
    phase: str
    greyed_rows: int = 0


def is_level_stop(level: int) -> bool:
    """Return ``True`` if spawning at ``level`` does not advance it."""

    return level == 998 or level % 100 == 99


class GameState:
    """Mutable container for one game and its tick function."""

    def __init__(
        self,
        *,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
        level: int = 0,
    ) -> None:
        self._clock = clock or time.monotonic
        self.board = Board()
        self.level = level
        self.randomizer = Randomizer(rng if rng is not None else random.Random(seed), level=level)
        self.combo = 0
        self.record = PlayerRecord(start_time=self._clock())
        self.state: State = WaitingState()
        self.movement: Movement = NO_INPUT
        self.ticks = 0
        self.last_lines_cleared = 0
        self.last_score_delta = 0

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    @property
    def game_over(self) -> bool:
        return isinstance(self.state, GameOverState)

    @property
    def active_piece(self) -> Optional[Piece]:
        if isinstance(self.state, ActiveState):
            return self.state.piece
        return None

    @property
    def next_piece(self) -> PieceType:
        return self.randomizer.next_piece

    @property
    def score(self) -> int:
        return self.record.score

    @property
    def grade(self) -> Grade:
        return self.record.grade

    def snapshot(self) -> Snapshot:
        state = self.state
        lock_delay = None
        if isinstance(state, ActiveState):
            lock_delay = LOCK_DELAY_FRAMES - state.lock_frames
        greyed = 0
        if isinstance(state, GameOverState):
            greyed = min(self.board.height, state.flash_frames // FLASH_FRAMES_PER_ROW)
        return Snapshot(
            grid=np.copy(self.board.grid),
            active=self.active_piece,
            next_piece=self.next_piece,
            level=self.level,
            score=self.record.score,
            grade=self.record.grade,
            combo=self.combo,
            lock_delay_remaining=lock_delay,
            phase=state.phase,
            greyed_rows=greyed,
        )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def step(self, movement: Movement = NO_INPUT) -> State:
        """Advance the game by one tick using ``movement`` as this tick's input."""

        previous = self.movement
        self.movement = movement
        self.state = self._advance(self.state, previous, movement)
        self.ticks += 1
        return self.state

    def run(self, movements: Iterable[Movement]) -> State:
        """Step once per element of ``movements`` and return the final state."""

        for movement in movements:
            self.step(movement)
        return self.state

    def record_checkpoint(self, checkpoint: Checkpoint | str) -> GMCondition:
        """Snapshot score and elapsed time for a GM checkpoint."""

        condition = record_checkpoint(self.record, checkpoint, self._clock())
        LOGGER.info(
            "Checkpoint %s: score=%d time=%.1fs grade=%s",
            Checkpoint(checkpoint).value,
            condition.score,
            condition.time,
            self.record.grade,
        )
        return condition

    # ------------------------------------------------------------------
    # Phase handlers
    # ------------------------------------------------------------------
    def _advance(self, state: State, previous: Movement, current: Movement) -> State:
        if isinstance(state, ActiveState):
            return self._tick_active(state, previous, current)
        if isinstance(state, WaitingState):
            return self._tick_waiting(state, previous, current)
        if isinstance(state, GameOverState):
            return replace(state, flash_frames=state.flash_frames + 1)
        raise AssertionError(f"Unknown state: {state!r}")

    def _tick_waiting(self, state: WaitingState, previous: Movement, current: Movement) -> State:
        das_frames = update_charge(previous, current, state.das_frames)
        delay = LINE_CLEAR_FRAMES if state.did_clear_line else ARE_FRAMES
        if state.waiting_frames >= delay:
            return self._spawn(das_frames, current)
        return replace(state, waiting_frames=state.waiting_frames + 1, das_frames=das_frames)

    def _spawn(self, das_frames: int, current: Movement) -> State:
        piece_type = self.randomizer.advance(self.level)
        if not is_level_stop(self.level):
            self.level += 1

        piece = Piece.spawn(piece_type)
        # Initial rotation: a rotation held at spawn time is applied at once.
        piece = apply_movement(NO_INPUT, Movement(rotation=current.rotation), 0, piece, self.board)
        fallen = fall(piece, self.board, self.level, 1)
        if fallen is not None:
            piece = fallen

        if not is_legal(piece, self.board):
            LOGGER.info(
                "Game over at level %d with score %d (%s)",
                self.level,
                self.record.score,
                self.record.grade,
            )
            return GameOverState()

        LOGGER.debug("Spawned %s at level %d", piece_type.value, self.level)
        return ActiveState(piece=piece, das_frames=das_frames)

    def _tick_active(self, state: ActiveState, previous: Movement, current: Movement) -> State:
        board = self.board
        piece = state.piece

        fallen = fall(piece, board, self.level, state.gravity_frames)
        if fallen is not None:
            piece = fallen

        piece = apply_movement(previous, current, state.das_frames, piece, board)

        lock_frames = state.lock_frames
        gravity_frames = state.gravity_frames
        fallen = fall(piece, board, self.level, gravity_frames)
        if fallen is None:
            lock_frames += 1
        else:
            lock_frames = 0
            gravity_frames = gravity_frames + 1 if fallen.y == piece.y else 1
            piece = fallen

        down_frames = state.down_frames
        das_frames = state.das_frames
        if current.direction is Direction.DOWN:
            down_frames += 1
        else:
            das_frames = update_charge(previous, current, das_frames)

        if lock_frames >= LOCK_DELAY_FRAMES or (
            lock_frames > 0 and current.direction is Direction.DOWN
        ):
            return self._lock(piece, down_frames)

        return ActiveState(
            piece=piece,
            lock_frames=lock_frames,
            das_frames=das_frames,
            down_frames=down_frames,
            gravity_frames=gravity_frames,
        )

    def _lock(self, piece: Piece, down_frames: int) -> State:
        lines = self.board.lock_piece(piece)
        self.combo = self.combo + 1 if lines > 0 else 0
        delta = update_record(self.record, self.board, self.level, lines, down_frames, self.combo)
        self.level = next_level(self.level, lines)
        self.last_lines_cleared = lines
        self.last_score_delta = delta
        LOGGER.debug(
            "Locked %s at (%d, %d): lines=%d combo=%d delta=%d",
            piece.piece_type.value,
            piece.x,
            piece.y,
            lines,
            self.combo,
            delta,
        )
        return WaitingState(did_clear_line=lines > 0)
