"""History-based piece randomizer with a one-piece preview."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Optional, Protocol, Sequence, TypeVar
import random

from .tetromino import PieceType


HISTORY_SIZE = 4
# Draws made per piece while trying to avoid the history.
TRIES = 4
# The history a new game starts with.
INITIAL_HISTORY = (PieceType.Z,) * HISTORY_SIZE

# The first piece of a game is never one of these.
FIRST_PIECE_EXCLUDED = frozenset({PieceType.S, PieceType.Z, PieceType.O})
FIRST_PIECE_RETRIES = 16
FIRST_PIECE_FALLBACK = PieceType.T

PIECE_ORDER: tuple[PieceType, ...] = tuple(PieceType)

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of :class:`random.Random` the randomizer needs."""

    def choice(self, seq: Sequence[T]) -> T: ...


def _draw_avoiding(rng: RandomSource, history: Iterable[PieceType]) -> PieceType:
    recent = set(history)
    piece: Optional[PieceType] = None
    for _ in range(TRIES):
        piece = rng.choice(PIECE_ORDER)
        if piece not in recent:
            break
    assert piece is not None, "TRIES must be positive"
    return piece


def draw_piece(level: int, rng: RandomSource, history: Iterable[PieceType]) -> PieceType:
    """Draw the next piece type.

    Up to :data:`TRIES` uniform draws are made and the first one not found in
    ``history`` wins; if every draw repeats, the last is kept.  At level ``0``
    S, Z and O are redrawn, falling back to :data:`FIRST_PIECE_FALLBACK`
    after :data:`FIRST_PIECE_RETRIES` attempts.
    """

    history = tuple(history)
    for _ in range(FIRST_PIECE_RETRIES):
        piece = _draw_avoiding(rng, history)
        if level != 0 or piece not in FIRST_PIECE_EXCLUDED:
            return piece
    return FIRST_PIECE_FALLBACK


class Randomizer:
    """Deal pieces while remembering the last :data:`HISTORY_SIZE` of them."""

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        *,
        level: int = 0,
        history: Iterable[PieceType] = INITIAL_HISTORY,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.history: Deque[PieceType] = deque(history, maxlen=HISTORY_SIZE)
        self.next_piece: PieceType = draw_piece(level, self._rng, self.history)

    def advance(self, level: int) -> PieceType:
        """Return the previewed piece and draw a new preview.

        The returned piece enters the history, pushing out the oldest entry.
        """

        current = self.next_piece
        self.history.append(current)
        self.next_piece = draw_piece(level, self._rng, self.history)
        return current
