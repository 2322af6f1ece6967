"""Level-dependent gravity and the fall step."""

from __future__ import annotations

import math
from bisect import bisect_right
from typing import Optional, Tuple

from .board import Board
from .movement import is_legal
from .tetromino import Piece


# Internal gravity units per row: 256 means one row per frame (1G).
GRAVITY_UNIT = 256

# (first level, gravity) pairs in ascending level order.  The drop at level
# 200 is part of the arcade curve.
GRAVITY_CURVE: Tuple[Tuple[int, int], ...] = (
    (0, 4),
    (30, 6),
    (35, 8),
    (40, 10),
    (50, 12),
    (60, 16),
    (70, 32),
    (80, 48),
    (90, 64),
    (100, 80),
    (120, 96),
    (140, 112),
    (160, 128),
    (170, 144),
    (200, 4),
    (220, 32),
    (230, 64),
    (233, 96),
    (236, 128),
    (239, 160),
    (243, 192),
    (247, 224),
    (251, 256),
    (300, 512),
    (330, 768),
    (360, 1024),
    (400, 1280),
    (420, 1024),
    (450, 768),
    (500, 5120),
)

_CURVE_LEVELS = [level for level, _ in GRAVITY_CURVE]


def gravity_for_level(level: int) -> int:
    """Return the internal gravity for ``level``."""

    index = bisect_right(_CURVE_LEVELS, max(0, level)) - 1
    return GRAVITY_CURVE[index][1]


def rows_and_frames(gravity: int) -> Tuple[int, int]:
    """Convert internal gravity into ``(rows per step, frames per step)``.

    From 1G upwards the piece moves whole rows every frame; below that it
    moves one row every ``ceil(256 / gravity)`` frames.
    """

    if gravity <= 0:
        raise ValueError("Gravity must be positive")
    if gravity >= GRAVITY_UNIT:
        return gravity // GRAVITY_UNIT, 1
    return 1, math.ceil(GRAVITY_UNIT / gravity)


def fall(piece: Piece, board: Board, level: int, gravity_frames: int) -> Optional[Piece]:
    """Apply gravity to ``piece``.

    Returns ``None`` when the piece has landed, otherwise the (possibly
    lowered) piece.  Whether the piece rests on the floor is judged from the
    position it had *before* this call's descent, so a piece that falls onto
    the stack is still reported as falling on that tick.
    """

    rows, frames = rows_and_frames(gravity_for_level(level))

    next_piece = piece
    if gravity_frames >= frames:
        for _ in range(rows):
            lowered = next_piece.moved(dy=-1)
            if not is_legal(lowered, board):
                break
            next_piece = lowered

        if next_piece.y == piece.y:
            return None

    if not is_legal(piece.moved(dy=-1), board):
        return None

    return next_piece
