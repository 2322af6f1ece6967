"""Movement legality, rotation kicks and per-tick input resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .board import Board
from .tetromino import Piece, PieceType, Rotation, occupied_bounds


# Ticks a left/right input must be held before it auto-repeats.
DAS_FRAMES = 16
# Once charged, auto-repeat fires on every ARR_FRAMES-th tick (20Hz at 60fps).
ARR_FRAMES = 3


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"


# (dx, dy) with y pointing up.  Up is accepted as input but never moves.
DIRECTION_DELTAS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, 0),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Movement:
    """Input sampled for a single tick: at most one direction and one rotation."""

    direction: Optional[Direction] = None
    rotation: Optional[Rotation] = None


NO_INPUT = Movement()


def is_legal(piece: Piece, board: Board) -> bool:
    """Return ``True`` if ``piece`` fits inside ``board`` without overlapping.

    The occupied part of the piece's box must lie within the board's columns,
    its lowest cell must sit on row ``0`` or above and its highest cell must
    not exceed the board height.
    """

    first_row, last_row, first_col, last_col = occupied_bounds(piece.shape)

    if piece.x + first_col < 0 or piece.x + last_col >= board.width:
        return False
    if piece.y - last_row <= 0 or piece.y - first_row > board.height:
        return False

    return not any(board.is_filled(row, col) for row, col in piece.blocks())


def apply_kicks(original: Piece, rotated: Piece, board: Board) -> Piece:
    """Try to legalise ``rotated`` by nudging it one column right, then left.

    Returns ``original`` when no position works.  The I piece never kicks.
    """

    if is_legal(rotated, board):
        return rotated
    if rotated.piece_type is PieceType.I:
        return original

    for dx in (1, -1):
        kicked = rotated.moved(dx=dx)
        if is_legal(kicked, board):
            return kicked
    return original


def repeat_allowed(previous: Movement, current: Movement, das_frames: int) -> bool:
    """Return whether this tick's direction should act.

    A newly pressed direction always acts.  Held down repeats every tick; any
    other held direction waits for ``DAS_FRAMES`` of charge and then repeats
    every ``ARR_FRAMES`` ticks.
    """

    if current.direction is None or current.direction != previous.direction:
        return True
    if current.direction is Direction.DOWN:
        return True
    return das_frames >= DAS_FRAMES and (das_frames - DAS_FRAMES) % ARR_FRAMES == 0


def apply_movement(
    previous: Movement,
    current: Movement,
    das_frames: int,
    piece: Piece,
    board: Board,
) -> Piece:
    """Resolve one tick of player input against ``piece``.

    Rotation only fires when the rotation input changed since the previous
    tick.  An illegal translation is undone but the rotation is kept and
    handed to :func:`apply_kicks`.
    """

    rotation = current.rotation
    if rotation == previous.rotation:
        rotation = None
    direction = current.direction if repeat_allowed(previous, current, das_frames) else None

    next_piece = piece
    if rotation is not None:
        next_piece = next_piece.rotated(rotation)
    if direction is not None:
        dx, dy = DIRECTION_DELTAS[direction]
        next_piece = next_piece.moved(dx, dy)

    if not is_legal(next_piece, board):
        next_piece = next_piece.at(piece.x, piece.y)

    if rotation is not None:
        next_piece = apply_kicks(piece, next_piece, board)
        if not is_legal(next_piece, board):
            next_piece = next_piece.at(piece.x, piece.y)

    return next_piece


def update_charge(previous: Movement, current: Movement, das_frames: int) -> int:
    """Return the DAS charge after this tick.

    Holding the same left/right input charges; anything else discharges.
    """

    if current.direction in (Direction.LEFT, Direction.RIGHT):
        return das_frames + 1 if current.direction == previous.direction else 0
    return 0
