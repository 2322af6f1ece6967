"""Frame-accurate simulation core for an arcade-style falling block game."""

from .board import Board
from .tetromino import Piece, PieceType, RotIndex, Rotation, rotate, shape_of
from .movement import Direction, Movement, apply_kicks, apply_movement, is_legal
from .gravity import fall, gravity_for_level
from .randomizer import Randomizer, draw_piece
from .scoring import Checkpoint, Grade, PlayerRecord, line_clear_score
from .game_state import ActiveState, GameOverState, GameState, Snapshot, WaitingState
from .utils import render_grid

__all__ = [
    "Board",
    "Piece",
    "PieceType",
    "RotIndex",
    "Rotation",
    "rotate",
    "shape_of",
    "Direction",
    "Movement",
    "apply_kicks",
    "apply_movement",
    "is_legal",
    "fall",
    "gravity_for_level",
    "Randomizer",
    "draw_piece",
    "Checkpoint",
    "Grade",
    "PlayerRecord",
    "line_clear_score",
    "ActiveState",
    "GameOverState",
    "GameState",
    "Snapshot",
    "WaitingState",
    "render_grid",
]
