"""Utility helpers for front-ends."""

from __future__ import annotations

from typing import List, Optional

from .board import Board
from .tetromino import PIECE_VALUES, Piece


def render_grid(board: Board, active: Optional[Piece] = None) -> List[List[int]]:
    """Return a copy of the board grid with the active piece overlaid.

    Rows are returned top-down, the order renderers draw them in, and the
    board itself is left untouched.  Cells covered by the active piece take
    the value mapped to its type.
    """

    grid = board.rows_top_down()
    if active is not None:
        value = PIECE_VALUES[active.piece_type]
        for row, col in active.blocks():
            if 0 <= row < board.height and 0 <= col < board.width:
                grid[board.height - 1 - row][col] = value
    return grid


def format_grid(grid: List[List[int]]) -> str:
    return "\n".join("".join("#" if cell else "." for cell in row) for row in grid)
