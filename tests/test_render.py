from __future__ import annotations

from gmtris.board import Board
from gmtris.tetromino import PIECE_VALUES, Piece, PieceType
from gmtris.utils import format_grid, render_grid


def test_render_grid_overlays_active_piece_top_down() -> None:
    board = Board()
    board.set_cell(0, 9, 1)
    grid = render_grid(board, Piece(PieceType.T))

    value = PIECE_VALUES[PieceType.T]
    # Board row 19 is the second line from the top.
    assert grid[1][3:6] == [value] * 3
    assert grid[2][4] == value
    assert grid[-1][9] == 1
    # The board itself is not modified.
    assert board.is_filled(19, 4) is False


def test_format_grid() -> None:
    text = format_grid([[0, 1], [2, 0]])
    assert text == ".#\n#."
