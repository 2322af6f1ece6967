from __future__ import annotations

import numpy as np
import pytest

from gmtris.board import HEIGHT, WIDTH, Board
from gmtris.tetromino import PIECE_VALUES, Piece, PieceType


def test_clear_lines_removes_full_rows_and_keeps_order() -> None:
    board = Board()
    board.fill_row(0)
    board.set_cell(1, 0, 2)
    board.fill_row(2)
    board.set_cell(3, 5, 3)
    board.fill_row(4, gap=7)

    assert board.clear_lines() == 2

    assert board.grid.shape == (HEIGHT, WIDTH)
    assert board.get_cell(0, 0) == 2
    assert board.get_cell(1, 5) == 3
    assert board.get_cell(2, 7) == 0
    assert np.count_nonzero(board.grid[2]) == WIDTH - 1
    assert not np.any(board.grid[3:])


def test_clear_lines_without_full_rows_is_noop() -> None:
    board = Board()
    board.fill_row(0, gap=0)
    before = board.grid.copy()
    assert board.clear_lines() == 0
    assert np.array_equal(board.grid, before)


def test_lock_piece_never_erases_with_empty_cells() -> None:
    board = Board()
    # Box row 0 of an O piece is empty; it covers board row 4 when y=5.
    board.set_cell(4, 3, 7)
    board.set_cell(3, 3, 7)
    lines = board.lock_piece(Piece(PieceType.O, x=3, y=5))

    assert lines == 0
    assert board.get_cell(4, 3) == 7
    assert board.get_cell(3, 3) == 7
    value = PIECE_VALUES[PieceType.O]
    for row, col in [(3, 4), (3, 5), (2, 4), (2, 5)]:
        assert board.get_cell(row, col) == value
    assert np.count_nonzero(board.grid) == 6


def test_lock_piece_returns_cleared_lines_and_empties_board() -> None:
    board = Board()
    for row in (0, 1):
        board.fill_row(row)
        board.set_cell(row, 4, 0)
        board.set_cell(row, 5, 0)

    assert board.lock_piece(Piece(PieceType.O, x=3, y=3)) == 2
    assert board.is_empty()


def test_is_empty() -> None:
    board = Board()
    assert board.is_empty()
    board.set_cell(HEIGHT - 1, WIDTH - 1, 1)
    assert not board.is_empty()


def test_cell_access_out_of_bounds_raises() -> None:
    board = Board()
    with pytest.raises(IndexError):
        board.get_cell(HEIGHT, 0)
    with pytest.raises(IndexError):
        board.set_cell(0, -1, 1)
    assert board.is_filled(-1, 0) is False


def test_lock_piece_off_grid_raises() -> None:
    board = Board()
    with pytest.raises(IndexError):
        board.lock_piece(Piece(PieceType.O, x=3, y=1))


def test_rows_top_down_puts_floor_last() -> None:
    board = Board()
    board.set_cell(0, 0, 1)
    rows = board.rows_top_down()
    assert rows[-1][0] == 1
    assert str(board).splitlines()[-1].startswith("X.")
