"""Board representation for the playfield.

The grid is stored bottom-up: ``grid[0]`` is the floor row and ``grid[-1]``
the topmost one.  A cell holds ``0`` when empty, otherwise the attribute of the
piece that filled it (see :data:`gmtris.tetromino.PIECE_VALUES`).
"""

from __future__ import annotations

from typing import List

import numpy as np
from numpy.typing import NDArray

from .tetromino import PIECE_VALUES, Piece


# Dimensions of the arcade board.  The top row sits above the visible well.
WIDTH = 10
HEIGHT = 21

Grid = NDArray[np.uint8]


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((HEIGHT, WIDTH), dtype=np.uint8)


class Board:
    """Playfield holding the locked cells."""

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()

    def get_cell(self, row: int, col: int) -> int:
        """Return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Set the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_filled(self, row: int, col: int) -> bool:
        """Return ``True`` if ``(row, col)`` holds a locked cell.

        Rows and columns outside the grid never collide.
        """

        if 0 <= row < self.height and 0 <= col < self.width:
            return bool(self.grid[row, col] != 0)
        return False

    def fill_row(self, row: int, value: int = 1, *, gap: int | None = None) -> None:
        """Fill ``row`` with ``value``, optionally leaving column ``gap`` empty."""

        self.grid[row, :] = np.uint8(value)
        if gap is not None:
            self.grid[row, gap] = 0

    def lock_piece(self, piece: Piece) -> int:
        """Merge ``piece`` into the grid, clear full rows and return the count.

        Only filled cells of the piece are written; empty box cells never
        erase what is already on the board.
        """

        value = np.uint8(PIECE_VALUES[piece.piece_type])
        for row, col in piece.blocks():
            if not (0 <= row < self.height and 0 <= col < self.width):
                raise IndexError("Block out of bounds")
            self.grid[row, col] = value
        return self.clear_lines()

    def clear_lines(self) -> int:
        """Remove every full row and return how many were removed.

        Surviving rows keep their order and drop to fill the gaps; empty rows
        are added at the top.
        """

        full_rows = np.all(self.grid != 0, axis=1)
        cleared = int(np.count_nonzero(full_rows))
        if cleared:
            remaining = self.grid[~full_rows]
            new_rows = np.zeros((cleared, self.width), dtype=self.grid.dtype)
            self.grid = np.vstack((remaining, new_rows))
        return cleared

    def is_empty(self) -> bool:
        """Return ``True`` when no cell on the board is filled."""

        return not bool(np.any(self.grid))

    def rows_top_down(self) -> List[List[int]]:
        """Return a copy of the grid as lists, topmost row first."""

        return [[int(v) for v in row] for row in self.grid[::-1]]

    def to_ascii(self) -> str:
        return "\n".join(
            "".join("X" if cell else "." for cell in row) for row in self.rows_top_down()
        )

    def __str__(self) -> str:
        return self.to_ascii()
