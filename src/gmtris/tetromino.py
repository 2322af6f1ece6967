"""Tetromino shape catalog and the falling piece.

Every piece plays inside a 4x4 box.  Box row ``0`` is the *top* row of the
box and box column ``0`` its leftmost column.  A :class:`Piece` stores the
column (``x``) and row (``y``) of that box on the playfield, with ``y``
measured upwards from the bottom of the board: box row ``r`` covers board row
``y - 1 - r`` and box column ``c`` covers board column ``x + c``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterator, Tuple

Shape = Tuple[Tuple[bool, ...], ...]

BOX_SIZE = 4

# Box origin of a freshly spawned piece.
SPAWN_X = 3
SPAWN_Y = 21


class PieceType(str, Enum):
    """The seven piece types, in the arcade's order."""

    Z = "Z"
    S = "S"
    T = "T"
    L = "L"
    J = "J"
    O = "O"
    I = "I"


class RotIndex(Enum):
    """Orientation of a piece.  ``NEUTRAL`` is the spawn orientation."""

    NEUTRAL = 0
    CW = 1
    U = 2
    CCW = 3


class Rotation(str, Enum):
    """Rotation input symbols.

    ``CCW`` and ``CCW2`` are two buttons with the same effect; only
    :attr:`direction` is used by the rotation logic.
    """

    CW = "CW"
    CCW = "CCW"
    CCW2 = "CCW2"

    @property
    def direction(self) -> int:
        return 1 if self is Rotation.CW else -1


def rotate(state: RotIndex, rotation: Rotation) -> RotIndex:
    """Return the orientation reached from ``state`` by one ``rotation``.

    Clockwise walks NEUTRAL -> CW -> U -> CCW -> NEUTRAL and both
    counter-clockwise inputs walk the same cycle backwards.
    """

    return RotIndex((state.value + rotation.direction) % len(RotIndex))


# Mapping from ``PieceType`` to the attribute stored in the board grid.  ``0``
# is reserved for empty cells.
PIECE_VALUES: Dict[PieceType, int] = {t: i + 1 for i, t in enumerate(PieceType)}


def _parse(*rows: str) -> Shape:
    assert len(rows) == BOX_SIZE and all(len(r) == BOX_SIZE for r in rows)
    return tuple(tuple(ch == "X" for ch in row) for row in rows)


_N, _CW, _U, _CCW = RotIndex.NEUTRAL, RotIndex.CW, RotIndex.U, RotIndex.CCW


def _two_way(neutral: Shape, side: Shape) -> Dict[RotIndex, Shape]:
    return {_N: neutral, _U: neutral, _CW: side, _CCW: side}


_SHAPES: Dict[PieceType, Dict[RotIndex, Shape]] = {
    PieceType.Z: _two_way(
        _parse("....", "XX..", ".XX.", "...."),
        _parse("..X.", ".XX.", ".X..", "...."),
    ),
    PieceType.S: _two_way(
        _parse("....", ".XX.", "XX..", "...."),
        _parse("X...", "XX..", ".X..", "...."),
    ),
    PieceType.T: {
        _N: _parse("....", "XXX.", ".X..", "...."),
        _CW: _parse(".X..", "XX..", ".X..", "...."),
        _U: _parse("....", ".X..", "XXX.", "...."),
        _CCW: _parse(".X..", ".XX.", ".X..", "...."),
    },
    PieceType.L: {
        _N: _parse("....", "XXX.", "X...", "...."),
        _CW: _parse("XX..", ".X..", ".X..", "...."),
        _U: _parse("....", "..X.", "XXX.", "...."),
        _CCW: _parse(".X..", ".X..", ".XX.", "...."),
    },
    PieceType.J: {
        _N: _parse("....", "XXX.", "..X.", "...."),
        _CW: _parse(".X..", ".X..", "XX..", "...."),
        _U: _parse("....", "X...", "XXX.", "...."),
        _CCW: _parse(".XX.", ".X..", ".X..", "...."),
    },
    PieceType.O: dict.fromkeys(RotIndex, _parse("....", ".XX.", ".XX.", "....")),
    PieceType.I: _two_way(
        _parse("....", "XXXX", "....", "...."),
        _parse("..X.", "..X.", "..X.", "..X."),
    ),
}


def shape_of(piece_type: PieceType, state: RotIndex) -> Shape:
    """Return the 4x4 box for ``piece_type`` in orientation ``state``."""

    return _SHAPES[piece_type][state]


def filled_cells(shape: Shape) -> Iterator[Tuple[int, int]]:
    """Yield ``(box_row, box_col)`` for every filled cell of ``shape``."""

    for r, row in enumerate(shape):
        for c, filled in enumerate(row):
            if filled:
                yield r, c


def occupied_bounds(shape: Shape) -> Tuple[int, int, int, int]:
    """Return ``(first_row, last_row, first_col, last_col)`` of filled cells."""

    cells = list(filled_cells(shape))
    if not cells:
        raise AssertionError("Shape has no filled cells")
    rows = [r for r, _ in cells]
    cols = [c for _, c in cells]
    return min(rows), max(rows), min(cols), max(cols)


@dataclass(frozen=True)
class Piece:
    """The piece under player control."""

    piece_type: PieceType
    rot_index: RotIndex = RotIndex.NEUTRAL
    x: int = SPAWN_X
    y: int = SPAWN_Y

    @classmethod
    def spawn(cls, piece_type: PieceType) -> "Piece":
        return cls(piece_type)

    @property
    def shape(self) -> Shape:
        return shape_of(self.piece_type, self.rot_index)

    def moved(self, dx: int = 0, dy: int = 0) -> "Piece":
        """Return a copy shifted by ``dx`` columns and ``dy`` rows (up is +)."""

        return replace(self, x=self.x + dx, y=self.y + dy)

    def at(self, x: int, y: int) -> "Piece":
        return replace(self, x=x, y=y)

    def rotated(self, rotation: Rotation) -> "Piece":
        return replace(self, rot_index=rotate(self.rot_index, rotation))

    def blocks(self) -> list[Tuple[int, int]]:
        """Return the ``(row, col)`` board coordinates of the filled cells."""

        return [(self.y - 1 - r, self.x + c) for r, c in filled_cells(self.shape)]
