from __future__ import annotations

import pytest

from gmtris.tetromino import (
    BOX_SIZE,
    Piece,
    PieceType,
    RotIndex,
    Rotation,
    filled_cells,
    occupied_bounds,
    rotate,
    shape_of,
)


@pytest.mark.parametrize("piece_type", list(PieceType))
@pytest.mark.parametrize("state", list(RotIndex))
def test_every_shape_has_four_cells_in_box(piece_type: PieceType, state: RotIndex) -> None:
    shape = shape_of(piece_type, state)
    assert len(shape) == BOX_SIZE
    assert all(len(row) == BOX_SIZE for row in shape)
    assert len(list(filled_cells(shape))) == 4


@pytest.mark.parametrize(
    "piece_type, distinct",
    [
        (PieceType.Z, 2),
        (PieceType.S, 2),
        (PieceType.I, 2),
        (PieceType.T, 4),
        (PieceType.L, 4),
        (PieceType.J, 4),
        (PieceType.O, 1),
    ],
)
def test_number_of_distinct_orientations(piece_type: PieceType, distinct: int) -> None:
    shapes = {shape_of(piece_type, state) for state in RotIndex}
    assert len(shapes) == distinct


def test_two_way_pieces_share_opposite_orientations() -> None:
    for piece_type in (PieceType.Z, PieceType.S, PieceType.I):
        assert shape_of(piece_type, RotIndex.NEUTRAL) == shape_of(piece_type, RotIndex.U)
        assert shape_of(piece_type, RotIndex.CW) == shape_of(piece_type, RotIndex.CCW)


def test_clockwise_cycle() -> None:
    assert rotate(RotIndex.NEUTRAL, Rotation.CW) is RotIndex.CW
    assert rotate(RotIndex.CW, Rotation.CW) is RotIndex.U
    assert rotate(RotIndex.U, Rotation.CW) is RotIndex.CCW
    assert rotate(RotIndex.CCW, Rotation.CW) is RotIndex.NEUTRAL


@pytest.mark.parametrize("rotation", [Rotation.CCW, Rotation.CCW2])
def test_counter_clockwise_inputs_are_identical(rotation: Rotation) -> None:
    assert rotate(RotIndex.NEUTRAL, rotation) is RotIndex.CCW
    assert rotate(RotIndex.CCW, rotation) is RotIndex.U
    assert rotate(RotIndex.U, rotation) is RotIndex.CW
    assert rotate(RotIndex.CW, rotation) is RotIndex.NEUTRAL


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_four_clockwise_turns_return_to_start(piece_type: PieceType) -> None:
    piece = Piece(piece_type)
    turned = piece
    for _ in range(4):
        turned = turned.rotated(Rotation.CW)
    assert turned == piece
    assert piece.rotated(Rotation.CW).rotated(Rotation.CCW).rot_index is RotIndex.NEUTRAL


def test_blocks_map_box_rows_downwards() -> None:
    piece = Piece(PieceType.T, x=3, y=21)
    assert sorted(piece.blocks()) == [(18, 4), (19, 3), (19, 4), (19, 5)]


def test_occupied_bounds() -> None:
    assert occupied_bounds(shape_of(PieceType.I, RotIndex.CW)) == (0, 3, 2, 2)
    assert occupied_bounds(shape_of(PieceType.O, RotIndex.NEUTRAL)) == (1, 2, 1, 2)


def test_occupied_bounds_rejects_empty_shape() -> None:
    empty = tuple((False,) * BOX_SIZE for _ in range(BOX_SIZE))
    with pytest.raises(AssertionError):
        occupied_bounds(empty)
