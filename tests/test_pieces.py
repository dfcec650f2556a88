from __future__ import annotations

import pytest

from tetrominauts.game.pieces import (
    CLASSIC_TYPES,
    EMPTY,
    ROTATIONS,
    Block,
    DropBlock,
    Matrix,
    PieceType,
)


MATRIX = Matrix(10, 20)


@pytest.mark.parametrize("kind", [k for k in PieceType if k is not PieceType.O])
def test_four_rotations_return_to_start(kind):
    block = DropBlock(kind, 0, (4, 5))
    turned = block
    seen = set()
    for _ in range(4):
        seen.add(frozenset(turned.location))
        turned = turned.rotate()
    assert turned.location == block.location
    assert len(seen) == 4


def test_square_rotation_keeps_cells():
    block = DropBlock(PieceType.O, 0, (3, 3))
    assert set(block.rotate().location) == set(block.location)


@pytest.mark.parametrize("kind", list(PieceType))
def test_every_state_has_four_distinct_cells(kind):
    for state in ROTATIONS[kind]:
        assert len(set(state)) == 4


def test_move_by_translates_without_validation():
    block = DropBlock(PieceType.T, 0, (0, 0))
    moved = block.move_by((-5, 2))
    assert moved.offset == (-5, 2)
    assert moved.location == tuple((x - 5, y + 2) for x, y in block.location)
    assert block.offset == (0, 0)


def test_color_is_piece_index():
    assert DropBlock(PieceType.NAUT).color == 7
    assert DropBlock(PieceType.I).color == 0
    assert Block.of_drop_block(DropBlock(PieceType.L, 0, (5, 5)))[0].color == 6


def test_valid_bounds():
    # T in spawn state pokes one cell above the top
    block = DropBlock(PieceType.T, 0, (4, 0))
    assert min(y for _, y in block.location) == -1
    assert block.is_valid_in_matrix([], MATRIX)
    assert not block.move_by((-5, 0)).is_valid_in_matrix([], MATRIX)
    assert not block.move_by((5, 0)).is_valid_in_matrix([], MATRIX)
    assert block.move_by((0, 19)).is_valid_in_matrix([], MATRIX)
    assert not block.move_by((0, 20)).is_valid_in_matrix([], MATRIX)
    assert block.move_by((0, -50)).is_valid_in_matrix([], MATRIX)


def test_collision_with_settled_block():
    block = DropBlock(PieceType.O, 0, (0, 1))
    assert not block.is_valid_in_matrix([Block((1, 1))], MATRIX)
    assert block.is_valid_in_matrix([Block((2, 1))], MATRIX)


def test_adjust_offset_clamps_horizontally():
    left = DropBlock(PieceType.I, 0, (0, 0)).adjust_offset(MATRIX)
    assert min(x for x, _ in left.location) == 0
    right = DropBlock(PieceType.I, 0, (9, 0)).adjust_offset(MATRIX)
    assert max(x for x, _ in right.location) == 9
    inside = DropBlock(PieceType.I, 0, (4, 0))
    assert inside.adjust_offset(MATRIX) == inside


def test_adjust_offset_vertical_for_preview():
    preview = DropBlock(PieceType.I, 3, (6, 0)).adjust_offset(Matrix(4, 4), adjust_y=True)
    assert all(0 <= x < 4 and 0 <= y < 4 for x, y in preview.location)


def test_empty_piece_is_inert():
    assert EMPTY.is_empty
    assert EMPTY.move_by((1, 1)) is EMPTY
    assert EMPTY.rotate() is EMPTY
    assert EMPTY.location == ()
    assert EMPTY.is_valid_in_matrix([Block((0, 0))], MATRIX)


def test_matrix_rejects_tiny_boards():
    with pytest.raises(ValueError):
        Matrix(3, 10)
    with pytest.raises(ValueError):
        Matrix(10, 2)


def test_classic_types_exclude_naut():
    assert len(CLASSIC_TYPES) == 7
    assert PieceType.NAUT not in CLASSIC_TYPES


def test_block_fill_covers_rectangle():
    cells = Block.fill(range(3), range(2, 4))
    assert {b.location for b in cells} == {(x, y) for x in range(3) for y in (2, 3)}
