from __future__ import annotations

import numpy as np

from tetrominauts.game.grid import (
    board_array,
    count_holes,
    dropped_position,
    full_rows,
    max_height,
    update_blocks,
)
from tetrominauts.game.pieces import EMPTY, Block, DropBlock, Matrix, PieceType


MATRIX = Matrix(4, 4)


def _cells(blocks):
    return {b.location for b in blocks}


def test_single_line_clear_shifts_only_blocks_above():
    settled = (Block((0, 3)), Block((0, 2)), Block((1, 2)), Block((3, 0)))
    square = DropBlock(PieceType.O, 0, (2, 2))  # fills (2,1) (3,1) (2,2) (3,2)

    frames, lines = update_blocks(settled, square, MATRIX)

    assert lines == 1
    assert _cells(frames.pre_clear) == _cells(settled) | set(square.location)
    assert _cells(frames.clearing) == {(0, 3), (2, 1), (3, 1), (3, 0)}
    # (0,3) sits below the cleared row and stays put
    assert _cells(frames.cleared) == {(0, 3), (2, 2), (3, 2), (3, 1)}


def test_two_lines_compound():
    settled = (Block((0, 2)), Block((1, 2)), Block((0, 3)), Block((1, 3)), Block((1, 1)), Block((0, 0)))
    square = DropBlock(PieceType.O, 0, (2, 3))  # fills rows 2 and 3 on the right

    frames, lines = update_blocks(settled, square, MATRIX)

    assert lines == 2
    assert _cells(frames.clearing) == {(1, 1), (0, 0)}
    assert _cells(frames.cleared) == {(1, 3), (0, 2)}


def test_no_clear_leaves_board_merged():
    square = DropBlock(PieceType.O, 0, (0, 3))
    frames, lines = update_blocks((), square, MATRIX)
    assert lines == 0
    assert frames.pre_clear == frames.clearing == frames.cleared
    assert len(frames.cleared) == 4


def test_cleared_blocks_keep_color():
    settled = tuple(Block((x, 3), 2) for x in range(2)) + (Block((0, 1), 5),)
    square = DropBlock(PieceType.O, 0, (2, 3))
    frames, _ = update_blocks(settled, square, MATRIX)
    assert Block((0, 2), 5) in frames.cleared


def test_full_rows_counts_distinct_columns():
    blocks = [Block((x, 1)) for x in range(4)] + [Block((0, 2)), Block((0, 2))]
    assert full_rows(blocks, 4) == [1]


def test_full_rows_sorted_top_to_bottom():
    blocks = [Block((x, y)) for x in range(4) for y in (3, 0)]
    assert full_rows(blocks, 4) == [0, 3]


def test_dropped_position_rests_on_floor():
    t = DropBlock(PieceType.T, 0, (1, 0))
    ghost = dropped_position(t, (), MATRIX)
    assert max(y for _, y in ghost.location) == 3
    assert ghost.is_valid_in_matrix((), MATRIX)
    assert not ghost.move_by((0, 1)).is_valid_in_matrix((), MATRIX)


def test_dropped_position_rests_on_blocks():
    t = DropBlock(PieceType.T, 0, (1, 0))
    ghost = dropped_position(t, (Block((1, 3)),), MATRIX)
    assert max(y for _, y in ghost.location) == 2


def test_dropped_position_of_empty():
    assert dropped_position(EMPTY, (), MATRIX) is EMPTY


def test_board_array_marks_settled_and_falling():
    state = board_array((Block((0, 3), 2), Block((1, -1), 3)), MATRIX, DropBlock(PieceType.O, 0, (2, 1)))
    assert state.shape == (4, 4)
    assert state.dtype == np.int8
    assert state[3, 0] == 3
    assert state[0, 2] == -(int(PieceType.O) + 1)
    # above the top is not represented
    assert np.count_nonzero(state) == 5


def test_holes_and_height():
    state = board_array((Block((0, 1)), Block((1, 3))), MATRIX)
    assert count_holes(state) == 2
    assert max_height(state) == 3
    assert max_height(board_array((), MATRIX)) == 0
