from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple

import numpy as np

from .pieces import EMPTY, Block, DropBlock, Matrix


Blocks = Tuple[Block, ...]


@dataclass(frozen=True)
class ClearFrames:
    """Board snapshots around a line clear.

    - ``pre_clear``: settled blocks plus the landed piece
    - ``clearing``: ``pre_clear`` minus the full rows, nothing shifted yet
    - ``cleared``: full rows removed and everything above them shifted down
    """

    pre_clear: Blocks
    clearing: Blocks
    cleared: Blocks


def full_rows(blocks: Iterable[Block], width: int) -> List[int]:
    """Return the y of every row whose distinct x count equals ``width``, top to bottom."""
    rows: Dict[int, Set[int]] = defaultdict(set)
    for block in blocks:
        x, y = block.location
        rows[y].add(x)
    return sorted(y for y, xs in rows.items() if len(xs) == width)


def update_blocks(blocks: Iterable[Block], drop_block: DropBlock, matrix: Matrix) -> Tuple[ClearFrames, int]:
    """Merge ``drop_block`` into ``blocks`` and clear full rows."""
    pre_clear: Blocks = tuple(blocks) + Block.of_drop_block(drop_block)
    lines = full_rows(pre_clear, matrix.width)
    clearing = pre_clear
    cleared = pre_clear
    # Each cleared row shifts the cells above it by one, so two cleared rows
    # below a cell drop it by two.
    for line in lines:
        clearing = tuple(b for b in clearing if b.location[1] != line)
        cleared = tuple(
            b.offset_by(0, 1) if b.location[1] < line else b
            for b in cleared
            if b.location[1] != line
        )
    return ClearFrames(pre_clear, clearing, cleared), len(lines)


def dropped_position(drop_block: DropBlock, blocks: Iterable[Block], matrix: Matrix) -> DropBlock:
    """Lowest valid resting translation of ``drop_block`` (the ghost)."""
    if drop_block.is_empty:
        return EMPTY
    settled = tuple(blocks)
    depth = 0
    while drop_block.move_by((0, depth + 1)).is_valid_in_matrix(settled, matrix):
        depth += 1
    return drop_block.move_by((0, depth))


def board_array(blocks: Iterable[Block], matrix: Matrix, drop_block: DropBlock = EMPTY) -> np.ndarray:
    """Occupancy grid of shape (height, width).

    0 is empty, ``color + 1`` a settled block and ``-(color + 1)`` the falling
    piece overlay. Cells above the visible top are dropped.
    """
    state = np.zeros((matrix.height, matrix.width), dtype=np.int8)
    for block in blocks:
        x, y = block.location
        if 0 <= y < matrix.height and 0 <= x < matrix.width:
            state[y, x] = block.color + 1
    for x, y in drop_block.location:
        if 0 <= y < matrix.height and 0 <= x < matrix.width:
            state[y, x] = -(drop_block.color + 1)
    return state


def count_holes(state: np.ndarray) -> int:
    """Empty cells that have a filled cell somewhere above them in the same column."""
    filled = state != 0
    covered = np.logical_or.accumulate(filled, axis=0)
    return int(np.sum(covered & ~filled))


def max_height(state: np.ndarray) -> int:
    non_empty_rows = np.where(np.any(state != 0, axis=1))[0]
    if non_empty_rows.size == 0:
        return 0
    return state.shape[0] - int(non_empty_rows[0])
