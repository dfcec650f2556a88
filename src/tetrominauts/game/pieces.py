from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, Iterable, Optional, Tuple


Coordinate = Tuple[int, int]

MIN_MATRIX_SIZE = 4


@dataclass(frozen=True)
class Matrix:
    """Board dimensions in cells."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < MIN_MATRIX_SIZE or self.height < MIN_MATRIX_SIZE:
            raise ValueError(
                f"matrix must be at least {MIN_MATRIX_SIZE}x{MIN_MATRIX_SIZE}, got {self.width}x{self.height}"
            )


PREVIEW_MATRIX = Matrix(4, 4)


class PieceType(IntEnum):
    """Piece kinds; the value doubles as the palette color index."""

    I = 0
    O = 1
    T = 2
    S = 3
    Z = 4
    J = 5
    L = 6
    NAUT = 7


CLASSIC_TYPES: Tuple[PieceType, ...] = tuple(t for t in PieceType if t is not PieceType.NAUT)


Shape = Tuple[Coordinate, ...]

# Rotation states per piece, as cell offsets from the pivot (y grows downward).
# States are listed clockwise; the layouts follow SRS, so I turns about an
# off-centre pivot and O keeps a single state.
ROTATIONS: Dict[PieceType, Tuple[Shape, ...]] = {
    PieceType.I: (
        ((-1, 0), (0, 0), (1, 0), (2, 0)),
        ((1, -1), (1, 0), (1, 1), (1, 2)),
        ((-1, 1), (0, 1), (1, 1), (2, 1)),
        ((0, -1), (0, 0), (0, 1), (0, 2)),
    ),
    PieceType.O: (
        ((0, -1), (1, -1), (0, 0), (1, 0)),
    ),
    PieceType.T: (
        ((0, -1), (-1, 0), (0, 0), (1, 0)),
        ((0, -1), (0, 0), (1, 0), (0, 1)),
        ((-1, 0), (0, 0), (1, 0), (0, 1)),
        ((0, -1), (-1, 0), (0, 0), (0, 1)),
    ),
    PieceType.S: (
        ((0, -1), (1, -1), (-1, 0), (0, 0)),
        ((0, -1), (0, 0), (1, 0), (1, 1)),
        ((0, 0), (1, 0), (-1, 1), (0, 1)),
        ((-1, -1), (-1, 0), (0, 0), (0, 1)),
    ),
    PieceType.Z: (
        ((-1, -1), (0, -1), (0, 0), (1, 0)),
        ((1, -1), (0, 0), (1, 0), (0, 1)),
        ((-1, 0), (0, 0), (0, 1), (1, 1)),
        ((0, -1), (-1, 0), (0, 0), (-1, 1)),
    ),
    PieceType.J: (
        ((-1, -1), (-1, 0), (0, 0), (1, 0)),
        ((0, -1), (1, -1), (0, 0), (0, 1)),
        ((-1, 0), (0, 0), (1, 0), (1, 1)),
        ((0, -1), (0, 0), (-1, 1), (0, 1)),
    ),
    PieceType.L: (
        ((1, -1), (-1, 0), (0, 0), (1, 0)),
        ((0, -1), (0, 0), (0, 1), (1, 1)),
        ((-1, 0), (0, 0), (1, 0), (-1, 1)),
        ((-1, -1), (0, -1), (0, 0), (0, 1)),
    ),
    # Head, torso and two splayed feet.
    PieceType.NAUT: (
        ((0, -1), (0, 0), (-1, 1), (1, 1)),
        ((-1, -1), (1, 0), (0, 0), (-1, 1)),
        ((-1, -1), (1, -1), (0, 0), (0, 1)),
        ((1, -1), (-1, 0), (0, 0), (1, 1)),
    ),
}


@dataclass(frozen=True)
class Block:
    """A settled cell on the board."""

    location: Coordinate
    color: int = 0

    def offset_by(self, dx: int, dy: int) -> "Block":
        x, y = self.location
        return Block((x + dx, y + dy), self.color)

    @staticmethod
    def of_drop_block(drop_block: "DropBlock") -> Tuple["Block", ...]:
        return tuple(Block(cell, drop_block.color) for cell in drop_block.location)

    @staticmethod
    def fill(xs: Iterable[int], ys: Iterable[int], color: int = 0) -> Tuple["Block", ...]:
        rows = list(ys)
        return tuple(Block((x, y), color) for x in xs for y in rows)


@dataclass(frozen=True)
class DropBlock:
    """The falling piece. ``kind=None`` is the empty piece (see ``EMPTY``)."""

    kind: Optional[PieceType] = None
    rotation: int = 0
    offset: Coordinate = (0, 0)

    @property
    def is_empty(self) -> bool:
        return self.kind is None

    @property
    def color(self) -> int:
        return 0 if self.kind is None else int(self.kind)

    @property
    def shape(self) -> Shape:
        if self.kind is None:
            return ()
        return ROTATIONS[self.kind][self.rotation]

    @property
    def location(self) -> Tuple[Coordinate, ...]:
        ox, oy = self.offset
        return tuple((ox + dx, oy + dy) for dx, dy in self.shape)

    def move_by(self, step: Coordinate) -> "DropBlock":
        if self.kind is None:
            return self
        ox, oy = self.offset
        return replace(self, offset=(ox + step[0], oy + step[1]))

    def rotate(self) -> "DropBlock":
        if self.kind is None:
            return self
        states = len(ROTATIONS[self.kind])
        return replace(self, rotation=(self.rotation + 1) % states)

    def adjust_offset(self, matrix: Matrix, adjust_y: bool = False) -> "DropBlock":
        """Shift the piece so it fits inside ``matrix`` horizontally (and vertically if asked)."""
        cells = self.location
        if not cells:
            return self
        xs = [x for x, _ in cells]
        dx = max(0, -min(xs)) + min(0, matrix.width - 1 - max(xs))
        dy = 0
        if adjust_y:
            ys = [y for _, y in cells]
            dy = max(0, -min(ys)) + min(0, matrix.height - 1 - max(ys))
        if dx == 0 and dy == 0:
            return self
        return self.move_by((dx, dy))

    def is_valid_in_matrix(self, blocks: Iterable[Block], matrix: Matrix) -> bool:
        """True when every cell is within the columns, above the floor and not on a settled block.

        Cells above the visible top (negative y) are allowed.
        """
        occupied = {b.location for b in blocks}
        for x, y in self.location:
            if not (0 <= x < matrix.width) or y >= matrix.height:
                return False
            if (x, y) in occupied:
                return False
        return True


EMPTY = DropBlock()
