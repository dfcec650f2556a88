from __future__ import annotations

import random
from typing import List, Optional

from .pieces import CLASSIC_TYPES, DropBlock, Matrix, PieceType


SPAWN_Y = 0


class PieceGenerator:
    """7-bag randomizer with optional naut injection.

    Each batch holds every classic shape exactly once in shuffled order. When
    nauts are enabled each entry is independently swapped for a naut with
    probability ``special_probability / 10``.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def spawn(self, kind: PieceType, matrix: Matrix) -> DropBlock:
        block = DropBlock(kind=kind, rotation=0, offset=((matrix.width - 1) // 2, SPAWN_Y))
        return block.adjust_offset(matrix)

    def generate(self, matrix: Matrix, use_special_piece: bool, special_probability: int) -> List[DropBlock]:
        kinds = list(CLASSIC_TYPES)
        self.rng.shuffle(kinds)
        if use_special_piece:
            chance = special_probability / 10
            kinds = [PieceType.NAUT if self.rng.random() < chance else k for k in kinds]
        return [self.spawn(kind, matrix) for kind in kinds]
