from __future__ import annotations

from dataclasses import dataclass


LINES_PER_LEVEL = 20
MAX_LEVEL = 10


@dataclass(frozen=True)
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    # Awarded whenever an active piece settles.
    drop_block_score: int = 10

    def calculate_score(self, lines: int) -> int:
        if lines <= 0:
            return 0
        if 1 <= lines <= 4:
            return self.line_clear_scores[lines - 1]
        return self.line_clear_scores[-1] + (lines - 4) * 400


def level_for_lines(lines: int) -> int:
    return min(MAX_LEVEL, 1 + lines // LINES_PER_LEVEL)
