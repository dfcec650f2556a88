from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Tuple

from .pieces import EMPTY, Block, DropBlock, Matrix
from .rules import level_for_lines
from .settings import Settings


class GameStatus(Enum):
    ONBOARD = "onboard"
    RUNNING = "running"
    LINE_CLEARING = "line_clearing"
    PAUSED = "paused"
    SCREEN_CLEARING = "screen_clearing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class ViewState:
    """Immutable snapshot of everything a renderer needs.

    ``matrix`` is the board in play; ``grid_size`` is the persisted size that
    the next reset will use.
    """

    matrix: Matrix
    grid_size: Matrix
    blocks: Tuple[Block, ...] = ()
    drop_block: DropBlock = EMPTY
    drop_block_reserve: Tuple[DropBlock, ...] = ()
    ghost_block: DropBlock = EMPTY
    game_status: GameStatus = GameStatus.ONBOARD
    score: int = 0
    line: int = 0
    is_mute: bool = False
    is_dark_mode: bool = True
    show_background_art: bool = True
    use_nauts: bool = True
    use_ghost_block: bool = True
    show_grid_outline: bool = False
    naut_probability: int = 6
    game_speed: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> "ViewState":
        return cls(
            matrix=settings.matrix,
            grid_size=settings.matrix,
            is_mute=settings.mute,
            is_dark_mode=settings.dark_mode,
            show_background_art=settings.show_background_art,
            use_nauts=settings.use_nauts,
            use_ghost_block=settings.use_ghost_block,
            show_grid_outline=settings.show_grid_outline,
            naut_probability=settings.naut_probability,
            game_speed=settings.game_speed,
        )

    @property
    def level(self) -> int:
        return level_for_lines(self.line)

    @property
    def drop_block_next(self) -> DropBlock:
        return self.drop_block_reserve[0] if self.drop_block_reserve else EMPTY

    @property
    def is_paused(self) -> bool:
        return self.game_status is GameStatus.PAUSED

    @property
    def is_running(self) -> bool:
        return self.game_status is GameStatus.RUNNING

    def copy(self, **changes: Any) -> "ViewState":
        return replace(self, **changes)
