"""Commands accepted by the game reducer.

The set is closed: the reducer handles every class below and rejects anything
else with ``TypeError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .pieces import Coordinate


class Direction(IntEnum):
    LEFT = 0
    RIGHT = 1
    DOWN = 2
    UP = 3

    @property
    def offset(self) -> Coordinate:
        return _OFFSETS[self]


_OFFSETS = {
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.UP: (0, -1),
}


class Command:
    """Base class of every command."""


@dataclass(frozen=True)
class Move(Command):
    direction: Direction


@dataclass(frozen=True)
class Reset(Command):
    pass


@dataclass(frozen=True)
class Pause(Command):
    pass


@dataclass(frozen=True)
class Resume(Command):
    pass


@dataclass(frozen=True)
class Rotate(Command):
    pass


@dataclass(frozen=True)
class Drop(Command):
    pass


@dataclass(frozen=True)
class GameTick(Command):
    pass


# Settings toggles


@dataclass(frozen=True)
class Mute(Command):
    pass


@dataclass(frozen=True)
class DarkMode(Command):
    pass


@dataclass(frozen=True)
class UseNauts(Command):
    pass


@dataclass(frozen=True)
class UseGhostBlock(Command):
    pass


@dataclass(frozen=True)
class ShowGridOutline(Command):
    pass


@dataclass(frozen=True)
class ShowBackgroundArt(Command):
    pass


# Valued settings


@dataclass(frozen=True)
class NautProbability(Command):
    value: int


@dataclass(frozen=True)
class GridWidth(Command):
    value: int


@dataclass(frozen=True)
class GridHeight(Command):
    value: int


@dataclass(frozen=True)
class GameSpeed(Command):
    value: int


RESET = Reset()
PAUSE = Pause()
RESUME = Resume()
ROTATE = Rotate()
DROP = Drop()
GAME_TICK = GameTick()
MUTE = Mute()
DARK_MODE = DarkMode()
USE_NAUTS = UseNauts()
USE_GHOST_BLOCK = UseGhostBlock()
SHOW_GRID_OUTLINE = ShowGridOutline()
SHOW_BACKGROUND_ART = ShowBackgroundArt()

SETTINGS_COMMANDS = (
    Mute,
    DarkMode,
    UseNauts,
    UseGhostBlock,
    ShowGridOutline,
    ShowBackgroundArt,
    NautProbability,
    GridWidth,
    GridHeight,
    GameSpeed,
)
