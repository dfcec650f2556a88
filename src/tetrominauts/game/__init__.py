"""Game module for Tetrominauts.

Exports the engine and its building blocks:
- DropBlock, Block, PieceType, Matrix: piece geometry and rotation tables
- update_blocks, dropped_position, board_array: board merging and line clearing
- PieceGenerator: 7-bag randomizer with naut injection
- ScoringRules, level_for_lines: scoring and level progression
- ViewState, GameStatus: the published snapshot
- TetrominautsGame: the pure state machine
- GameEngine, TickDriver: asyncio single-writer actor and tick source
"""

from .pieces import EMPTY, PREVIEW_MATRIX, Block, DropBlock, Matrix, PieceType
from .grid import ClearFrames, board_array, dropped_position, update_blocks
from .generator import PieceGenerator
from .rules import ScoringRules, level_for_lines
from .settings import JsonFileStore, MemoryStore, Settings
from .sound import NullSound, SoundType
from .state import GameStatus, ViewState
from .core import Frame, GameConfig, InvariantViolation, TetrominautsGame, Transition
from .engine import GameEngine, TickDriver

__all__ = [
    "EMPTY",
    "PREVIEW_MATRIX",
    "Block",
    "DropBlock",
    "Matrix",
    "PieceType",
    "ClearFrames",
    "board_array",
    "dropped_position",
    "update_blocks",
    "PieceGenerator",
    "ScoringRules",
    "level_for_lines",
    "JsonFileStore",
    "MemoryStore",
    "Settings",
    "NullSound",
    "SoundType",
    "GameStatus",
    "ViewState",
    "Frame",
    "GameConfig",
    "InvariantViolation",
    "TetrominautsGame",
    "Transition",
    "GameEngine",
    "TickDriver",
]
