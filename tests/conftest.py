from __future__ import annotations

from typing import List, Tuple

import pytest

from tetrominauts.game import actions
from tetrominauts.game.core import GameConfig, TetrominautsGame
from tetrominauts.game.settings import MemoryStore
from tetrominauts.game.sound import SoundType
from tetrominauts.game.state import ViewState


class RecordingSound:
    def __init__(self) -> None:
        self.played: List[Tuple[bool, SoundType]] = []

    def play(self, muted: bool, kind: SoundType) -> None:
        self.played.append((muted, kind))

    def kinds(self) -> List[SoundType]:
        return [kind for _, kind in self.played]


@pytest.fixture
def sound() -> RecordingSound:
    return RecordingSound()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def game(store: MemoryStore, sound: RecordingSound) -> TetrominautsGame:
    config = GameConfig(random_seed=1234, line_clear_delay=0.0, screen_clear_delay=0.0)
    return TetrominautsGame(config, store=store, sound=sound)


@pytest.fixture
def running(game: TetrominautsGame) -> ViewState:
    return game.reduce(game.initial_state(), actions.RESET).final
