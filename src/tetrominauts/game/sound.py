from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol


logger = logging.getLogger(__name__)


class SoundType(Enum):
    MOVE = "move"
    ROTATE = "rotate"
    DROP = "drop"
    CLEAN = "clean"
    START = "start"
    GAME_OVER = "game_over"


class SoundNotifier(Protocol):
    """Fire-and-forget sound sink. Implementations must not block."""

    def play(self, muted: bool, kind: SoundType) -> None: ...


class NullSound:
    def play(self, muted: bool, kind: SoundType) -> None:
        if not muted:
            logger.debug("sound %s", kind.value)
