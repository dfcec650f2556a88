"""Persisted player settings.

Settings live in a flat key/value store. ``Settings.load`` is the single place
where stored values are validated: integers are clamped to their range and
anything of the wrong type falls back to its default.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Protocol, Tuple

from .pieces import Matrix


logger = logging.getLogger(__name__)

GRID_WIDTH = "grid_width"
GRID_HEIGHT = "grid_height"
DARK_MODE = "dark_mode"
MUTE = "mute"
USE_NAUTS = "use_nauts"
USE_GHOST_BLOCK = "use_ghost_block"
SHOW_GRID_OUTLINE = "show_grid_outline"
SHOW_BACKGROUND_ART = "show_background_art"
GAME_SPEED = "game_speed"
NAUT_PROBABILITY = "naut_probability"

INT_RANGES: Dict[str, Tuple[int, int]] = {
    GRID_WIDTH: (4, 32),
    GRID_HEIGHT: (4, 48),
    GAME_SPEED: (1, 10),
    NAUT_PROBABILITY: (0, 10),
}


class SettingsStore(Protocol):
    def get(self, key: str, default: Any) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryStore:
    """Dict-backed store, handy for tests and headless runs."""

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        self.values: Dict[str, Any] = dict(values or {})

    def get(self, key: str, default: Any) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value


class JsonFileStore:
    """Store persisted as one JSON object; rewritten on every ``set``."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.values: Dict[str, Any] = {}
        if os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as fh:
                    data = json.load(fh)
            except (OSError, ValueError):
                logger.warning("Ignoring unreadable settings file %s", path, exc_info=True)
                data = {}
            if isinstance(data, dict):
                self.values = data

    def get(self, key: str, default: Any) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        values = dict(self.values)
        values[key] = value
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        # write beside the target and swap, so a crash never leaves half a file
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".settings-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(values, fh, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise
        self.values = values


def clamp_setting(key: str, value: int) -> int:
    low, high = INT_RANGES[key]
    return max(low, min(high, int(value)))


@dataclass(frozen=True)
class Settings:
    grid_width: int = 12
    grid_height: int = 24
    dark_mode: bool = True
    mute: bool = False
    use_nauts: bool = True
    use_ghost_block: bool = True
    show_grid_outline: bool = False
    show_background_art: bool = True
    game_speed: int = 3
    naut_probability: int = 6

    @property
    def matrix(self) -> Matrix:
        return Matrix(self.grid_width, self.grid_height)

    @classmethod
    def load(cls, store: SettingsStore) -> "Settings":
        values: Dict[str, Any] = {}
        for f in fields(cls):
            raw = store.get(f.name, f.default)
            if f.name in INT_RANGES:
                # bool is an int subclass; it is never a valid size or speed
                if isinstance(raw, bool) or not isinstance(raw, int):
                    logger.warning("Setting %s=%r is not an integer, using %r", f.name, raw, f.default)
                    raw = f.default
                values[f.name] = clamp_setting(f.name, raw)
            else:
                if not isinstance(raw, bool):
                    logger.warning("Setting %s=%r is not a boolean, using %r", f.name, raw, f.default)
                    raw = f.default
                values[f.name] = raw
        return cls(**values)
