"""Gymnasium environments for Tetrominauts."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="Tetrominauts-v0",
    entry_point="tetrominauts.env.tetrominauts_env:TetrominautsEnv",
)

__all__ = ["Tetrominauts-v0"]
