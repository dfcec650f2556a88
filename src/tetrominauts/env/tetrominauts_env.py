from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetrominauts.game import actions
from tetrominauts.game.core import GameConfig, TetrominautsGame
from tetrominauts.game.grid import board_array, count_holes, max_height
from tetrominauts.game.settings import MemoryStore, SettingsStore
from tetrominauts.game.state import GameStatus, ViewState


_PALETTE = np.array(
    [
        (30, 30, 36),    # empty
        (0, 240, 240),   # I
        (240, 240, 0),   # O
        (160, 0, 240),   # T
        (0, 240, 0),     # S
        (240, 0, 0),     # Z
        (0, 0, 240),     # J
        (240, 160, 0),   # L
        (230, 230, 230), # naut
    ],
    dtype=np.uint8,
)


class TetrominautsEnv(gym.Env):
    """Headless environment over the game reducer.

    Actions (5 total):
      0: Move left
      1: Move right
      2: Rotate
      3: Soft drop (one game tick)
      4: Hard drop (drop, then the tick that settles the piece)

    Animations are collapsed to their final frame, so every step observes a
    settled board.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    ACT_LEFT = 0
    ACT_RIGHT = 1
    ACT_ROTATE = 2
    ACT_SOFT_DROP = 3
    ACT_HARD_DROP = 4

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        store: Optional[SettingsStore] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = TetrominautsGame(config, store=store if store is not None else MemoryStore())
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self.state: ViewState = self.game.initial_state()
        self._steps = 0

        h, w = self.state.grid_size.height, self.state.grid_size.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-9, high=9, shape=(h, w), dtype=np.int8),
                # color index + 1 of the next piece, 0 when none
                "next": spaces.Discrete(9),
            }
        )
        self.action_space = spaces.Discrete(5)

    def _apply(self, command: actions.Command) -> None:
        self.state = self.game.reduce(self.state, command).final

    def _get_obs(self) -> Dict[str, Any]:
        grid = board_array(self.state.blocks, self.state.matrix, self.state.drop_block)
        upcoming = self.state.drop_block_next
        return {
            "grid": grid,
            "next": 0 if upcoming.is_empty else upcoming.color + 1,
        }

    def _get_info(self) -> Dict[str, Any]:
        settled = board_array(self.state.blocks, self.state.matrix)
        return {
            "score": self.state.score,
            "lines": self.state.line,
            "level": self.state.level,
            "holes": count_holes(settled),
            "max_height": max_height(settled),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.generator.seed(seed)
        self.state = self.game.initial_state()
        self._apply(actions.RESET)
        # First tick spawns the opening piece.
        self._apply(actions.GAME_TICK)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = int(action)
        score_before = self.state.score

        if action == self.ACT_LEFT:
            self._apply(actions.Move(actions.Direction.LEFT))
        elif action == self.ACT_RIGHT:
            self._apply(actions.Move(actions.Direction.RIGHT))
        elif action == self.ACT_ROTATE:
            self._apply(actions.ROTATE)
        elif action == self.ACT_SOFT_DROP:
            self._apply(actions.GAME_TICK)
        elif action == self.ACT_HARD_DROP:
            self._apply(actions.DROP)
            self._apply(actions.GAME_TICK)
        else:
            raise ValueError(f"invalid action {action}")

        self._steps += 1
        terminated = self.state.game_status is GameStatus.GAME_OVER
        truncated = self._steps >= self.max_episode_steps
        reward = float(self.state.score - score_before)
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = np.abs(board_array(self.state.blocks, self.state.matrix, self.state.drop_block))
        cell = 12
        img = _PALETTE[grid]
        return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)

    def close(self) -> None:
        pass
