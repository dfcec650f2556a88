from __future__ import annotations

import numpy as np

from tetrominauts.env.tetrominauts_env import TetrominautsEnv
from tetrominauts.game.settings import GRID_HEIGHT, GRID_WIDTH, MemoryStore


def _env(**kwargs) -> TetrominautsEnv:
    store = MemoryStore({GRID_WIDTH: 8, GRID_HEIGHT: 12})
    return TetrominautsEnv(store=store, **kwargs)


def test_reset_observation_matches_space():
    env = _env()
    obs, info = env.reset(seed=0)
    assert obs["grid"].shape == (12, 8)
    assert env.observation_space.contains(obs)
    assert 1 <= obs["next"] <= 8
    assert info["score"] == 0
    assert info["level"] == 1


def test_seeded_resets_repeat():
    a, _ = _env().reset(seed=9)
    b, _ = _env().reset(seed=9)
    assert np.array_equal(a["grid"], b["grid"])
    assert a["next"] == b["next"]


def test_hard_drops_in_one_column_end_the_game():
    env = _env()
    env.reset(seed=1)
    total = 0.0
    terminated = False
    for _ in range(200):
        obs, reward, terminated, truncated, info = env.step(TetrominautsEnv.ACT_HARD_DROP)
        assert reward >= 0
        total += reward
        if terminated:
            break
    assert terminated
    assert total == info["score"]


def test_moves_shift_the_falling_piece():
    env = _env()
    obs, _ = env.reset(seed=2)
    before = np.argwhere(obs["grid"] < 0)
    obs, *_ = env.step(TetrominautsEnv.ACT_LEFT)
    after = np.argwhere(obs["grid"] < 0)
    assert len(before) and len(after)
    assert after[:, 1].min() == before[:, 1].min() - 1


def test_truncation():
    env = _env(max_episode_steps=3)
    env.reset(seed=0)
    results = [env.step(TetrominautsEnv.ACT_ROTATE) for _ in range(3)]
    assert results[-1][3] is True


def test_rgb_render():
    env = _env(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (12 * 12, 8 * 12, 3)
    assert img.dtype == np.uint8
