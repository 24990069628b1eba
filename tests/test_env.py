import gymnasium as gym
import numpy as np

import tetris_engine.env  # noqa: F401
from tetris_engine.env.tetris_env import TetrisEnv
from tetris_engine.game import Action


def test_reset_and_step_shapes():
    env = gym.make("Tetris-10x20-v0")
    obs, info = env.reset(seed=0)
    assert obs["board"].shape == (20, 10)
    assert obs["board"].dtype == np.int8
    assert 1 <= obs["next_piece"] <= 7
    assert info["score"] == 0

    obs, reward, terminated, truncated, info = env.step(int(Action.LEFT))
    assert reward == 0.0
    assert not terminated and not truncated
    env.close()


def test_hard_drops_eventually_terminate():
    env = TetrisEnv()
    env.reset(seed=1)
    terminated = False
    for _ in range(300):
        _, reward, terminated, truncated, info = env.step(int(Action.HARD_DROP))
        assert reward >= 0.0
        if terminated:
            break
    assert terminated
    assert info["stack_height"] > 0


def test_truncates_at_step_limit():
    env = TetrisEnv(max_episode_steps=3)
    env.reset(seed=2)
    results = [env.step(int(Action.NONE)) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_same_seed_same_pieces():
    a, b = TetrisEnv(), TetrisEnv()
    obs_a, _ = a.reset(seed=9)
    obs_b, _ = b.reset(seed=9)
    assert np.array_equal(obs_a["board"], obs_b["board"])
    assert obs_a["next_piece"] == obs_b["next_piece"]


def test_rgb_render():
    env = TetrisEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (240, 120, 3)
    assert img.dtype == np.uint8
