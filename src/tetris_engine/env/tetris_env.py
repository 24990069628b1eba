from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris_engine.game import Action, GameConfig, TetrisGame, TetrominoType
from tetris_engine.visualization.palette import color_for_value


class TetrisEnv(gym.Env):
    """Single-player falling-block environment.

    Each step applies one `Action` intent and then advances the game clock by
    `step_ms`, so gravity still pulls pieces down when the agent idles.
    Reward is the engine's score delta for the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 step_ms: float = 100.0, max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = TetrisGame(config)
        self.render_mode = render_mode
        self.step_ms = float(step_ms)
        self.max_episode_steps = int(max_episode_steps)

        width = self.game.config.width
        height = self.game.config.height
        n_types = len(TetrominoType)

        # Observation: locked cells (positive ids) with the falling piece as negative ids
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-n_types, high=n_types, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(n_types + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        session = self.game.session
        next_piece = 0
        if session is not None and session.next_piece is not None:
            next_piece = int(session.next_piece.kind)
        return {"board": self.game.get_state().astype(np.int8), "next_piece": next_piece}

    def _get_info(self) -> Dict[str, Any]:
        session = self.game.session
        return {
            "score": session.score,
            "level": session.level,
            "lines_cleared_total": session.lines_cleared_total,
            "stack_height": session.board.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.restart()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        if self.game.session is None:
            self.game.start()
        score_before = self.game.session.score
        self.game.step(Action(int(action)))
        self.game.tick(self.step_ms)
        self._steps += 1

        reward = float(self.game.session.score - score_before)
        terminated = bool(self.game.session.is_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.game.get_state()
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
        return img

    def close(self) -> None:
        pass
