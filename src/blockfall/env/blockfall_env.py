from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, BlockfallGame, GameConfig, TetrominoType
from blockfall.visualization.palette import color_for_value


# Intents an agent may issue; restarting is done through reset()
ENV_ACTIONS = (Action.LEFT, Action.RIGHT, Action.ROTATE, Action.SOFT_DROP, Action.NONE)


class BlockfallEnv(gym.Env):
    """Drives a ``BlockfallGame`` through its intents.

    Each step applies one intent and then advances the engine's scheduler by
    ``frame_ms``, so gravity comes from the engine's own fall timer and speeds
    up with it.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        frame_ms: int = 100,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.game = BlockfallGame(config)
        self.render_mode = render_mode
        self.frame_ms = int(frame_ms)
        self.max_episode_steps = int(max_episode_steps)

        height = self.game.grid.height
        width = self.game.grid.width
        max_id = max(int(t) for t in TetrominoType)
        self.observation_space = spaces.Dict(
            {
                # Locked cells are positive ids, the falling piece is negative
                "board": spaces.Box(low=-max_id, high=max_id, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(max_id + 1),
            }
        )
        self.action_space = spaces.Discrete(len(ENV_ACTIONS))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        next_piece = self.game.session.next_piece
        return {
            "board": self.game.get_state().astype(np.int8),
            "next_piece": int(next_piece.kind) if next_piece is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        s = self.game.session
        return {
            "score": s.score,
            "combo": s.combo,
            "lines_cleared_total": s.lines_cleared_total,
            "fall_interval_ms": s.fall_interval_ms,
            "stack_height": s.grid.stack_height(),
            "holes": s.grid.count_holes(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.catalog.seed(seed)
        self.game.restart()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r} for {self.action_space}")
        score_before = self.game.score
        self.game.handle(ENV_ACTIONS[int(action)])
        if not self.game.game_over:
            self.game.scheduler.advance(self.frame_ms)
        self._steps += 1

        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
            return img
        return None

    def close(self) -> None:
        pass
