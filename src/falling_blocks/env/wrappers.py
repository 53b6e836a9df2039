from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .falling_blocks_env import _compute_action_mask


class ResampleBlockedMoveWrapper(gym.Wrapper):
    """If a sampled move would be rejected, resample uniformly among accepted ones.

    Useful for random or untrained agents that would otherwise waste steps
    pushing against walls.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        assert isinstance(env.action_space, spaces.Discrete)

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.env.unwrapped.state)

    def step(self, action):  # type: ignore[override]
        mask = self.get_action_mask()
        if 0 <= int(action) < mask.shape[0] and not bool(mask[int(action)]):
            valid_idxs = np.flatnonzero(mask)
            if valid_idxs.size > 0:
                action = int(self.np_random.choice(valid_idxs))
        return self.env.step(action)
