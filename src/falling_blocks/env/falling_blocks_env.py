from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
import pygame
from gymnasium import spaces

from falling_blocks.game import Engine, GameConfig, GameState, Move, RandomPieceSource, candidate_state
from falling_blocks.game.engine import collides
from falling_blocks.visualization.renderer import Renderer, color_for_value


def _compute_action_mask(state: GameState) -> np.ndarray:
    mask = np.zeros((len(Move),), dtype=np.bool_)
    if state.is_done:
        return mask
    for move in Move:
        if move in (Move.DOWN, Move.DROP):
            # Always accepted: either moves the piece or lands it
            mask[move] = True
        else:
            mask[move] = not collides(candidate_state(state, move))
    return mask


class FallingBlocksEnv(gym.Env):
    """Gymnasium wrapper around the transition engine.

    One discrete action per Move. The observation is the board with fixed
    cells as 1 and the falling piece as -1. Reward is the number of rows
    cleared by the step.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.engine = Engine(self.config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.config.height, self.config.width
        self.observation_space = spaces.Box(low=-1, high=1, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(Move))

        self.state: GameState = self.engine.new_game()
        self.lines_cleared_total = 0
        self._steps = 0

        # Rendering state (lazy)
        self._renderer: Optional[Renderer] = None
        self._screen: Optional[pygame.Surface] = None

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.state),
            "lines_cleared_total": self.lines_cleared_total,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.state)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.piece_source = RandomPieceSource(seed=seed)
        self.state = self.engine.new_game()
        self.lines_cleared_total = 0
        self._steps = 0
        return self.state.observation(), self._get_info()

    def step(self, action: int):
        move = Move(int(action))
        before = self.state
        self.state = self.engine.next_state(before, move)
        self._steps += 1

        lines = 0
        if self.state.board is not before.board:
            # The piece landed; rows cleared = cells that went in but did not stay
            placed = before.board.count_filled() + int(before.piece.cells.sum())
            lines = (placed - self.state.board.count_filled()) // self.config.width
        self.lines_cleared_total += lines

        terminated = bool(self.state.is_done)
        truncated = self._steps >= self.max_episode_steps
        info = self._get_info()
        info["lines_cleared"] = lines
        return self.state.observation(), float(lines), terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            board = self.state.composite()
            cell = 12
            h, w = board.height, board.width
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    value = board.cell(y, x)
                    color = color_for_value(value, empty=(30, 30, 36))
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        if self.render_mode == "human":
            if self._renderer is None:
                pygame.init()
                self._renderer = Renderer(cell_size=30)
                self._screen = pygame.display.set_mode(
                    self._renderer.surface_size(self.config.height, self.config.width))
                pygame.display.set_caption("Falling Blocks")
            pygame.event.pump()
            self._renderer.draw(self._screen, self.state)
        return None

    def close(self) -> None:
        if self._renderer is not None:
            pygame.quit()
            self._renderer = None
            self._screen = None
