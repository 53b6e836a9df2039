from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Callable, Mapping, NamedTuple, Optional

import numpy as np

from .board import Board
from .collision import has_collision
from .pieces import PIECES, Piece, rotate_left, rotate_right


logger = logging.getLogger(__name__)


class Move(IntEnum):
    DOWN = 0
    LEFT = 1
    RIGHT = 2
    ROTATE_LEFT = 3
    ROTATE_RIGHT = 4
    DROP = 5


class Position(NamedTuple):
    row: int
    col: int

    def shifted(self, d_row: int, d_col: int) -> "Position":
        return Position(self.row + d_row, self.col + d_col)


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    spawn_row: int = 0
    spawn_col: int = 3
    random_seed: Optional[int] = None

    @property
    def spawn_position(self) -> Position:
        return Position(self.spawn_row, self.spawn_col)


PieceSource = Callable[[], Piece]


class RandomPieceSource:
    """Uniform choice from a catalog, with its own RNG."""

    def __init__(self, catalog: Optional[Mapping[str, Piece]] = None, seed: Optional[int] = None) -> None:
        self.pieces = list((catalog or PIECES).values())
        assert self.pieces, "Piece catalog is empty"
        self.rng = random.Random(seed)

    def __call__(self) -> Piece:
        return self.rng.choice(self.pieces)


@dataclass(frozen=True)
class GameState:
    board: Board
    piece: Piece
    position: Position
    is_done: bool = False

    def composite(self) -> Board:
        """Board with the falling piece drawn on it, clipped to the board."""
        cells = self.board.cells.copy()
        for dr, dc in self.piece.filled_offsets():
            r, c = self.position.row + int(dr), self.position.col + int(dc)
            if self.board.is_inside(r, c):
                cells[r, c] = self.piece.color
        return Board(cells)

    def observation(self) -> np.ndarray:
        # 1 for fixed cells, -1 for the falling piece overlay
        obs = self.board.filled_mask().astype(np.int8)
        for dr, dc in self.piece.filled_offsets():
            r, c = self.position.row + int(dr), self.position.col + int(dc)
            if self.board.is_inside(r, c):
                obs[r, c] = -1
        return obs


def candidate_state(state: GameState, move: Move) -> GameState:
    """Apply a move in isolation, without checking collision."""
    if move == Move.LEFT:
        return replace(state, position=state.position.shifted(0, -1))
    if move == Move.RIGHT:
        return replace(state, position=state.position.shifted(0, 1))
    if move == Move.DOWN:
        return replace(state, position=state.position.shifted(1, 0))
    if move == Move.ROTATE_LEFT:
        return replace(state, piece=rotate_left(state.piece))
    if move == Move.ROTATE_RIGHT:
        return replace(state, piece=rotate_right(state.piece))
    return state


def collides(state: GameState) -> bool:
    return has_collision(state.board, state.piece, state.position)


class Engine:
    """Pure transition function over GameState values.

    The engine holds configuration and the piece source only; drivers own the
    current state and pass it in on every call.
    """

    def __init__(self, config: Optional[GameConfig] = None, piece_source: Optional[PieceSource] = None,
                 catalog: Optional[Mapping[str, Piece]] = None) -> None:
        self.config = config or GameConfig()
        self.piece_source = piece_source or RandomPieceSource(catalog, self.config.random_seed)

    def new_game(self) -> GameState:
        return GameState(
            board=Board.empty(self.config.height, self.config.width),
            piece=self.piece_source(),
            position=self.config.spawn_position,
        )

    def _land(self, state: GameState) -> GameState:
        board = state.board.fix_piece(state.piece, state.position)
        full = board.full_rows()
        if full.size:
            logger.debug("Clearing rows %s", full.tolist())
            board = board.clear_full_rows()
        spawned = GameState(board=board, piece=self.piece_source(), position=self.config.spawn_position)
        if collides(spawned):
            logger.debug("Spawned %s collides at %s, game over", spawned.piece.kind, spawned.position)
            return replace(spawned, is_done=True)
        return spawned

    def hard_drop(self, state: GameState) -> GameState:
        position = state.position
        while not has_collision(state.board, state.piece, position.shifted(1, 0)):
            position = position.shifted(1, 0)
        return self._land(replace(state, position=position))

    def next_state(self, state: GameState, move: Move) -> GameState:
        if state.is_done:
            return state
        if move == Move.DROP:
            return self.hard_drop(state)

        candidate = candidate_state(state, move)
        if not collides(candidate):
            return candidate
        if move == Move.DOWN:
            return self._land(state)
        # Blocked shift or rotation
        return state
