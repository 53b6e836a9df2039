"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- Board: Immutable grid with piece fixing and row clearing
- Piece: Square piece grid with rotation helpers
- PIECES: The default piece catalog
- has_collision: Collision test for a piece at a board position
- Engine: Transition function producing the next GameState for a Move
"""

from .board import EMPTY, Board
from .collision import has_collision
from .engine import (
    Engine,
    GameConfig,
    GameState,
    Move,
    Position,
    RandomPieceSource,
    candidate_state,
)
from .pieces import PIECES, Piece, rotate_left, rotate_right

__all__ = [
    "EMPTY",
    "Board",
    "Piece",
    "PIECES",
    "rotate_left",
    "rotate_right",
    "has_collision",
    "Engine",
    "GameConfig",
    "GameState",
    "Move",
    "Position",
    "RandomPieceSource",
    "candidate_state",
]
