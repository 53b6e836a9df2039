from __future__ import annotations

from typing import Tuple

import numpy as np

from .board import Board
from .pieces import Piece


def has_collision(board: Board, piece: Piece, position: Tuple[int, int]) -> bool:
    """True if any filled piece cell lands off the board or on a filled board cell.

    Off-board lookups count as filled, so walls, floor and the stack are all
    handled by the same rule.
    """
    offsets = piece.filled_offsets()
    if offsets.size == 0:
        return False
    rows = offsets[:, 0] + position[0]
    cols = offsets[:, 1] + position[1]
    inside = (rows >= 0) & (rows < board.height) & (cols >= 0) & (cols < board.width)
    if not np.all(inside):
        return True
    return bool(np.any(board.filled_mask()[rows, cols]))
