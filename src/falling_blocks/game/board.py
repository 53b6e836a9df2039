from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .pieces import Piece


EMPTY = None
Coordinate = Tuple[int, int]


def _freeze(cells: np.ndarray) -> np.ndarray:
    cells = np.array(cells, dtype=object)
    cells.flags.writeable = False
    return cells


@dataclass(frozen=True, eq=False)
class Board:
    """Fixed-size grid of settled cells.

    Each cell is ``EMPTY`` (None) or the color string of the piece that was
    fixed there. Row 0 is the top. Boards are immutable: every operation
    returns a new board backed by its own copy of the cells.
    """

    cells: np.ndarray

    def __post_init__(self) -> None:
        cells = _freeze(self.cells)
        assert cells.ndim == 2, "Board must be a 2D grid"
        object.__setattr__(self, "cells", cells)

    @classmethod
    def empty(cls, height: int, width: int) -> "Board":
        return cls(np.full((int(height), int(width)), EMPTY, dtype=object))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[str]]]) -> "Board":
        widths = {len(row) for row in rows}
        assert len(widths) == 1, "All board rows must have the same width"
        cells = np.empty((len(rows), widths.pop()), dtype=object)
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                cells[r, c] = value
        return cls(cells)

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def cell(self, row: int, col: int) -> Optional[str]:
        return self.cells[row, col]

    def is_filled(self, row: int, col: int) -> bool:
        """Off-board coordinates read as filled."""
        if not self.is_inside(row, col):
            return True
        return self.cells[row, col] is not EMPTY

    def filled_mask(self) -> np.ndarray:
        return np.not_equal(self.cells, EMPTY).astype(np.bool_)

    def count_filled(self) -> int:
        return int(self.filled_mask().sum())

    def full_rows(self) -> np.ndarray:
        return np.where(np.all(self.filled_mask(), axis=1))[0]

    def fix_piece(self, piece: Piece, position: Coordinate) -> "Board":
        """Write every filled piece cell onto a copy of the board as ``piece.color``."""
        row, col = position
        cells = self.cells.copy()
        for dr, dc in piece.filled_offsets():
            r, c = row + int(dr), col + int(dc)
            assert self.is_inside(r, c), f"Fixing piece {piece.kind} outside the board at {(r, c)}"
            cells[r, c] = piece.color
        return Board(cells)

    def clear_full_rows(self) -> "Board":
        full = np.all(self.filled_mask(), axis=1)
        num = int(full.sum())
        if num == 0:
            return Board(self.cells.copy())
        # Remove full rows and add empty rows at the top
        kept = self.cells[~full]
        new_rows = np.full((num, self.width), EMPTY, dtype=object)
        cells = np.vstack((new_rows, kept))
        assert cells.shape == self.cells.shape
        return Board(cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells.shape == other.cells.shape and bool(np.all(self.cells == other.cells))

    def __hash__(self) -> int:
        return hash((self.cells.shape, tuple(self.cells.ravel().tolist())))
