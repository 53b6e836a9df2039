from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np


Shape = np.ndarray


def _freeze(cells: Shape) -> Shape:
    cells = np.array(cells, dtype=np.bool_)
    cells.flags.writeable = False
    return cells


@dataclass(frozen=True, eq=False)
class Piece:
    """A falling piece: a square grid of filled/empty cells and one color.

    The grid is always square so it can be rotated in place.
    """

    kind: str
    cells: Shape
    color: str

    def __post_init__(self) -> None:
        cells = _freeze(self.cells)
        assert cells.ndim == 2 and cells.shape[0] == cells.shape[1] >= 1, "Piece grid must be square"
        object.__setattr__(self, "cells", cells)

    @classmethod
    def from_rows(cls, kind: str, rows: Sequence[Sequence[int]], color: str) -> "Piece":
        return cls(kind=kind, cells=np.array(rows, dtype=np.bool_), color=color)

    @property
    def size(self) -> int:
        return int(self.cells.shape[0])

    def filled_offsets(self) -> np.ndarray:
        """(row, col) offsets of filled cells inside the piece grid, shape (k, 2)."""
        return np.argwhere(self.cells)

    def same_cells(self, other: "Piece") -> bool:
        return np.array_equal(self.cells, other.cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return self.kind == other.kind and self.color == other.color and self.same_cells(other)

    def __hash__(self) -> int:
        return hash((self.kind, self.color, self.cells.shape, self.cells.tobytes()))


def rotate_right(piece: Piece) -> Piece:
    # out[r][c] == in[N-1-c][r]
    return Piece(piece.kind, np.rot90(piece.cells, k=-1), piece.color)


def rotate_left(piece: Piece) -> Piece:
    # out[r][c] == in[c][N-1-r]
    return Piece(piece.kind, np.rot90(piece.cells, k=1), piece.color)


PIECES: Dict[str, Piece] = {
    "I": Piece.from_rows(
        "I",
        [
            [0, 0, 0, 0],
            [1, 1, 1, 1],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ],
        "#00ffff",
    ),
    "O": Piece.from_rows("O", [[1, 1], [1, 1]], "#ffff00"),
    "T": Piece.from_rows("T", [[0, 0, 0], [1, 1, 1], [0, 1, 0]], "#ff00fe"),
    "J": Piece.from_rows("J", [[0, 1, 0], [0, 1, 0], [1, 1, 0]], "#0000fe"),
    "L": Piece.from_rows("L", [[0, 1, 0], [0, 1, 0], [0, 1, 1]], "#ff7f00"),
    "S": Piece.from_rows("S", [[0, 0, 0], [0, 1, 1], [1, 1, 0]], "#23fe40"),
    "Z": Piece.from_rows("Z", [[0, 0, 0], [1, 1, 0], [0, 1, 1]], "#fe161d"),
}
