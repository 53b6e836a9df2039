from __future__ import annotations

from typing import Optional, Tuple

import pygame

from falling_blocks.game import Board, GameState


EMPTY_COLOR = (255, 255, 255)
LINE_COLOR = (0, 0, 0)


def color_for_value(v: Optional[str], empty: Tuple[int, int, int] = EMPTY_COLOR) -> Tuple[int, int, int]:
    """RGB for a board cell; accepts any color string pygame understands."""
    if v is None:
        return empty
    color = pygame.Color(v)
    return color.r, color.g, color.b


class Renderer:
    def __init__(self, cell_size: int = 45, line_width: int = 1) -> None:
        self.cell_size = cell_size
        self.line_width = line_width

    def surface_size(self, height: int, width: int) -> Tuple[int, int]:
        step = self.cell_size + self.line_width
        return width * step + self.line_width, height * step + self.line_width

    def _board_surface(self, board: Board) -> pygame.Surface:
        surf = pygame.Surface(self.surface_size(board.height, board.width))
        surf.fill(LINE_COLOR)
        step = self.cell_size + self.line_width
        for y in range(board.height):
            for x in range(board.width):
                rect = pygame.Rect(
                    x * step + self.line_width,
                    y * step + self.line_width,
                    self.cell_size,
                    self.cell_size,
                )
                pygame.draw.rect(surf, color_for_value(board.cell(y, x)), rect)
        return surf

    def draw(self, screen: pygame.Surface, state: GameState) -> None:
        # The falling piece is drawn as if it were fixed on a copy of the board
        screen.blit(self._board_surface(state.composite()), (0, 0))
        pygame.display.flip()
