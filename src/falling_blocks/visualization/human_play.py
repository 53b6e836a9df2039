from __future__ import annotations

import argparse
from typing import Dict

import pygame

from falling_blocks.game import Engine, GameConfig, Move
from .renderer import Renderer


KEY_TO_MOVE: Dict[int, Move] = {
    pygame.K_LEFT: Move.LEFT,
    pygame.K_RIGHT: Move.RIGHT,
    pygame.K_DOWN: Move.DOWN,
    pygame.K_UP: Move.ROTATE_RIGHT,
    pygame.K_z: Move.ROTATE_LEFT,
    pygame.K_SPACE: Move.DROP,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the keyboard")
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity_ms", type=int, default=900)
    p.add_argument("--cell_size", type=int, default=45)
    return p


def run(config: GameConfig | None = None, gravity_ms: int = 900, cell_size: int = 45) -> None:
    config = config or GameConfig()
    pygame.init()
    try:
        clock = pygame.time.Clock()
        engine = Engine(config)
        renderer = Renderer(cell_size=cell_size)
        state = engine.new_game()

        screen = pygame.display.set_mode(renderer.surface_size(config.height, config.width))
        pygame.display.set_caption("Falling Blocks")

        last_fall = pygame.time.get_ticks()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r and state.is_done:
                        state = engine.new_game()
                        last_fall = pygame.time.get_ticks()
                    elif not state.is_done:
                        move = KEY_TO_MOVE.get(event.key)
                        if move is not None:
                            state = engine.next_state(state, move)

            # Gravity stops once the game is over
            now = pygame.time.get_ticks()
            if not state.is_done and now - last_fall >= gravity_ms:
                state = engine.next_state(state, Move.DOWN)
                last_fall = now

            renderer.draw(screen, state)

            if state.is_done:
                font = pygame.font.SysFont(None, 36)
                text = font.render("Game Over - R to restart, ESC to quit", True, (200, 0, 0))
                rect = text.get_rect(center=(screen.get_width() // 2, 30))
                screen.blit(text, rect)
                pygame.display.flip()

            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    config = GameConfig(width=args.width, height=args.height, random_seed=args.seed,
                        spawn_col=max(0, (args.width - 4) // 2))
    run(config, gravity_ms=args.gravity_ms, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
