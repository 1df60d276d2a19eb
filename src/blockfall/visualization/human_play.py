from __future__ import annotations

import argparse
import logging
import random
from typing import Dict, Optional

import pygame

from blockfall.game import Action, BlockfallGame, GameConfig, GameEvent
from .renderer import Renderer


logger = logging.getLogger(__name__)

KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_a: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_d: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_w: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_s: Action.SOFT_DROP,
    pygame.K_r: Action.RESTART,
}

BANNER_MS = 1500
REWARD_CUES = ("$", "!!!")


class Banner:
    """Transient message shown over the board, cleared after ``BANNER_MS``."""

    def __init__(self) -> None:
        self.text: Optional[str] = None
        self.remaining_ms = 0
        self.sticky = False

    def show(self, text: str, sticky: bool = False) -> None:
        self.text = text
        self.remaining_ms = BANNER_MS
        self.sticky = sticky

    def clear(self) -> None:
        self.text = None
        self.sticky = False

    def update(self, elapsed_ms: int) -> None:
        if self.text is None or self.sticky:
            return
        self.remaining_ms -= elapsed_ms
        if self.remaining_ms <= 0:
            self.text = None


def attach_banner(game: BlockfallGame, banner: Banner) -> None:
    def on_lines(count: int, origin_row: Optional[int]) -> None:
        banner.show(f"{count} line{'s' if count > 1 else ''}!")

    def on_reward() -> None:
        banner.show(random.choice(REWARD_CUES))

    def on_speed(interval_ms: int) -> None:
        if interval_ms != game.speed.initial_interval_ms:
            banner.show("SPEED UP!")

    def on_game_over() -> None:
        banner.show("Game Over - Press R to restart, ESC to quit", sticky=True)

    def on_score(score: int, delta: int, origin_row: Optional[int]) -> None:
        if delta == 0 and score == 0:
            banner.clear()

    game.events.register(GameEvent.LINES_CLEARED, on_lines)
    game.events.register(GameEvent.REWARD_CUE, on_reward)
    game.events.register(GameEvent.SPEED_CHANGED, on_speed)
    game.events.register(GameEvent.GAME_OVER, on_game_over)
    game.events.register(GameEvent.SCORE_CHANGED, on_score)


def run(seed: Optional[int] = None, cell_size: int = 28, fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockfallGame(GameConfig(random_seed=seed))
        renderer = Renderer(cell_size=cell_size)
        banner = Banner()
        attach_banner(game, banner)

        screen = pygame.display.set_mode(renderer.window_size(game.grid.width, game.grid.height))
        pygame.display.set_caption("Blockfall")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.handle(action)

            # Gravity comes from the engine's own timer
            elapsed = clock.tick(fps)
            game.scheduler.advance(elapsed)
            banner.update(elapsed)

            renderer.draw(screen, game.get_state(), game.session, banner.text)
            pygame.display.flip()
        logger.info("Final score %d, %d lines", game.score, game.session.lines_cleared_total)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Blockfall with the keyboard.")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run(seed=args.seed, cell_size=args.cell_size, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
