from __future__ import annotations

import argparse
import logging
from typing import Callable, Dict, Optional

import pygame

from tetris_engine.game import GameConfig, GameState, TetrisGame, TickDriver
from tetris_engine.scores import HighScoreTable, ScoreRecorder
from .renderer import Renderer


def key_bindings(game: TetrisGame) -> Dict[int, Callable[[], object]]:
    return {
        pygame.K_LEFT: lambda: game.apply_move(-1),
        pygame.K_RIGHT: lambda: game.apply_move(1),
        pygame.K_UP: lambda: game.apply_rotate(1),
        pygame.K_z: lambda: game.apply_rotate(-1),
        pygame.K_DOWN: game.soft_drop,
        pygame.K_SPACE: game.hard_drop,
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--name", type=str, default=None, help="Name recorded with high scores")
    p.add_argument("--scores", type=str, default="tetris-scores.json", help="High score file")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run(argv: Optional[list] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    table = HighScoreTable(args.scores)
    table.load()

    game = TetrisGame(GameConfig(random_seed=args.seed))

    recorder = ScoreRecorder(table, args.name)
    game.add_game_over_listener(recorder)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Tetris")

        driver = TickDriver(game, pygame.time.get_ticks)
        bindings = key_bindings(game)

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_RETURN:
                        if game.state in (GameState.IDLE, GameState.GAME_OVER):
                            recorder.clear()
                            driver.start()
                    elif event.key == pygame.K_p:
                        driver.toggle_pause()
                    elif event.key == pygame.K_r:
                        if game.state is GameState.PAUSED:
                            recorder.clear()
                            driver.restart()
                    else:
                        intent = bindings.get(event.key)
                        if intent is not None:
                            intent()

            # Gravity
            driver.pump()

            renderer.draw(screen, game.snapshot(), table.top(5), new_high_score=recorder.last_was_high)
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
