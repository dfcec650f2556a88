from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import Callable, Dict, Optional, Tuple, Type

import pygame

from tetrominauts.game import actions
from tetrominauts.game.core import TetrominautsGame
from tetrominauts.game.engine import GameEngine, TickDriver
from tetrominauts.game.settings import JsonFileStore
from tetrominauts.game.state import ViewState
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, actions.Command] = {
    pygame.K_LEFT: actions.Move(actions.Direction.LEFT),
    pygame.K_RIGHT: actions.Move(actions.Direction.RIGHT),
    pygame.K_DOWN: actions.Move(actions.Direction.DOWN),
    # Up is a hard drop, not a move.
    pygame.K_UP: actions.Move(actions.Direction.UP),
    pygame.K_SPACE: actions.ROTATE,
    pygame.K_r: actions.RESET,
    pygame.K_m: actions.MUTE,
    pygame.K_d: actions.DARK_MODE,
    pygame.K_n: actions.USE_NAUTS,
    pygame.K_g: actions.USE_GHOST_BLOCK,
    pygame.K_o: actions.SHOW_GRID_OUTLINE,
    pygame.K_b: actions.SHOW_BACKGROUND_ART,
}

# Keys that step a valued setting up or down from its current value.
KEY_TO_STEP: Dict[int, Tuple[Type[actions.Command], int]] = {
    pygame.K_EQUALS: (actions.GameSpeed, 1),
    pygame.K_KP_PLUS: (actions.GameSpeed, 1),
    pygame.K_MINUS: (actions.GameSpeed, -1),
    pygame.K_KP_MINUS: (actions.GameSpeed, -1),
    pygame.K_RIGHTBRACKET: (actions.NautProbability, 1),
    pygame.K_LEFTBRACKET: (actions.NautProbability, -1),
    pygame.K_PERIOD: (actions.GridWidth, 1),
    pygame.K_COMMA: (actions.GridWidth, -1),
    pygame.K_PAGEDOWN: (actions.GridHeight, 1),
    pygame.K_PAGEUP: (actions.GridHeight, -1),
}

_CURRENT_VALUE: Dict[Type[actions.Command], Callable[[ViewState], int]] = {
    actions.GameSpeed: lambda s: s.game_speed,
    actions.NautProbability: lambda s: s.naut_probability,
    actions.GridWidth: lambda s: s.grid_size.width,
    actions.GridHeight: lambda s: s.grid_size.height,
}


def command_for_key(key: int, state: ViewState) -> Optional[actions.Command]:
    """Map a key press to a command, given the snapshot currently on screen."""
    if key == pygame.K_p:
        return actions.PAUSE if state.is_running else actions.RESUME
    if key in KEY_TO_STEP:
        # out-of-range values are clamped by the game
        command_type, step = KEY_TO_STEP[key]
        return command_type(_CURRENT_VALUE[command_type](state) + step)
    return KEY_TO_COMMAND.get(key)

DEFAULT_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".tetrominauts", "settings.json")


async def play(settings_path: str = DEFAULT_SETTINGS_PATH, fps: int = 60) -> None:
    game = TetrominautsGame(store=JsonFileStore(settings_path))
    renderer = Renderer(cell_size=24)
    async with GameEngine(game) as engine:
        ticker = TickDriver(engine)
        ticker.start()
        matrix = engine.state.matrix
        screen = pygame.display.set_mode(renderer.window_size(matrix))
        pygame.display.set_caption("Tetrominauts")
        try:
            running = True
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        if event.key == pygame.K_ESCAPE:
                            running = False
                        else:
                            command = command_for_key(event.key, engine.state)
                            if command is not None:
                                engine.dispatch(command)

                state = engine.state
                if state.matrix != matrix:
                    matrix = state.matrix
                    screen = pygame.display.set_mode(renderer.window_size(matrix))
                renderer.draw(screen, state)
                await asyncio.sleep(1 / fps)
        finally:
            await ticker.stop()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--settings", type=str, default=DEFAULT_SETTINGS_PATH)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--verbose", action="store_true")
    return p


def run() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    pygame.init()
    try:
        asyncio.run(play(args.settings, args.fps))
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
