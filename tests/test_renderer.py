from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame
import pytest

from tetrominauts.game import actions
from tetrominauts.game.pieces import Block, DropBlock, Matrix, PieceType
from tetrominauts.visualization.renderer import Renderer, color_for_index


@pytest.fixture
def screen():
    pygame.init()
    try:
        yield pygame.display.set_mode((400, 700))
    finally:
        pygame.quit()


def test_draws_blocks_and_piece(screen, game, running):
    renderer = Renderer(cell_size=10, margin=5)
    state = running.copy(
        blocks=(Block((0, 23), int(PieceType.Z)),),
        drop_block=DropBlock(PieceType.T, 0, (5, 3)),
        show_grid_outline=True,
    )
    renderer.draw(screen, state)
    # bottom-left settled cell
    assert screen.get_at((5 + 2, 5 + 23 * 10 + 2))[:3] == color_for_index(int(PieceType.Z))
    # falling T pivot
    assert screen.get_at((5 + 5 * 10 + 2, 5 + 3 * 10 + 2))[:3] == color_for_index(int(PieceType.T))


def test_window_fits_board():
    renderer = Renderer(cell_size=10, margin=5)
    width, height = renderer.window_size(Matrix(12, 24))
    assert width >= 12 * 10 and height >= 24 * 10


def test_draws_every_status(screen, game, running):
    renderer = Renderer(cell_size=10, margin=5)
    state = game.reduce(running, actions.GAME_TICK).final
    for status_command in (actions.PAUSE, actions.MUTE, actions.DARK_MODE):
        state = game.reduce(state, status_command).final
        renderer.draw(screen, state)
