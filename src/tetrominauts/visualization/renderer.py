from __future__ import annotations

from typing import Iterable, Tuple

import pygame

from tetrominauts.game.pieces import PREVIEW_MATRIX, Coordinate, Matrix
from tetrominauts.game.state import GameStatus, ViewState


Color = Tuple[int, int, int]

_BLOCK_COLORS: Tuple[Color, ...] = (
    (0, 240, 240),    # I
    (240, 240, 0),    # O
    (160, 0, 240),    # T
    (0, 240, 0),      # S
    (240, 0, 0),      # Z
    (0, 0, 240),      # J
    (240, 160, 0),    # L
    (230, 230, 230),  # naut
)

_STATUS_TEXT = {
    GameStatus.ONBOARD: "Press R to start",
    GameStatus.PAUSED: "Paused",
    GameStatus.GAME_OVER: "Game Over - R to restart",
}


def color_for_index(index: int) -> Color:
    if 0 <= index < len(_BLOCK_COLORS):
        return _BLOCK_COLORS[index]
    return (200, 200, 200)


class Renderer:
    def __init__(self, cell_size: int = 24, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font = None

    def window_size(self, matrix: Matrix) -> Tuple[int, int]:
        width = self.margin * 3 + (matrix.width + self.panel_cells) * self.cell_size
        height = self.margin * 2 + max(matrix.height, PREVIEW_MATRIX.height + 4) * self.cell_size
        return width, height

    def _cell_rect(self, origin: Tuple[int, int], cell: Coordinate) -> pygame.Rect:
        x, y = cell
        return pygame.Rect(
            origin[0] + x * self.cell_size,
            origin[1] + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_cells(self, surf: pygame.Surface, origin: Tuple[int, int], matrix: Matrix,
                    cells: Iterable[Coordinate], color: Color, width: int = 0) -> None:
        for x, y in cells:
            # Cells above the visible top are not drawn.
            if 0 <= y < matrix.height and 0 <= x < matrix.width:
                pygame.draw.rect(surf, color, self._cell_rect(origin, (x, y)), width)

    def draw(self, screen: pygame.Surface, state: ViewState) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        matrix = state.matrix
        background = (10, 10, 14) if state.is_dark_mode else (225, 225, 215)
        board_bg = (30, 30, 36) if state.is_dark_mode else (200, 200, 190)
        text_color = (255, 255, 255) if state.is_dark_mode else (20, 20, 20)
        origin = (self.margin, self.margin)

        screen.fill(background)
        board = pygame.Rect(origin[0], origin[1], matrix.width * self.cell_size, matrix.height * self.cell_size)
        pygame.draw.rect(screen, board_bg, board)
        if state.show_grid_outline:
            every_cell = [(x, y) for x in range(matrix.width) for y in range(matrix.height)]
            self._draw_cells(screen, origin, matrix, every_cell, (60, 60, 70), 1)

        for block in state.blocks:
            self._draw_cells(screen, origin, matrix, [block.location], color_for_index(block.color))
        if state.use_ghost_block and not state.ghost_block.is_empty:
            self._draw_cells(screen, origin, matrix, state.ghost_block.location,
                             color_for_index(state.ghost_block.color), 2)
        if not state.drop_block.is_empty:
            self._draw_cells(screen, origin, matrix, state.drop_block.location,
                             color_for_index(state.drop_block.color))

        panel = (self.margin * 2 + matrix.width * self.cell_size, self.margin)
        upcoming = state.drop_block_next
        if not upcoming.is_empty:
            preview = upcoming.adjust_offset(PREVIEW_MATRIX, adjust_y=True)
            self._draw_cells(screen, panel, PREVIEW_MATRIX, preview.location, color_for_index(preview.color))

        lines = [f"Score {state.score}", f"Lines {state.line}", f"Level {state.level}"]
        if state.is_mute:
            lines.append("Muted")
        status = _STATUS_TEXT.get(state.game_status)
        if status:
            lines.append(status)
        text_y = panel[1] + (PREVIEW_MATRIX.height + 1) * self.cell_size
        for line in lines:
            text = self._font.render(line, True, text_color)
            screen.blit(text, (panel[0], text_y))
            text_y += text.get_height() + 4
        pygame.display.flip()
