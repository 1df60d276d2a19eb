from __future__ import annotations

from typing import List, Optional

import numpy as np
import pygame

from blockfall.game import GameSession, PieceDefinition
from .palette import BACKGROUND_COLOR, TEXT_COLOR, color_for_value


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        w = self.margin * 3 + (width + self.panel_cells) * self.cell_size
        h = self.margin * 2 + height * self.cell_size
        return w, h

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color_for_value(int(state[y, x])), rect)
        return surf

    def _preview_surface(self, definition: PieceDefinition) -> pygame.Surface:
        # Crop to the occupied bounds so the preview is centered on the piece
        shape = definition.shape
        rows = np.flatnonzero(np.any(shape != 0, axis=1))
        cols = np.flatnonzero(np.any(shape != 0, axis=0))
        cropped = shape[rows[0] : rows[-1] + 1, cols[0] : cols[-1] + 1]
        cell = max(4, self.cell_size // 2)
        h, w = cropped.shape
        surf = pygame.Surface((w * cell, h * cell), pygame.SRCALPHA)
        for y in range(h):
            for x in range(w):
                if cropped[y, x]:
                    rect = pygame.Rect(x * cell, y * cell, cell - 1, cell - 1)
                    pygame.draw.rect(surf, definition.color, rect)
        return surf

    def _text_lines(self, session: GameSession) -> List[str]:
        return [
            f"Score: {session.score}",
            f"Combo: {session.combo}",
            f"Lines: {session.lines_cleared_total}",
            f"Speed: {session.fall_interval_ms} ms",
        ]

    def draw(self, screen: pygame.Surface, state: np.ndarray, session: GameSession,
             banner: Optional[str] = None) -> None:
        screen.fill(BACKGROUND_COLOR)
        screen.blit(self._grid_surface(state), (self.margin, self.margin))

        panel_x = self.margin * 2 + state.shape[1] * self.cell_size
        y = self.margin
        if session.next_piece is not None:
            preview = self._preview_surface(session.next_piece)
            screen.blit(preview, (panel_x, y))
            y += preview.get_height() + self.margin

        if pygame.font.get_init():
            if self._font is None:
                self._font = pygame.font.SysFont(None, 24)
            for line in self._text_lines(session):
                screen.blit(self._font.render(line, True, TEXT_COLOR), (panel_x, y))
                y += 22
            if banner:
                img = self._font.render(banner, True, (255, 215, 0))
                screen.blit(img, img.get_rect(center=(screen.get_width() // 2, self.margin // 2 + 4)))
