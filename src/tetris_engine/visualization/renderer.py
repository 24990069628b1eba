from __future__ import annotations

from typing import Optional, Sequence

import pygame

from tetris_engine.game import GameSnapshot, GameState, Piece
from tetris_engine.scores import HighScoreEntry
from .palette import GHOST, color_for_value


class Renderer:
    """Draws a read-only `GameSnapshot`: well, ghost, falling piece and side panel."""

    def __init__(self, cell_size: int = 30, margin: int = 20, preview_cell_size: int = 22) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.preview_cell_size = preview_cell_size
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        panel_w = 7 * self.cell_size
        return (width * self.cell_size + panel_w + self.margin * 3,
                height * self.cell_size + self.margin * 2)

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _cell_rect(self, x: int, y: int, size: int, ox: int, oy: int) -> pygame.Rect:
        return pygame.Rect(ox + x * size, oy + y * size, size - 1, size - 1)

    def _draw_piece(self, screen: pygame.Surface, piece: Piece, outline: bool = False) -> None:
        for x, y, value in piece.cells():
            if y < 0:
                continue
            rect = self._cell_rect(x, y, self.cell_size, self.margin, self.margin)
            if outline:
                pygame.draw.rect(screen, GHOST, rect, 2)
            else:
                pygame.draw.rect(screen, color_for_value(value), rect)

    def _draw_board(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        h, w = snapshot.board.shape
        for y in range(h):
            for x in range(w):
                rect = self._cell_rect(x, y, self.cell_size, self.margin, self.margin)
                pygame.draw.rect(screen, color_for_value(int(snapshot.board[y, x])), rect)
        if snapshot.ghost_piece is not None:
            self._draw_piece(screen, snapshot.ghost_piece, outline=True)
        if snapshot.active_piece is not None:
            self._draw_piece(screen, snapshot.active_piece)

    def _draw_panel(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        w = snapshot.board.shape[1]
        x0 = self.margin * 2 + w * self.cell_size
        y0 = self.margin
        screen.blit(self.font.render("Next", True, (230, 230, 230)), (x0, y0))
        if snapshot.next_piece is not None:
            matrix = snapshot.next_piece.matrix
            for py in range(matrix.shape[0]):
                for px in range(matrix.shape[1]):
                    if matrix[py, px]:
                        rect = self._cell_rect(px, py, self.preview_cell_size, x0, y0 + 30)
                        pygame.draw.rect(screen, color_for_value(int(matrix[py, px])), rect)
        lines = [
            f"Score: {snapshot.score}",
            f"Level: {snapshot.level}",
            f"Lines: {snapshot.lines_cleared_total}",
        ]
        for i, txt in enumerate(lines):
            screen.blit(self.font.render(txt, True, (230, 230, 230)), (x0, y0 + 140 + i * 26))

    def _draw_overlay(self, screen: pygame.Surface, snapshot: GameSnapshot,
                      high_scores: Sequence[HighScoreEntry], new_high_score: bool) -> None:
        if snapshot.state is GameState.PAUSED:
            messages = ["Paused - P to resume, R to restart"]
        elif snapshot.state is GameState.IDLE:
            messages = ["Press Enter to start"]
        elif snapshot.is_over:
            messages = [f"Game Over - Final Score: {snapshot.score}"]
            if new_high_score:
                messages.append("New high score!")
            messages += ["Enter: new game, Esc: quit", "High scores:"]
            messages += [f"{e.name}  {e.score}" for e in high_scores] or ["No scores yet"]
        else:
            return
        for i, txt in enumerate(messages):
            img = self.font.render(txt, True, (255, 255, 255))
            rect = img.get_rect(center=(screen.get_width() // 2, 60 + i * 28))
            screen.blit(img, rect)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot,
             high_scores: Sequence[HighScoreEntry] = (), new_high_score: bool = False) -> None:
        screen.fill((10, 10, 14))
        self._draw_board(screen, snapshot)
        self._draw_panel(screen, snapshot)
        self._draw_overlay(screen, snapshot, high_scores, new_high_score)
        pygame.display.flip()
