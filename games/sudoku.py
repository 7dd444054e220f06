"""
Sudoku (Singleplayer)
- 9x9 grid divided into 3x3 boxes; puzzles are generated fresh every game.
- Given cells are locked; the player fills the rest with 1-9.
- Digits that clash with the current board are highlighted live.
- Countdown per difficulty; running out or giving up reveals the solution:
  given digits in white, the player's correct entries in blue, the rest in green.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import pygame

from core.grid import GRID_SIZE, BOX_SIZE
from core.input_handler import InputHandler
from core.session import (
    GameSession, WON, LOST, GAVE_UP,
    REVEAL_GIVEN, REVEAL_PLAYER,
)

COLOR_GIVEN = (240, 240, 240)
COLOR_PLAYER = (160, 200, 250)
COLOR_ERROR = (255, 90, 90)
COLOR_REVEALED = (110, 220, 130)
COLOR_GIVEN_BG = (45, 45, 60)
COLOR_LINE = (150, 150, 180)
COLOR_SELECTED = (120, 120, 180)
MESSAGE_COLORS = {
    "error": (255, 120, 120),
    "success": (140, 240, 150),
    "info": (220, 220, 240),
}
BADGE_COLORS = {
    "easy": (84, 200, 120),
    "medium": (240, 200, 84),
    "hard": (240, 84, 84),
}


class SudokuGame:
    def __init__(self, bounds: pygame.Rect, session: GameSession, input_handler: Optional[InputHandler] = None):
        self.bounds = bounds
        self.session = session
        self.input_handler = input_handler
        # Square board centered in the bounds
        side = min(bounds.width, bounds.height)
        side -= side % GRID_SIZE
        self.board_rect = pygame.Rect(0, 0, side, side)
        self.board_rect.center = bounds.center
        self.cell_size = side // GRID_SIZE
        # Results formatting
        self.higher_time_wins = True
        self.show_time_in_results = True
        self.result_label = "Time left"
        self.results_header: Optional[str] = None
        self.is_over = self.session.is_over

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        mx, my = pos
        if not self.board_rect.collidepoint(mx, my):
            return None
        c = (mx - self.board_rect.left) // self.cell_size
        r = (my - self.board_rect.top) // self.cell_size
        if 0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE:
            return int(r), int(c)
        return None

    def handle_event(self, event: pygame.event.Event):
        if not self.session.is_playing:
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            cell = self.cell_at(event.pos)
            if cell is not None:
                self.session.select_cell(*cell)
        elif event.type == pygame.KEYDOWN:
            action = self.input_handler.action_for_key(event.key) if self.input_handler else None
            moves = {"up": (-1, 0), "down": (1, 0), "left": (0, -1), "right": (0, 1)}
            if action in moves:
                self.session.move_selection(*moves[action])
                return
            if action == "give_up":
                self.session.give_up()
                return
            digit = self.input_handler.digit_for_key(event.key) if self.input_handler else None
            if digit is not None:
                self.session.enter_number(digit)

    def update(self, dt: float, input_handler, pressed):
        if self.is_over:
            return
        self.session.tick(dt)
        if self.session.is_over:
            self.is_over = True
            headers = {
                WON: "Sudoku Complete!",
                LOST: "Time's Up!",
                GAVE_UP: "Gave Up",
            }
            self.results_header = headers.get(self.session.state)

    def scores(self):
        # Seconds left on the clock; zero unless solved
        left = self.session.time_remaining if self.session.state == WON else 0.0
        return [("Solo", float(left))]

    def _cell_rect(self, r: int, c: int) -> pygame.Rect:
        x0, y0 = self.board_rect.topleft
        return pygame.Rect(x0 + c * self.cell_size, y0 + r * self.cell_size, self.cell_size, self.cell_size)

    def _blit_center(self, surface: pygame.Surface, font: pygame.font.Font, text: str,
                     color: Tuple[int, int, int], rect: pygame.Rect):
        surf = font.render(text, True, color)
        surface.blit(surf, (rect.centerx - surf.get_width()//2, rect.centery - surf.get_height()//2))

    def _draw_cells(self, surface: pygame.Surface, font: pygame.font.Font):
        s = self.session
        revealed = s.is_over
        reveal_map: List[List[str]] = s.reveal() if revealed else []
        violations = set() if revealed else s.violations()
        for r in range(GRID_SIZE):
            for c in range(GRID_SIZE):
                rect = self._cell_rect(r, c)
                if s.is_given(r, c):
                    pygame.draw.rect(surface, COLOR_GIVEN_BG, rect)
                if s.selected == (r, c):
                    pygame.draw.rect(surface, COLOR_SELECTED, rect, 3)
                if revealed:
                    cls = reveal_map[r][c]
                    if cls == REVEAL_GIVEN:
                        color = COLOR_GIVEN
                    elif cls == REVEAL_PLAYER:
                        color = COLOR_PLAYER
                    else:
                        color = COLOR_REVEALED
                    self._blit_center(surface, font, str(s.solution[r][c]), color, rect)
                    continue
                val = s.board[r][c]
                if val == 0:
                    continue
                if s.is_given(r, c):
                    color = COLOR_GIVEN
                elif (r, c) in violations:
                    color = COLOR_ERROR
                else:
                    color = COLOR_PLAYER
                self._blit_center(surface, font, str(val), color, rect)

    def _draw_grid_lines(self, surface: pygame.Surface):
        # Thicker lines on box boundaries
        left, top = self.board_rect.topleft
        for i in range(GRID_SIZE + 1):
            x = left + i * self.cell_size
            y = top + i * self.cell_size
            w = 4 if i % BOX_SIZE == 0 else 1
            pygame.draw.line(surface, COLOR_LINE, (x, self.board_rect.top), (x, self.board_rect.bottom), w)
            pygame.draw.line(surface, COLOR_LINE, (self.board_rect.left, y), (self.board_rect.right, y), w)

    def draw(self, surface: pygame.Surface, font: pygame.font.Font):
        s = self.session
        self._draw_cells(surface, font)
        self._draw_grid_lines(surface)
        # Countdown
        timer_color = COLOR_ERROR if s.is_urgent else (255, 255, 255)
        hud = font.render(f"Time: {s.format_time()}", True, timer_color)
        surface.blit(hud, (10, 10))
        # Difficulty badge
        if s.difficulty is not None:
            badge = font.render(s.difficulty.label, True, (20, 20, 30))
            rect = pygame.Rect(10, 36, badge.get_width() + 16, badge.get_height() + 6)
            pygame.draw.rect(surface, BADGE_COLORS.get(s.difficulty.value, COLOR_LINE), rect)
            surface.blit(badge, (rect.left + 8, rect.top + 3))
        # Message line under the board
        if s.message is not None:
            msg = font.render(s.message.text, True, MESSAGE_COLORS.get(s.message.kind, COLOR_GIVEN))
            surface.blit(msg, (self.bounds.centerx - msg.get_width()//2, self.bounds.bottom + 8))
