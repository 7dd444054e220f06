"""
Pygame Sudoku built on a box-style scene framework.
Includes: Game Loop Manager, InputHandler, scene management
(home → difficulty → game → results), pause menu and key rebinding.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import random
import sys
from typing import Any, Optional
import pygame

from core.config import Difficulty, GameSettings
from core.input_handler import ACTIONS, InputHandler
from core.session import GameSession
from games.sudoku import SudokuGame

log = logging.getLogger(__name__)

WIDTH, HEIGHT = 1280, 720
BG_COLOR = (20, 20, 30)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
KEYBINDINGS_PATH = os.path.join(BASE_DIR, "keybindings.json")
SETTINGS_PATH = os.path.join(BASE_DIR, "settings.json")


class Scene:
    def handle_event(self, event: pygame.event.Event):
        pass

    def update(self, dt: float):
        pass

    def draw(self, surface: pygame.Surface):
        pass


class SceneManager:
    def __init__(self, initial: Scene):
        self.current = initial

    def set(self, scene: Scene):
        self.current = scene


class BaseMenuScene(Scene):
    """Reusable rectangular box-based menu scene.

    Up/Down (or mouse) to move, Enter or click to select, Esc for back.
    """

    def __init__(self, app: "App", title: str, items: list[str]):
        self.app = app
        self.title = title
        self.items = items
        self.selected = 0
        self.font = app.font
        self.big_font = app.big_font

        self.box_w = 420
        self.box_h = 44
        self.box_gap = 14
        self.box_color = (70, 70, 90)
        self.box_highlight = (120, 120, 180)
        self.box_outline = (180, 180, 220)

    def handle_event(self, event: pygame.event.Event):
        if not self.items:
            return
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_UP, pygame.K_w):
                self.selected = (self.selected - 1) % len(self.items)
            elif event.key in (pygame.K_DOWN, pygame.K_s):
                self.selected = (self.selected + 1) % len(self.items)
            elif event.key == pygame.K_RETURN:
                self.handle_select(self.selected)
            elif event.key == pygame.K_ESCAPE:
                self.handle_back()
        elif event.type == pygame.MOUSEMOTION:
            index = self._hit(event.pos)
            if index is not None:
                self.selected = index
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            index = self._hit(event.pos)
            if index is not None:
                self.selected = index
                self.handle_select(index)

    def _hit(self, pos) -> Optional[int]:
        rects, _, _, _, _ = self._layout()
        for i, r in enumerate(rects):
            if r.collidepoint(pos):
                return i
        return None

    def handle_select(self, index: int):
        pass

    def handle_back(self):
        self.app.scene_manager.set(HomeScene(self.app))

    def _layout(self):
        """Return (rects, title_surf, title_pos, hint_surf, hint_pos) shared by draw and hit-testing."""
        total_h = len(self.items) * self.box_h + (len(self.items) - 1) * self.box_gap
        start_y = max(200, (HEIGHT // 2) - (total_h // 2))
        rects = [
            pygame.Rect(WIDTH // 2 - self.box_w // 2, start_y + i * (self.box_h + self.box_gap), self.box_w, self.box_h)
            for i in range(len(self.items))
        ]
        title = self.big_font.render(self.title, True, (255, 255, 255))
        title_pos = (WIDTH // 2 - title.get_width() // 2, 90)
        hint = self.font.render("Up/Down: Navigate  Enter: Select  Esc: Back", True, (180, 180, 180))
        hint_pos = (WIDTH // 2 - hint.get_width() // 2, HEIGHT - 60)
        return rects, title, title_pos, hint, hint_pos

    def draw(self, surface: pygame.Surface):
        surface.fill(BG_COLOR)
        rects, title, title_pos, hint, hint_pos = self._layout()
        surface.blit(title, title_pos)
        for i, rect in enumerate(rects):
            fill = self.box_highlight if i == self.selected else self.box_color
            pygame.draw.rect(surface, fill, rect)
            pygame.draw.rect(surface, self.box_outline, rect, 2)
            surf = self.font.render(self.items[i], True, (240, 240, 240))
            surface.blit(surf, (rect.centerx - surf.get_width()//2, rect.centery - surf.get_height()//2))
        surface.blit(hint, hint_pos)


class HomeScene(BaseMenuScene):
    def __init__(self, app: "App"):
        super().__init__(app, "BOX SUDOKU", ["Play", "Controls", "Quit"])

    def handle_select(self, index: int):
        label = self.items[index]
        if label == "Play":
            self.app.scene_manager.set(DifficultySelectScene(self.app))
        elif label == "Controls":
            self.app.scene_manager.set(ControlsScene(self.app))
        elif label == "Quit":
            pygame.event.post(pygame.event.Event(pygame.QUIT))

    def handle_back(self):
        pygame.event.post(pygame.event.Event(pygame.QUIT))


class DifficultySelectScene(BaseMenuScene):
    def __init__(self, app: "App"):
        items = [d.label for d in Difficulty] + ["Back"]
        super().__init__(app, "Sudoku Difficulty", items)

    def handle_select(self, index: int):
        label = self.items[index]
        if label == "Back":
            self.app.scene_manager.set(HomeScene(self.app))
            return
        self.app.launch_sudoku_game(Difficulty(label.lower()))

    def draw(self, surface: pygame.Surface):
        super().draw(surface)
        settings = self.app.settings
        label = self.items[self.selected]
        if label == "Back":
            return
        level = label.lower()
        mins, secs = divmod(settings.timer_duration(level), 60)
        givens = 81 - settings.removal_count(level)
        info = self.font.render(f"{givens} given cells   {mins:02d}:{secs:02d} on the clock", True, (200, 200, 200))
        surface.blit(info, (WIDTH//2 - info.get_width()//2, 150))


class ControlsScene(BaseMenuScene):
    def __init__(self, app: "App"):
        super().__init__(app, "Controls", ["Back"])
        self.cfg_path = app.keybindings_path
        try:
            with open(self.cfg_path, "r", encoding="utf-8") as f:
                self.cfg = json.load(f)
        except (OSError, ValueError):
            log.warning("Could not read %s, showing defaults", self.cfg_path)
            self.cfg = InputHandler.default_bindings()
        self.selected_action_index = 0
        # When True, the next non-ESC key press becomes the new binding
        self.waiting_for_key = False

    def handle_select(self, index: int):
        self.app.scene_manager.set(HomeScene(self.app))

    def _keycode_to_binding_name(self, key: int) -> str:
        """Readable binding name for JSON, understood by InputHandler.from_file."""
        if pygame.K_a <= key <= pygame.K_z:
            return f"K_{chr(key).upper()}"
        arrows = {pygame.K_UP: "K_UP", pygame.K_DOWN: "K_DOWN", pygame.K_LEFT: "K_LEFT", pygame.K_RIGHT: "K_RIGHT"}
        if key in arrows:
            return arrows[key]
        # Numpad codes are not contiguous (K_KP0 sorts after K_KP9)
        numpad = {getattr(pygame, f"K_KP{d}"): f"K_KP{d}" for d in range(10)}
        if key in numpad:
            return numpad[key]
        return pygame.key.name(key)

    def _save_binding(self, key: int):
        actions_map = self.cfg.setdefault("actions", {})
        action = ACTIONS[self.selected_action_index]
        actions_map[action] = self._keycode_to_binding_name(key)
        try:
            with open(self.cfg_path, "w", encoding="utf-8") as f:
                json.dump(self.cfg, f, indent=2)
            # Reload so changes are live
            self.app.input_handler = InputHandler.from_file(self.cfg_path)
        except (OSError, ValueError) as e:
            log.warning("Failed to save key binding for %s: %s", action, e)

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                if self.waiting_for_key:
                    self.waiting_for_key = False
                else:
                    self.app.scene_manager.set(HomeScene(self.app))
                return
            if self.waiting_for_key:
                self._save_binding(event.key)
                self.waiting_for_key = False
                return
            if event.key in (pygame.K_UP, pygame.K_w):
                self.selected_action_index = (self.selected_action_index - 1) % len(ACTIONS)
            elif event.key in (pygame.K_DOWN, pygame.K_s):
                self.selected_action_index = (self.selected_action_index + 1) % len(ACTIONS)
            elif event.key in (pygame.K_RETURN, pygame.K_SPACE):
                self.waiting_for_key = True
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            rects, _, _, _, _ = self._layout()
            if rects and rects[0].collidepoint(event.pos):
                self.app.scene_manager.set(HomeScene(self.app))

    def _layout(self):
        rects, title, title_pos, hint, hint_pos = super()._layout()
        # Back button sits below the action list
        rects = [pygame.Rect(r.left, HEIGHT - 140, r.width, r.height) for r in rects]
        return rects, title, title_pos, hint, hint_pos

    def draw(self, surface: pygame.Surface):
        super().draw(surface)
        actions = self.cfg.get("actions", {})
        box_w, box_h, gap = 560, 40, 8
        for i, action in enumerate(ACTIONS):
            rect = pygame.Rect(WIDTH//2 - box_w//2, 160 + i*(box_h+gap), box_w, box_h)
            is_sel = (i == self.selected_action_index)
            pygame.draw.rect(surface, (80, 80, 110) if is_sel else (60, 60, 80), rect)
            pygame.draw.rect(surface, (190, 190, 230) if is_sel else (150, 150, 190), rect, 2)
            val = actions.get(action, "") or "UNSET"
            if is_sel and self.waiting_for_key:
                val = "..."
            surf = self.font.render(f"{action.replace('_', ' ')}: {val}", True, (220, 220, 230))
            surface.blit(surf, (rect.left + 14, rect.centery - surf.get_height()//2))

        if self.waiting_for_key:
            msg = f"Press a key for {ACTIONS[self.selected_action_index].upper()}  (ESC to cancel)"
        else:
            msg = "Up/Down: select action   Enter: rebind   Digits 1-9 always enter numbers"
        info = self.font.render(msg, True, (230, 230, 240))
        surface.blit(info, (WIDTH//2 - info.get_width()//2, HEIGHT - 180))


class GameScene(Scene):
    def __init__(self, app: "App", game: Any):
        self.app = app
        self.game = game
        self.font = app.font

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.app.scene_manager.set(PauseScene(self.app))
            return
        self.game.handle_event(event)

    def update(self, dt: float):
        self.game.update(dt, self.app.input_handler, None)
        if self.game.is_over:
            self.app.scene_manager.set(ResultsScene(self.app, self.game))

    def draw(self, surface: pygame.Surface):
        surface.fill(BG_COLOR)
        self.game.draw(surface, self.font)


class ResultsScene(Scene):
    """Shows the revealed board next to Play Again / Main Menu."""

    def __init__(self, app: "App", game: Any):
        self.app = app
        self.game = game
        self.font = app.font
        self.big_font = app.big_font
        self.items = ["Play Again", "Main Menu"]
        self.selected = 0

    def handle_event(self, event: pygame.event.Event):
        if event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_UP, pygame.K_w):
                self.selected = (self.selected - 1) % len(self.items)
            elif event.key in (pygame.K_DOWN, pygame.K_s):
                self.selected = (self.selected + 1) % len(self.items)
            elif event.key == pygame.K_RETURN:
                self._activate_selected()
            elif event.key == pygame.K_ESCAPE:
                self.app.scene_manager.set(HomeScene(self.app))
        elif event.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
            for i, r in enumerate(self._button_rects()):
                if r.collidepoint(event.pos):
                    self.selected = i
                    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        self._activate_selected()
                    break

    def _activate_selected(self):
        label = self.items[self.selected]
        if label == "Play Again" and self.app.current_game_launcher:
            self.app.current_game_launcher()
        elif label == "Main Menu":
            self.app.scene_manager.set(HomeScene(self.app))

    def _button_rects(self) -> list[pygame.Rect]:
        box_w, box_h, gap = 220, 44, 14
        x = WIDTH - box_w - 40
        start_y = HEIGHT // 2
        return [pygame.Rect(x, start_y + i*(box_h+gap), box_w, box_h) for i in range(len(self.items))]

    def draw(self, surface: pygame.Surface):
        surface.fill(BG_COLOR)
        self.game.draw(surface, self.font)

        header = self.game.results_header or "Results"
        title = self.big_font.render(header, True, (255, 255, 255))
        x = WIDTH - title.get_width() - 40
        surface.blit(title, (x, 120))
        for name, left in self.game.scores():
            if left > 0:
                mins, secs = divmod(int(left), 60)
                line = self.font.render(f"{name}: {mins:02d}:{secs:02d} to spare", True, (220, 220, 220))
                surface.blit(line, (WIDTH - line.get_width() - 40, 170))

        for i, label in enumerate(self.items):
            rect = self._button_rects()[i]
            pygame.draw.rect(surface, (120, 120, 180) if i == self.selected else (70, 70, 90), rect)
            pygame.draw.rect(surface, (180, 180, 220), rect, 2)
            surf = self.font.render(label, True, (240, 240, 240))
            surface.blit(surf, (rect.centerx - surf.get_width()//2, rect.centery - surf.get_height()//2))


class PauseScene(BaseMenuScene):
    def __init__(self, app: "App"):
        super().__init__(app, "Paused", ["Resume", "Give Up", "Restart", "Quit to Menu"])

    def handle_back(self):
        self._resume()

    def _resume(self):
        if self.app._active_game_scene:
            self.app.scene_manager.set(self.app._active_game_scene)
        else:
            self.app.scene_manager.set(HomeScene(self.app))

    def handle_select(self, index: int):
        label = self.items[index]
        if label == "Resume":
            self._resume()
        elif label == "Give Up":
            if self.app._active_game_scene:
                self.app._active_game_scene.game.session.give_up()
            self._resume()
        elif label == "Restart":
            if self.app.current_game_launcher:
                self.app.current_game_launcher()
        elif label == "Quit to Menu":
            self.app.scene_manager.set(HomeScene(self.app))


class App:
    def __init__(self, seed: Optional[int] = None):
        pygame.init()
        pygame.display.set_caption("Box Sudoku")
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 20)
        self.big_font = pygame.font.SysFont("consolas", 36)

        # Both files are created with defaults if missing
        self.keybindings_path = KEYBINDINGS_PATH
        self.input_handler = InputHandler.from_file(KEYBINDINGS_PATH)
        self.settings = GameSettings.from_file(SETTINGS_PATH)
        self.rng = random.Random(seed)

        self.current_game_launcher = None
        self._active_game_scene: Optional[GameScene] = None
        self.scene_manager = SceneManager(HomeScene(self))

    def launch_sudoku_game(self, level: Difficulty = Difficulty.EASY):
        session = GameSession(self.settings, self.rng)
        session.start(level)
        # Board area with room for the HUD and the results column
        bounds = pygame.Rect(120, 70, WIDTH - 240, HEIGHT - 160)
        game = SudokuGame(bounds, session, self.input_handler)
        scene = GameScene(self, game)
        self._active_game_scene = scene
        self.current_game_launcher = lambda lvl=level: self.launch_sudoku_game(lvl)
        self.scene_manager.set(scene)

    def run(self):
        while True:
            dt = self.clock.tick(60) / 1000.0  # seconds
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pygame.quit()
                    sys.exit(0)
                self.scene_manager.current.handle_event(event)

            self.scene_manager.current.update(dt)
            self.scene_manager.current.draw(self.screen)
            pygame.display.flip()


def main():
    parser = argparse.ArgumentParser(description="Play Sudoku against the clock.")
    parser.add_argument("--verbose", action="store_true", help="Be verbose")
    parser.add_argument("--seed", type=int, default=None, help="Seed puzzle generation")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    App(seed=args.seed).run()


if __name__ == "__main__":
    main()
