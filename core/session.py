"""
Game session for one Sudoku puzzle at a time.
Owns the solution, the carved puzzle, the player's board, the locked cells,
the selection and the countdown. Starting a new game replaces all of them.
"""
from __future__ import annotations
from typing import FrozenSet, List, NamedTuple, Optional, Set
import logging
import math
import random

from core.config import URGENT_SECONDS, Difficulty, DifficultyLike, GameSettings, to_difficulty
from core.generator import create_puzzle, generate_solved_board
from core.grid import GRID_SIZE, Grid, Position, deep_copy, empty_grid, given_cells
from core.rules import check_win, find_violations, has_violation

log = logging.getLogger(__name__)

IDLE = "idle"
PLAYING = "playing"
WON = "won"
LOST = "lost"
GAVE_UP = "gaveup"

# Reveal classes
REVEAL_GIVEN = "given"
REVEAL_PLAYER = "player"
REVEAL_AUTO = "revealed"


class Message(NamedTuple):
    text: str
    kind: str  # error | success | info


MSG_PICK_CELL = Message("Pick a cell first!", "info")
MSG_LOCKED = Message("That number is locked!", "info")
MSG_CLASH = Message("Oops! That number doesn't fit here", "error")
MSG_WIN = Message("Great job! You solved the puzzle!", "success")
MSG_TIME_UP = Message("Time's up! Let's see the answers.", "info")
MSG_GAVE_UP = Message("No problem! Here's the solution. Try again!", "info")


class GameSession:
    def __init__(self, settings: Optional[GameSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or GameSettings()
        self.rng = rng
        self.state = IDLE
        self.difficulty: Optional[Difficulty] = None
        self.solution: Grid = empty_grid()
        self.puzzle: Grid = empty_grid()
        self.board: Grid = empty_grid()
        self.givens: FrozenSet[Position] = frozenset()
        self.selected: Optional[Position] = None
        self.time_remaining = 0.0
        self.message: Optional[Message] = None

    # --- lifecycle -------------------------------------------------------

    def start(self, difficulty: DifficultyLike):
        """Generate a fresh puzzle and start the countdown."""
        level = to_difficulty(difficulty)
        solution = generate_solved_board(self.rng)
        puzzle = create_puzzle(solution, level, self.rng, self.settings.cells_to_remove)
        self.load(solution, puzzle, level)

    def load(self, solution: Grid, puzzle: Grid, difficulty: DifficultyLike):
        """Start a game from an existing solution/puzzle pair."""
        self.difficulty = to_difficulty(difficulty)
        self.solution = deep_copy(solution)
        self.puzzle = deep_copy(puzzle)
        self.board = deep_copy(puzzle)
        self.givens = given_cells(self.puzzle)
        self.selected = None
        self.message = None
        self.time_remaining = float(self.settings.timer_duration(self.difficulty))
        self.state = PLAYING
        log.info("Started %s game with %d givens", self.difficulty.value, len(self.givens))

    @property
    def is_playing(self) -> bool:
        return self.state == PLAYING

    @property
    def is_over(self) -> bool:
        return self.state in (WON, LOST, GAVE_UP)

    def _finish(self, state: str, message: Message):
        self.state = state
        self.message = message
        self.selected = None
        log.info("Game over: %s (%s left)", state, self.format_time())

    # --- player input ----------------------------------------------------

    def is_given(self, row: int, col: int) -> bool:
        return (row, col) in self.givens

    def select_cell(self, row: int, col: int):
        if not self.is_playing:
            return
        if self.selected == (row, col):
            self.selected = None
        else:
            self.selected = (row, col)

    def move_selection(self, drow: int, dcol: int):
        if not self.is_playing:
            return
        if self.selected is None:
            self.selected = (0, 0)
            return
        r, c = self.selected
        self.selected = (max(0, min(GRID_SIZE - 1, r + drow)),
                         max(0, min(GRID_SIZE - 1, c + dcol)))

    def enter_number(self, num: int) -> Optional[Message]:
        """Write 1-9 into the selected cell, or clear it with 0."""
        if not self.is_playing:
            return None
        assert 0 <= num <= GRID_SIZE, f"digit {num} out of range"
        if self.selected is None:
            self.message = MSG_PICK_CELL
            return self.message
        r, c = self.selected
        if self.is_given(r, c):
            self.message = MSG_LOCKED
            return self.message

        self.board[r][c] = num
        if num != 0 and has_violation(self.board, r, c, num):
            self.message = MSG_CLASH
        else:
            self.message = None

        if num != 0 and check_win(self.board, self.solution):
            self._finish(WON, MSG_WIN)
        return self.message

    def erase(self) -> Optional[Message]:
        return self.enter_number(0)

    def give_up(self):
        if not self.is_playing:
            return
        self._finish(GAVE_UP, MSG_GAVE_UP)

    # --- timer -----------------------------------------------------------

    def tick(self, dt: float):
        if not self.is_playing:
            return
        self.time_remaining -= dt
        if self.time_remaining <= 0.0:
            self.time_remaining = 0.0
            self._finish(LOST, MSG_TIME_UP)

    @property
    def is_urgent(self) -> bool:
        return self.time_remaining <= URGENT_SECONDS

    def format_time(self) -> str:
        secs = max(0, int(math.ceil(self.time_remaining)))
        return f"{secs // 60:02d}:{secs % 60:02d}"

    # --- rendering helpers ----------------------------------------------

    def violations(self) -> Set[Position]:
        return find_violations(self.board, self.givens)

    def reveal(self) -> List[List[str]]:
        """Colour class per cell once the solution is shown."""
        out: List[List[str]] = []
        for r in range(GRID_SIZE):
            row = []
            for c in range(GRID_SIZE):
                if self.is_given(r, c):
                    row.append(REVEAL_GIVEN)
                elif self.board[r][c] != 0 and self.board[r][c] == self.solution[r][c]:
                    row.append(REVEAL_PLAYER)
                else:
                    row.append(REVEAL_AUTO)
            out.append(row)
        return out
