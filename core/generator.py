"""
Sudoku puzzle generation.
- Fills an empty grid with randomized backtracking.
- Verifies the result and regenerates if it is not a valid solution.
- Carves a puzzle by blanking a difficulty-dependent number of random cells.
No uniqueness-of-solution check is made while carving.
"""
from __future__ import annotations
from typing import Dict, Optional
import logging
import random

from core.config import CELLS_TO_REMOVE, DifficultyLike, to_difficulty
from core.grid import DIGITS, GRID_SIZE, Grid, all_positions, deep_copy, empty_grid, shuffled
from core.rules import is_valid_placement, is_valid_solution

log = logging.getLogger(__name__)


def _find_empty(grid: Grid):
    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if grid[r][c] == 0:
                return r, c
    return None


def fill_board(grid: Grid, rng: Optional[random.Random] = None) -> bool:
    """Fill `grid` in place. Returns True once every cell holds a digit."""
    empty = _find_empty(grid)
    if empty is None:
        return True

    r, c = empty
    for num in shuffled(DIGITS, rng):
        if is_valid_placement(grid, r, c, num):
            grid[r][c] = num
            if fill_board(grid, rng):
                return True
            grid[r][c] = 0  # backtrack

    return False


def generate_solved_board(rng: Optional[random.Random] = None) -> Grid:
    """Return a new complete, verified solution grid."""
    attempt = 0
    while True:
        attempt += 1
        grid = empty_grid()
        fill_board(grid, rng)
        if is_valid_solution(grid):
            log.debug("Generated solution on attempt %d", attempt)
            return grid
        log.warning("Generated board failed validation (attempt %d), regenerating", attempt)


def create_puzzle(solution: Grid, difficulty: DifficultyLike,
                  rng: Optional[random.Random] = None,
                  cells_to_remove: Optional[Dict[str, int]] = None) -> Grid:
    """Copy `solution` and blank CELLS_TO_REMOVE[difficulty] random cells."""
    level = to_difficulty(difficulty).value
    table = CELLS_TO_REMOVE if cells_to_remove is None else cells_to_remove
    remove_count = table[level]

    puzzle = deep_copy(solution)
    positions = shuffled(all_positions(), rng)
    for r, c in positions[:remove_count]:
        puzzle[r][c] = 0
    log.debug("Carved %d cells for %s puzzle", remove_count, level)
    return puzzle
