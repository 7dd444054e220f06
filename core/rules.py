"""
Sudoku rule checks.
- Placement: a digit may not repeat in its row, column or 3x3 box.
- Solution: every row, column and box holds 1-9 exactly once.
- Violations are evaluated against the player's live board, not the answer key.
"""
from __future__ import annotations
from typing import Iterable, Set

from core.grid import (
    BOX_SIZE, DIGITS, GRID_SIZE, Grid, Position,
    all_positions, assert_grid, assert_position, box_cells,
)

_FULL_SET = frozenset(DIGITS)


def is_valid_placement(grid: Grid, row: int, col: int, num: int) -> bool:
    """Return False if `num` already occurs elsewhere in the row, column or box of (row, col).

    The target cell itself is ignored, so a tentatively filled cell can be checked
    in place.
    """
    assert_position(row, col)
    assert 1 <= num <= GRID_SIZE, f"digit {num} out of range"
    # Row and column
    for i in range(GRID_SIZE):
        if i != col and grid[row][i] == num:
            return False
        if i != row and grid[i][col] == num:
            return False
    # Box
    for r, c in box_cells(row, col):
        if (r, c) != (row, col) and grid[r][c] == num:
            return False
    return True


def has_violation(board: Grid, row: int, col: int, num: int) -> bool:
    """True if `num` at (row, col) clashes with another value on the player's board.

    Correctness against the solution is irrelevant here: a right digit that clashes
    with a wrong one is flagged, a wrong digit that clashes with nothing is not.
    """
    if num == 0:
        return False
    return not is_valid_placement(board, row, col, num)


def find_violations(board: Grid, givens: Iterable[Position] = ()) -> Set[Position]:
    """All non-empty, non-given cells currently in conflict. Recompute after every edit."""
    locked = set(givens)
    return {
        (r, c) for r, c in all_positions()
        if (r, c) not in locked and board[r][c] != 0 and has_violation(board, r, c, board[r][c])
    }


def _region_ok(values: Iterable[int]) -> bool:
    seen = set(values)
    return len(seen) == GRID_SIZE and seen == _FULL_SET


def is_valid_solution(grid: Grid) -> bool:
    assert_grid(grid)
    for i in range(GRID_SIZE):
        if not _region_ok(grid[i]):
            return False
        if not _region_ok(grid[r][i] for r in range(GRID_SIZE)):
            return False
    for br in range(0, GRID_SIZE, BOX_SIZE):
        for bc in range(0, GRID_SIZE, BOX_SIZE):
            if not _region_ok(grid[r][c] for r, c in box_cells(br, bc)):
                return False
    return True


def check_win(board: Grid, solution: Grid) -> bool:
    """All cells filled and equal to the solution."""
    for r, c in all_positions():
        v = board[r][c]
        if v == 0 or v != solution[r][c]:
            return False
    return True
