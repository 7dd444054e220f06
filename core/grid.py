"""
Grid helpers shared by the Sudoku engine.
- Grids are 9x9 lists of ints, row-major, 0 meaning empty.
- Positions are (row, col) tuples.
"""
from __future__ import annotations
from typing import FrozenSet, Iterable, List, Optional, Tuple
import random

GRID_SIZE = 9
BOX_SIZE = 3
DIGITS = tuple(range(1, GRID_SIZE + 1))

Grid = List[List[int]]
Position = Tuple[int, int]


def empty_grid() -> Grid:
    return [[0] * GRID_SIZE for _ in range(GRID_SIZE)]


def deep_copy(grid: Grid) -> Grid:
    return [row[:] for row in grid]


def shuffled(items: Iterable, rng: Optional[random.Random] = None) -> list:
    """Return the items as a new list in uniformly random order (Fisher-Yates)."""
    out = list(items)
    (rng or random).shuffle(out)
    return out


def box_of(row: int, col: int) -> Position:
    """Box index (band, stack) for a cell."""
    return row // BOX_SIZE, col // BOX_SIZE


def box_origin(row: int, col: int) -> Position:
    """Top-left cell of the box containing (row, col)."""
    br, bc = box_of(row, col)
    return br * BOX_SIZE, bc * BOX_SIZE


def box_cells(row: int, col: int) -> List[Position]:
    r0, c0 = box_origin(row, col)
    return [(r, c) for r in range(r0, r0 + BOX_SIZE) for c in range(c0, c0 + BOX_SIZE)]


def all_positions() -> List[Position]:
    return [(r, c) for r in range(GRID_SIZE) for c in range(GRID_SIZE)]


def given_cells(puzzle: Grid) -> FrozenSet[Position]:
    """Positions pre-filled in a puzzle; these stay locked for the whole game."""
    return frozenset((r, c) for r, c in all_positions() if puzzle[r][c] != 0)


def count_filled(grid: Grid) -> int:
    return sum(1 for row in grid for v in row if v != 0)


def assert_grid(grid: Grid):
    assert len(grid) == GRID_SIZE, f"expected {GRID_SIZE} rows, got {len(grid)}"
    for row in grid:
        assert len(row) == GRID_SIZE, f"expected {GRID_SIZE} columns, got {len(row)}"


def assert_position(row: int, col: int):
    assert 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE, f"cell ({row}, {col}) is off the grid"
