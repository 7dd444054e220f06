import random

from core.grid import (
    box_cells, box_of, box_origin, count_filled, deep_copy,
    empty_grid, given_cells, shuffled,
)


def test_empty_grid_is_all_zero():
    grid = empty_grid()
    assert len(grid) == 9
    assert all(row == [0] * 9 for row in grid)


def test_deep_copy_does_not_share_rows(solution):
    copy = deep_copy(solution)
    copy[0][0] = 0
    assert solution[0][0] == 5


def test_box_mapping():
    assert box_of(0, 0) == (0, 0)
    assert box_of(4, 7) == (1, 2)
    assert box_of(8, 8) == (2, 2)
    assert box_origin(5, 4) == (3, 3)
    assert box_cells(7, 1) == [(6, 0), (6, 1), (6, 2), (7, 0), (7, 1), (7, 2), (8, 0), (8, 1), (8, 2)]


def test_shuffled_is_permutation_and_leaves_input_alone():
    items = list(range(1, 10))
    out = shuffled(items, random.Random(7))
    assert sorted(out) == items
    assert items == list(range(1, 10))


def test_shuffled_is_deterministic_for_a_seed():
    assert shuffled(range(20), random.Random(3)) == shuffled(range(20), random.Random(3))


def test_given_cells_and_count(solution):
    solution[0][0] = 0
    solution[4][4] = 0
    givens = given_cells(solution)
    assert len(givens) == 79
    assert (0, 0) not in givens and (4, 4) not in givens
    assert (0, 1) in givens
    assert count_filled(solution) == 79
