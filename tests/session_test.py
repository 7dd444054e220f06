import logging
import random

import pytest

from core.config import Difficulty, GameSettings
from core.grid import count_filled
from core.rules import is_valid_solution
from core.session import (
    GAVE_UP, IDLE, LOST, MSG_CLASH, MSG_GAVE_UP, MSG_LOCKED, MSG_PICK_CELL,
    MSG_TIME_UP, MSG_WIN, PLAYING, REVEAL_AUTO, REVEAL_GIVEN, REVEAL_PLAYER, WON,
    GameSession,
)


@pytest.fixture
def session(solution):
    """Session on the fixed solution with three cells blanked."""
    puzzle = [row[:] for row in solution]
    for r, c in [(0, 0), (0, 1), (8, 8)]:
        puzzle[r][c] = 0
    s = GameSession()
    s.load(solution, puzzle, "easy")
    return s


# ---------- Lifecycle ----------


def test_new_session_is_idle():
    s = GameSession()
    assert s.state == IDLE
    assert not s.is_playing and not s.is_over


def test_start_generates_consistent_game(caplog):
    s = GameSession(rng=random.Random(8))
    with caplog.at_level(logging.INFO, logger="core.session"):
        s.start(Difficulty.MEDIUM)
    assert s.state == PLAYING
    assert is_valid_solution(s.solution)
    assert count_filled(s.puzzle) == 41
    assert s.board == s.puzzle and s.board is not s.puzzle
    assert len(s.givens) == 41
    assert s.time_remaining == 600
    assert "Started medium game" in caplog.text


def test_start_uses_custom_settings():
    settings = GameSettings({"hard": 60}, {"hard": 120})
    s = GameSession(settings, random.Random(1))
    s.start("hard")
    assert count_filled(s.puzzle) == 21
    assert s.time_remaining == 120


def test_restart_replaces_everything(session):
    session.select_cell(0, 0)
    session.enter_number(5)
    session.start("easy")
    assert session.selected is None
    assert session.message is None
    assert count_filled(session.puzzle) == 51


# ---------- Selection ----------


def test_select_toggles(session):
    session.select_cell(2, 3)
    assert session.selected == (2, 3)
    session.select_cell(2, 3)
    assert session.selected is None


def test_move_selection_clamps(session):
    session.move_selection(0, 1)
    assert session.selected == (0, 0)
    session.move_selection(-1, -1)
    assert session.selected == (0, 0)
    for _ in range(12):
        session.move_selection(1, 1)
    assert session.selected == (8, 8)


# ---------- Number entry ----------


def test_entry_without_selection(session):
    assert session.enter_number(4) == MSG_PICK_CELL


def test_given_cells_are_locked(session):
    session.select_cell(4, 4)
    assert session.enter_number(1) == MSG_LOCKED
    assert session.board[4][4] == 5
    assert session.erase() == MSG_LOCKED
    assert session.board[4][4] == 5


def test_clashing_entry_is_reported_and_kept(session):
    session.select_cell(0, 0)
    # 3 already sits at (8, 0)
    assert session.enter_number(3) == MSG_CLASH
    assert session.board[0][0] == 3
    assert session.violations() == {(0, 0)}
    session.erase()
    assert session.message is None
    assert session.violations() == set()


def test_winning_entry(session, solution):
    for (r, c) in [(0, 0), (0, 1), (8, 8)]:
        session.select_cell(r, c)
        session.enter_number(solution[r][c])
    assert session.state == WON
    assert session.message == MSG_WIN
    assert session.is_over
    # Input is ignored once the game is over
    session.select_cell(0, 0)
    assert session.selected is None
    assert session.enter_number(1) is None


def test_wrong_full_board_is_not_a_win(session):
    # Swap the two blanks in row 0: complete but wrong
    session.select_cell(0, 0)
    session.enter_number(3)
    session.select_cell(0, 1)
    session.enter_number(5)
    session.select_cell(8, 8)
    session.enter_number(9)
    assert session.state == PLAYING


# ---------- Timer ----------


def test_countdown_and_expiry(session):
    assert session.format_time() == "15:00"
    session.tick(899.5)
    assert session.state == PLAYING
    assert session.format_time() == "00:01"
    assert session.is_urgent
    session.tick(1.0)
    assert session.state == LOST
    assert session.time_remaining == 0.0
    assert session.message == MSG_TIME_UP
    session.tick(1.0)
    assert session.time_remaining == 0.0


def test_urgency_threshold(session):
    session.tick(900 - 31)
    assert not session.is_urgent
    session.tick(1)
    assert session.is_urgent


# ---------- Give up / reveal ----------


def test_give_up_reveals_classes(session, solution):
    session.select_cell(0, 0)
    session.enter_number(solution[0][0])
    session.select_cell(0, 1)
    session.enter_number(9)
    session.give_up()
    assert session.state == GAVE_UP
    assert session.message == MSG_GAVE_UP
    reveal = session.reveal()
    assert reveal[0][0] == REVEAL_PLAYER
    assert reveal[0][1] == REVEAL_AUTO
    assert reveal[8][8] == REVEAL_AUTO
    assert reveal[4][4] == REVEAL_GIVEN


def test_give_up_only_while_playing(session):
    session.give_up()
    session.give_up()
    assert session.state == GAVE_UP
    assert GameSession().give_up() is None
