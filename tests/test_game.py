# tests/test_game.py
import json

import pytest

from conftest import SOLVED
from solver.config import load_config
from solver.errors import BoardError, FixedCellError, GameOverError, HintsExhaustedError
from solver.game import LOST, PLAYING, WON, GameSession
from solver.solver_core import compute_candidates
from types_sudoku import Board, Difficulty, Technique


def make_session(blanks, **kwargs):
    grid = [row[:] for row in SOLVED]
    for r, c in blanks:
        grid[r][c] = 0
    return GameSession(board=Board.from_values(grid), solution=[row[:] for row in SOLVED], **kwargs)


def test_new_session_uses_config():
    cfg = load_config(hints=5, max_mistakes=4)
    session = GameSession.new("Medium", config=cfg, seed=12)
    assert session.board.empty_count() == 45
    assert session.hints_remaining == 5
    assert session.max_mistakes == 4
    assert session.difficulty is Difficulty.MEDIUM
    assert session.status == PLAYING


def test_wrong_digit_is_flagged_and_keeps_notes():
    session = make_session([(0, 0), (0, 1)])
    session.board.cell(0, 0).notes = {4, 5}
    assert session.place_digit(0, 0, 4) is False
    cell = session.board.cell(0, 0)
    assert cell.value == 4 and cell.has_error
    assert cell.notes == {4, 5}
    assert session.mistakes == 1


def test_correct_digit_clears_own_and_peer_notes():
    session = make_session([(0, 0), (0, 1), (5, 0), (1, 1), (4, 4)])
    for r, c in [(0, 1), (5, 0), (1, 1), (4, 4)]:
        session.board.cell(r, c).notes = {5, 6}
    session.board.cell(0, 0).notes = {2, 5}
    assert session.place_digit(0, 0, 5) is True
    assert session.board.cell(0, 0).notes == set()
    assert not session.board.cell(0, 0).has_error
    assert session.board.cell(0, 1).notes == {6}
    assert session.board.cell(5, 0).notes == {6}
    assert session.board.cell(1, 1).notes == {6}
    assert session.board.cell(4, 4).notes == {5, 6}  # not a peer


def test_correcting_a_wrong_digit_clears_the_error():
    session = make_session([(2, 2), (3, 3)])
    session.place_digit(2, 2, 1)
    session.place_digit(2, 2, 8)
    assert not session.board.cell(2, 2).has_error
    assert session.mistakes == 1


def test_too_many_mistakes_loses_the_game():
    session = make_session([(0, 0), (0, 1)], max_mistakes=2)
    session.place_digit(0, 0, 1)
    session.place_digit(0, 0, 2)
    assert session.status == LOST
    with pytest.raises(GameOverError):
        session.place_digit(0, 1, 3)


def test_last_correct_digit_wins():
    session = make_session([(8, 8)])
    session.place_digit(8, 8, 9)
    assert session.status == WON
    session.tick(5)
    assert session.timer == 0


def test_givens_cannot_be_changed():
    session = make_session([(0, 0)])
    with pytest.raises(FixedCellError):
        session.place_digit(0, 1, 3)
    with pytest.raises(FixedCellError):
        session.erase(0, 1)
    with pytest.raises(FixedCellError):
        session.toggle_note(0, 1, 3)
    with pytest.raises(BoardError):
        session.place_digit(0, 0, 0)


def test_notes_toggle_and_erase():
    session = make_session([(0, 0), (0, 1)])
    assert session.toggle_note(0, 0, 7) is True
    assert session.toggle_note(0, 0, 7) is False
    assert session.board.cell(0, 0).notes == set()
    session.place_digit(0, 0, 1)
    session.erase(0, 0)
    cell = session.board.cell(0, 0)
    assert cell.value is None and not cell.has_error


def test_auto_notes_fill_candidates():
    session = make_session([(0, 0), (0, 1), (1, 0), (6, 6)])
    session.auto_notes()
    for r, c in [(0, 0), (0, 1), (1, 0), (6, 6)]:
        assert session.board.cell(r, c).notes == compute_candidates(session.board, r, c)
    assert session.board.cell(0, 2).notes == set()


def test_undo_restores_previous_board():
    session = make_session([(0, 0), (0, 1)])
    session.place_digit(0, 0, 9)
    session.toggle_note(0, 1, 2)
    assert session.undo() is True
    assert session.board.cell(0, 1).notes == set()
    assert session.undo() is True
    assert session.board.cell(0, 0).value is None
    assert session.undo() is False


def test_history_is_capped():
    session = make_session([(0, 0)], history_limit=3)
    for _ in range(5):
        session.toggle_note(0, 0, 1)
    assert len(session.history) == 3


def test_reveal_spends_hints():
    session = make_session([(0, 0), (4, 4)], hints_remaining=1)
    assert session.reveal_cell(0, 1) is False  # given
    assert session.reveal_cell(0, 0) is True
    assert session.board.cell(0, 0).value == 5
    assert session.hints_remaining == 0
    with pytest.raises(HintsExhaustedError):
        session.reveal_cell(4, 4)


def test_smart_hint_is_applied_and_cleared():
    session = make_session([(4, 4), (8, 8)])
    hint = session.smart_hint()
    assert hint.technique is Technique.NAKED_SINGLE
    assert session.active_hint == hint
    applied = session.apply_smart_hint()
    assert applied == hint
    assert session.active_hint is None
    assert session.board.cell(4, 4).value == 5
    assert session.hints_remaining == 3


def test_placing_the_hinted_digit_clears_the_active_hint():
    session = make_session([(4, 4), (8, 8)])
    session.smart_hint()
    session.place_digit(4, 4, 5)
    assert session.active_hint is None


def test_wrong_guess_falls_back_to_revealing():
    session = GameSession(board=Board(), solution=[row[:] for row in SOLVED])
    hint = session.apply_smart_hint()
    assert hint.technique is Technique.STRATEGIC_GUESS and hint.value == 1
    assert session.board.cell(0, 0).value == 5
    assert session.hints_remaining == 2
    assert session.mistakes == 0


def test_exhausted_reveal_fallback_clears_the_active_hint():
    session = GameSession(board=Board(), solution=[row[:] for row in SOLVED], hints_remaining=0)
    session.smart_hint()
    with pytest.raises(HintsExhaustedError):
        session.apply_smart_hint()
    assert session.active_hint is None
    assert session.board.cell(0, 0).is_empty
    assert session.history == []


def test_saved_state_round_trip():
    session = make_session([(0, 0), (3, 3)], mistakes=1, hints_remaining=2, timer=40)
    session.board.cell(0, 0).notes = {8, 2}
    session.place_digit(3, 3, 1)
    state = json.loads(session.dumps())
    assert set(state) == {"grid", "solution", "difficulty", "mistakes", "hints", "timer", "timestamp"}
    assert state["grid"][0][0]["notes"] == [2, 8]
    assert state["grid"][3][3]["isError"] is True

    restored = GameSession.loads(session.dumps())
    assert restored.board == session.board
    assert restored.solution == SOLVED
    assert (restored.mistakes, restored.hints_remaining, restored.timer) == (2, 2, 40)
    assert restored.history == []
    assert restored.status == PLAYING


def test_loading_derives_lost_and_won():
    state = make_session([(0, 0)], mistakes=3).to_saved_state()
    lost = GameSession.from_saved_state(state)
    assert lost.status == LOST
    with pytest.raises(GameOverError):
        lost.place_digit(0, 0, 5)

    won = GameSession.from_saved_state(make_session([]).to_saved_state())
    assert won.status == WON
