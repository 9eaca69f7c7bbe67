"""Game session: applies player actions to a puzzle board against its solution.

A placement is checked against the solution at the same coordinate: a wrong
digit is kept on the board with its error flag set and counts as a mistake; a
correct digit clears the cell's notes and removes that digit from the notes of
every peer. Every mutating action snapshots the board first so it can be
undone. Saved state is plain JSON; undo history is not persisted.
"""

# game.py
from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from solver.config import load_config
from solver.errors import BoardError, FixedCellError, GameOverError, HintsExhaustedError
from solver.generator import generate
from solver.solver_core import compute_candidates, peers
from solver.sudoku_tools import is_solved, next_hint
from types_sudoku import Board, Difficulty, Grid, Hint

log = logging.getLogger(__name__)

PLAYING = "playing"
WON = "won"
LOST = "lost"


@dataclass
class GameSession:
    board: Board
    solution: Grid
    difficulty: Difficulty = Difficulty.EASY
    mistakes: int = 0
    hints_remaining: int = 3
    timer: int = 0
    status: str = PLAYING
    max_mistakes: int = 3
    history_limit: int = 20
    active_hint: Optional[Hint] = None
    history: list[Board] = field(default_factory=list, repr=False)

    @classmethod
    def new(cls, difficulty: Difficulty | str = Difficulty.EASY, config: dict | None = None,
            seed: int | None = None, rng: random.Random | None = None) -> "GameSession":
        cfg = config if config is not None else load_config()
        level = Difficulty.parse(difficulty)
        board, solution = generate(level, rng=rng, seed=seed, config=cfg)
        log.info("new %s game, %d empty cells", level.value, board.empty_count())
        return cls(
            board=board,
            solution=solution,
            difficulty=level,
            hints_remaining=cfg["hints"],
            max_mistakes=cfg["max_mistakes"],
            history_limit=cfg["history_limit"],
        )

    # --- helpers -------------------------------------------------------

    def _require_playing(self):
        if self.status != PLAYING:
            raise GameOverError(f"game is already {self.status}")

    def _snapshot(self):
        self.history.append(self.board.copy())
        if len(self.history) > self.history_limit:
            del self.history[: len(self.history) - self.history_limit]

    def _clear_notes_around(self, r: int, c: int, digit: int):
        for pr, pc in peers(r, c):
            self.board.cell(pr, pc).notes.discard(digit)

    def _place_correct(self, r: int, c: int, digit: int):
        cell = self.board.cell(r, c)
        cell.value = digit
        cell.has_error = False
        cell.notes.clear()
        self._clear_notes_around(r, c, digit)
        if self.active_hint is not None and (self.active_hint.row, self.active_hint.col) == (r, c):
            self.active_hint = None
        if is_solved(self.board):
            self.status = WON
            log.info("puzzle solved in %ds with %d mistakes", self.timer, self.mistakes)

    # --- actions -------------------------------------------------------

    def place_digit(self, r: int, c: int, digit: int) -> bool:
        """Write `digit` at (r, c). Returns True when it matches the solution."""
        self._require_playing()
        cell = self.board.cell(r, c)
        if cell.fixed:
            raise FixedCellError(f"r{r + 1}c{c + 1} is a given")
        if digit not in range(1, 10):
            raise BoardError(f"digit must be 1..9, got {digit!r}")
        if cell.value == digit:
            return not cell.has_error
        self._snapshot()
        if self.solution[r][c] == digit:
            self._place_correct(r, c, digit)
            return True
        # wrong digit: notes stay so they come back if the digit is erased
        cell.value = digit
        cell.has_error = True
        self.mistakes += 1
        if self.mistakes >= self.max_mistakes:
            self.status = LOST
            log.info("game lost after %d mistakes", self.mistakes)
        return False

    def toggle_note(self, r: int, c: int, digit: int) -> bool:
        """Flip `digit` in the cell's notes; returns whether it is now noted."""
        self._require_playing()
        cell = self.board.cell(r, c)
        if cell.fixed:
            raise FixedCellError(f"r{r + 1}c{c + 1} is a given")
        if digit not in range(1, 10):
            raise BoardError(f"note must be a digit 1..9, got {digit!r}")
        self._snapshot()
        if digit in cell.notes:
            cell.notes.discard(digit)
            return False
        cell.notes.add(digit)
        return True

    def erase(self, r: int, c: int):
        self._require_playing()
        cell = self.board.cell(r, c)
        if cell.fixed:
            raise FixedCellError(f"r{r + 1}c{c + 1} is a given")
        self._snapshot()
        cell.value = None
        cell.has_error = False

    def auto_notes(self):
        """Replace the notes of every empty cell with its current candidates."""
        self._require_playing()
        self._snapshot()
        for cell in self.board.cells:
            if cell.is_empty:
                cell.notes = compute_candidates(self.board, cell.row, cell.col)

    def reveal_cell(self, r: int, c: int) -> bool:
        """Spend one hint to write the solution digit. Returns False if nothing was spent."""
        self._require_playing()
        if self.hints_remaining <= 0:
            raise HintsExhaustedError("no hints left")
        cell = self.board.cell(r, c)
        if cell.fixed or cell.value == self.solution[r][c]:
            return False
        self._snapshot()
        self.hints_remaining -= 1
        self.active_hint = None
        self._place_correct(r, c, self.solution[r][c])
        return True

    def smart_hint(self) -> Optional[Hint]:
        self._require_playing()
        self.active_hint = next_hint(self.board)
        if self.active_hint is None:
            log.debug("no hint found")
        return self.active_hint

    def apply_smart_hint(self) -> Optional[Hint]:
        """Apply the active hint (looking one up if needed).

        A hint whose digit disagrees with the solution (possible for a guess)
        falls back to revealing the solution digit at that cell, which spends a
        hint and raises HintsExhaustedError when none are left. The active hint
        is cleared either way.
        """
        self._require_playing()
        hint = self.active_hint or self.smart_hint()
        if hint is None:
            return None
        self.active_hint = None
        if self.solution[hint.row][hint.col] == hint.value:
            self._snapshot()
            self._place_correct(hint.row, hint.col, hint.value)
        else:
            log.debug("hint %s=%d disagrees with the solution, revealing instead", hint.key, hint.value)
            self.reveal_cell(hint.row, hint.col)
        return hint

    def undo(self) -> bool:
        self._require_playing()
        if not self.history:
            return False
        self.board = self.history.pop()
        self.active_hint = None
        return True

    def tick(self, seconds: int = 1):
        if self.status == PLAYING:
            self.timer += seconds

    # --- persistence ---------------------------------------------------

    def to_saved_state(self) -> dict[str, Any]:
        return {
            "grid": self.board.to_dict(),
            "solution": [row[:] for row in self.solution],
            "difficulty": self.difficulty.value,
            "mistakes": self.mistakes,
            "hints": self.hints_remaining,
            "timer": self.timer,
            "timestamp": int(time.time() * 1000),
        }

    @classmethod
    def from_saved_state(cls, state: dict[str, Any], config: dict | None = None) -> "GameSession":
        """Rebuild a session from saved state; status is derived from the board and mistakes."""
        cfg = config if config is not None else load_config()
        session = cls(
            board=Board.from_dict(state["grid"]),
            solution=[list(row) for row in state["solution"]],
            difficulty=Difficulty.parse(state["difficulty"]),
            mistakes=int(state.get("mistakes", 0)),
            hints_remaining=int(state.get("hints", cfg["hints"])),
            timer=int(state.get("timer", 0)),
            max_mistakes=cfg["max_mistakes"],
            history_limit=cfg["history_limit"],
        )
        if session.mistakes >= session.max_mistakes:
            session.status = LOST
        elif is_solved(session.board):
            session.status = WON
        return session

    def dumps(self) -> str:
        return json.dumps(self.to_saved_state())

    @classmethod
    def loads(cls, raw: str, config: dict | None = None) -> "GameSession":
        return cls.from_saved_state(json.loads(raw), config=config)
