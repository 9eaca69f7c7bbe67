"""Human-style solving helpers: candidate listing, the next-move search over singles (with a guess fallback), and the win check. Also provides tool-friendly wrappers for the API and the demo CLI."""

# sudoku_tools.py
# Technique order is fixed: naked single, hidden single in a row, in a column,
# in a box, then a strategic guess. Each stage scans the whole board before the
# next one is tried; the first hit is returned.

from __future__ import annotations

from typing import Callable, Optional

from solver.solver_core import (
    BOX_UNITS,
    COL_UNITS,
    ROW_UNITS,
    candidate_map,
    idx_to_rc,
    rc_to_key,
)
from types_sudoku import Board, Grid, Hint, Technique

CandidateMap = dict[int, set[int]]


def find_naked_single(board: Board, cands: CandidateMap) -> Optional[Hint]:
    for i in range(81):
        opts = cands.get(i)
        if opts is not None and len(opts) == 1:
            r, c = idx_to_rc(i)
            (d,) = opts
            return Hint(
                r, c, d, Technique.NAKED_SINGLE,
                f"Only {d} fits {rc_to_key(r, c)}: every other digit already appears "
                f"in row {r + 1}, column {c + 1} or box {3 * (r // 3) + c // 3 + 1}.",
            )
    return None


def _hidden_single_in(units: list[list[int]], cands: CandidateMap) -> Optional[tuple[int, int, int]]:
    """First (unit number, slot, digit) where a digit has exactly one candidate slot in the unit."""
    for n, unit in enumerate(units):
        pos_for_digit: dict[int, list[int]] = {d: [] for d in range(1, 10)}
        for i in unit:
            for d in cands.get(i, ()):
                pos_for_digit[d].append(i)
        for d in range(1, 10):
            if len(pos_for_digit[d]) == 1:
                return n, pos_for_digit[d][0], d
    return None


def find_hidden_single_row(board: Board, cands: CandidateMap) -> Optional[Hint]:
    hit = _hidden_single_in(ROW_UNITS, cands)
    if hit is None:
        return None
    n, i, d = hit
    r, c = idx_to_rc(i)
    return Hint(
        r, c, d, Technique.HIDDEN_SINGLE_ROW,
        f"{rc_to_key(r, c)} is the only cell in row {n + 1} that can take {d}; "
        f"the other empty cells of the row rule it out.",
    )


def find_hidden_single_col(board: Board, cands: CandidateMap) -> Optional[Hint]:
    hit = _hidden_single_in(COL_UNITS, cands)
    if hit is None:
        return None
    n, i, d = hit
    r, c = idx_to_rc(i)
    return Hint(
        r, c, d, Technique.HIDDEN_SINGLE_COL,
        f"{rc_to_key(r, c)} is the only cell in column {n + 1} that can take {d}; "
        f"the other empty cells of the column rule it out.",
    )


def find_hidden_single_box(board: Board, cands: CandidateMap) -> Optional[Hint]:
    hit = _hidden_single_in(BOX_UNITS, cands)
    if hit is None:
        return None
    n, i, d = hit
    r, c = idx_to_rc(i)
    return Hint(
        r, c, d, Technique.HIDDEN_SINGLE_BOX,
        f"Inside box {n + 1}, {d} fits only in {rc_to_key(r, c)}; "
        f"every other cell of the box is filled or blocked for {d}.",
    )


def find_strategic_guess(board: Board, cands: CandidateMap) -> Optional[Hint]:
    for i in range(81):
        opts = cands.get(i)
        if opts:
            r, c = idx_to_rc(i)
            d = min(opts)
            return Hint(
                r, c, d, Technique.STRATEGIC_GUESS,
                f"No single can be proven right now. {d} is a legal candidate for "
                f"{rc_to_key(r, c)} (one of {len(opts)}), but this is a guess, not a deduction.",
            )
    return None


TECHNIQUES: list[Callable[[Board, CandidateMap], Optional[Hint]]] = [
    find_naked_single,
    find_hidden_single_row,
    find_hidden_single_col,
    find_hidden_single_box,
    find_strategic_guess,
]


def next_hint(board: Board) -> Optional[Hint]:
    """Next recommended placement, or None when no empty cell has a candidate
    (the board is complete or has reached a dead end)."""
    cands = candidate_map(board)
    for finder in TECHNIQUES:
        hint = finder(board, cands)
        if hint is not None:
            return hint
    return None


def is_solved(board: Board) -> bool:
    """Every cell filled and none flagged as an error. Correctness itself is
    taken from the error flags kept by whoever applies the moves."""
    return all(cell.value is not None and not cell.has_error for cell in board.cells)


def solve_with_hints(board: Board, limit: int = 81) -> list[Hint]:
    """Apply up to `limit` successive hints to a copy of the board and return them in order."""
    work = board.copy()
    hints = []
    while len(hints) < limit:
        hint = next_hint(work)
        if hint is None:
            break
        work.cell(hint.row, hint.col).value = hint.value
        hints.append(hint)
    return hints


def compute_candidates_tool(current: Board | Grid) -> dict:
    """Candidate digits for each empty cell. Returns a dict like {'candidates': {'r1c2': [1, 2, 5], ...}}."""
    board = current if isinstance(current, Board) else Board.from_values(current)
    return {"candidates": {rc_to_key(*idx_to_rc(i)): sorted(opts) for i, opts in candidate_map(board).items()}}


def next_hint_tool(current: Board | Grid) -> dict:
    board = current if isinstance(current, Board) else Board.from_values(current)
    hint = next_hint(board)
    return {"hint": hint.to_move() if hint is not None else None}
