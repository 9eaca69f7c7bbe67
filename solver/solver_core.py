"""Core Sudoku utilities used by the generator and the deduction engine: index math, peers, unit iterators, and candidate computation."""

# solver_core.py
# Boards are addressed as a flat array of 81 slots, slot = row*9 + col (0-based).
# Matrices handed in by callers are 9x9 lists of ints (0 = blank).

from __future__ import annotations

from solver.errors import BoardError, CellNotEmptyError
from types_sudoku import Board, Grid

ALL_DIGITS = frozenset(range(1, 10))


def rc_to_idx(r: int, c: int) -> int:
    return r * 9 + c


def idx_to_rc(i: int) -> tuple[int, int]:
    return divmod(i, 9)


def rc_to_key(r: int, c: int) -> str:
    """1-based display key, e.g. (0, 1) -> 'r1c2'."""
    return f"r{r + 1}c{c + 1}"


def which_box(r: int, c: int) -> int:
    """0-based box number, boxes counted row-major."""
    return 3 * (r // 3) + (c // 3)


def box_origin(r: int, c: int) -> tuple[int, int]:
    return r - r % 3, c - c % 3


ROW_UNITS: list[list[int]] = [[rc_to_idx(r, c) for c in range(9)] for r in range(9)]
COL_UNITS: list[list[int]] = [[rc_to_idx(r, c) for r in range(9)] for c in range(9)]
BOX_UNITS: list[list[int]] = []
for br in range(0, 9, 3):
    for bc in range(0, 9, 3):
        BOX_UNITS.append([rc_to_idx(r, c) for r in range(br, br + 3) for c in range(bc, bc + 3)])

PEERS: list[frozenset[int]] = []
for i in range(81):
    r, c = idx_to_rc(i)
    ps = set(ROW_UNITS[r]) | set(COL_UNITS[c]) | set(BOX_UNITS[which_box(r, c)])
    ps.discard(i)
    PEERS.append(frozenset(ps))


def peers(r: int, c: int) -> list[tuple[int, int]]:
    """Coordinates of every cell sharing a row, column, or box with (r, c)."""
    return sorted(idx_to_rc(j) for j in PEERS[rc_to_idx(r, c)])


def _check_rc(row: int, col: int) -> None:
    if not (0 <= row <= 8 and 0 <= col <= 8):
        raise BoardError(f"cell ({row}, {col}) is outside the 9x9 board")


def _check_matrix(values: Grid) -> None:
    if len(values) != 9 or any(len(row) != 9 for row in values):
        raise BoardError("grid must be 9x9")


def is_placement_valid(values: Grid, row: int, col: int, digit: int) -> bool:
    """True iff `digit` is not already present elsewhere in the row, column, or box of (row, col)."""
    _check_rc(row, col)
    for x in range(9):
        if x != col and values[row][x] == digit:
            return False
    for x in range(9):
        if x != row and values[x][col] == digit:
            return False
    r0, c0 = box_origin(row, col)
    for r in range(r0, r0 + 3):
        for c in range(c0, c0 + 3):
            if (r, c) != (row, col) and values[r][c] == digit:
                return False
    return True


def flat_placement_ok(cells: list[int], idx: int, digit: int) -> bool:
    """Flat-array form of is_placement_valid used by the generator's inner loop."""
    return all(cells[j] != digit for j in PEERS[idx])


def placed_in_peers(cells: list[int], idx: int) -> set[int]:
    return {cells[j] for j in PEERS[idx]} - {0}


def compute_candidates(board: Board, row: int, col: int) -> set[int]:
    """Digits 1..9 that can legally go in the empty cell (row, col), given placed values only."""
    _check_rc(row, col)
    cell = board.cell(row, col)
    if not cell.is_empty:
        raise CellNotEmptyError(f"{rc_to_key(row, col)} already holds {cell.value}")
    return set(ALL_DIGITS - placed_in_peers(board.flat_values(), rc_to_idx(row, col)))


def candidate_map(board: Board) -> dict[int, set[int]]:
    """Flat index -> candidate set, for every empty cell of the board."""
    cells = board.flat_values()
    return {i: set(ALL_DIGITS - placed_in_peers(cells, i)) for i in range(81) if cells[i] == 0}


def _duplicates_in_unit(vals):
    seen = set()
    dups = set()
    for v in vals:
        if v == 0:
            continue
        if v in seen:
            dups.add(v)
        seen.add(v)
    return dups


def sanity_check(values: Grid) -> dict:
    """Report duplicated digits per row, column, and box of a 9x9 matrix."""
    _check_matrix(values)
    flat = [v for row in values for v in row]
    issues = []
    for kind, units in (("r", ROW_UNITS), ("c", COL_UNITS), ("b", BOX_UNITS)):
        for n, unit in enumerate(units):
            dups = _duplicates_in_unit(flat[i] for i in unit)
            if dups:
                cells = [rc_to_key(*idx_to_rc(i)) for i in unit if flat[i] in dups]
                issues.append({"type": "duplicate", "unit": f"{kind}{n + 1}", "digits": sorted(dups), "cells": cells})
    return {"ok": len(issues) == 0, "issues": issues}


def is_complete_solution(values: Grid) -> bool:
    _check_matrix(values)
    if any(v not in ALL_DIGITS for row in values for v in row):
        return False
    return sanity_check(values)["ok"]
