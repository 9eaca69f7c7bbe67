"""Puzzle generation: randomized backtracking fill, then random hole carving.

The fill walks the 81 slots in row-major order with an explicit stack of
(slot, untried digits) frames instead of recursion, so its depth is bounded by
the board size and its work by ``max_steps`` digit trials.

Carving clears uniformly random cells until the difficulty's hole count is
reached. There is no uniqueness or no-guess check on the result: the generated
solution is one valid completion, not necessarily the only one.
"""

# generator.py
from __future__ import annotations

import logging
import random

from solver.config import DEFAULTS, holes_for, load_config
from solver.errors import GenerationError
from solver.solver_core import flat_placement_ok
from types_sudoku import Board, Cell, Difficulty, Grid

log = logging.getLogger(__name__)


def _shuffled_digits(rng: random.Random) -> list[int]:
    digits = list(range(1, 10))
    rng.shuffle(digits)
    return digits


def fill_grid(rng: random.Random | None = None, max_steps: int = DEFAULTS["max_steps"]) -> Grid:
    """Return a completely filled, valid 9x9 grid."""
    rng = rng or random.Random()
    cells = [0] * 81
    stack = [(0, _shuffled_digits(rng))]
    steps = 0
    while stack:
        pos, untried = stack[-1]
        cells[pos] = 0
        placed = False
        while untried:
            d = untried.pop()
            steps += 1
            if steps > max_steps:
                raise GenerationError(f"grid fill exceeded {max_steps} digit trials")
            if flat_placement_ok(cells, pos, d):
                cells[pos] = d
                placed = True
                break
        if not placed:
            # dead end: drop the frame, the previous slot retries its next digit
            stack.pop()
            continue
        if pos == 80:
            log.debug("grid filled after %d digit trials", steps)
            return [cells[r * 9 : r * 9 + 9] for r in range(9)]
        stack.append((pos + 1, _shuffled_digits(rng)))
    raise GenerationError("grid fill exhausted every digit order")


def carve_holes(solution: Grid, holes: int, rng: random.Random | None = None) -> Grid:
    """Copy of `solution` with exactly `holes` distinct cells set to 0."""
    if not isinstance(holes, int) or not 0 <= holes <= 81:
        raise ValueError(f"holes must be in 0..81, got {holes!r}")
    rng = rng or random.Random()
    grid = [row[:] for row in solution]
    remaining = holes
    while remaining > 0:
        r = rng.randrange(9)
        c = rng.randrange(9)
        if grid[r][c] != 0:
            grid[r][c] = 0
            remaining -= 1
    return grid


def to_puzzle_board(grid: Grid) -> Board:
    """Cleared cells become mutable blanks, the rest fixed givens; no notes, no errors."""
    cells = []
    for r, row in enumerate(grid):
        for c, v in enumerate(row):
            cells.append(Cell(r, c, v, fixed=True) if v else Cell(r, c))
    return Board(cells)


def generate(
    difficulty: Difficulty | str = Difficulty.EASY,
    rng: random.Random | None = None,
    seed: int | None = None,
    config: dict | None = None,
) -> tuple[Board, Grid]:
    """Return (puzzle board, solution matrix) for the requested difficulty."""
    cfg = config if config is not None else load_config()
    if rng is None:
        rng = random.Random(seed)
    level = Difficulty.parse(difficulty)
    holes = holes_for(cfg, level)
    solution = fill_grid(rng, max_steps=cfg["max_steps"])
    puzzle = carve_holes(solution, holes, rng)
    log.debug("generated %s puzzle with %d holes", level.value, holes)
    return to_puzzle_board(puzzle), solution
