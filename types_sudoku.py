# types_sudoku.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, TypedDict

from solver.errors import BoardError

Grid = list[list[int]]
"""A 9x9 Sudoku grid as rows of integers (0 = empty)."""

DIGITS = range(1, 10)


class Difficulty(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: "Difficulty | str") -> "Difficulty":
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise ValueError(f"unknown difficulty: {value!r}")


class Technique(str, enum.Enum):
    NAKED_SINGLE = "NakedSingle"
    HIDDEN_SINGLE_ROW = "HiddenSingleRow"
    HIDDEN_SINGLE_COL = "HiddenSingleCol"
    HIDDEN_SINGLE_BOX = "HiddenSingleBox"
    STRATEGIC_GUESS = "StrategicGuess"


class Move(TypedDict, total=False):
    """A single human-style solving action used by the API & CLI layers."""

    index: int  # 1-based order in a walkthrough
    technique: str  # e.g., 'NakedSingle', 'HiddenSingleBox'
    type: str  # always 'placement' for this engine
    digit: int
    cell: str  # target cell (e.g., 'r4c7')
    confident: bool  # False for a strategic guess
    explanation: dict[str, Any]
    highlights: dict[str, Any]  # UI hints (row/col/box/cells) for overlay rendering


def _check_digit(d, what: str) -> None:
    if not isinstance(d, int) or isinstance(d, bool) or d not in DIGITS:
        raise BoardError(f"{what} must be a digit 1..9, got {d!r}")


def _check_coord(r: int, c: int) -> None:
    if not (0 <= r <= 8 and 0 <= c <= 8):
        raise BoardError(f"cell ({r}, {c}) is outside the 9x9 board")


@dataclass
class Cell:
    row: int
    col: int
    value: int | None = None
    fixed: bool = False
    notes: set[int] = field(default_factory=set)
    has_error: bool = False

    def __post_init__(self):
        _check_coord(self.row, self.col)
        if self.value is not None:
            _check_digit(self.value, "value")
        for n in self.notes:
            _check_digit(n, "note")
        if self.fixed and self.value is None:
            raise BoardError(f"fixed cell r{self.row + 1}c{self.col + 1} has no value")
        if self.has_error and self.value is None:
            raise BoardError(f"empty cell r{self.row + 1}c{self.col + 1} cannot carry an error flag")

    @property
    def is_empty(self) -> bool:
        return self.value is None

    def copy(self) -> "Cell":
        return Cell(self.row, self.col, self.value, self.fixed, set(self.notes), self.has_error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "value": self.value,
            "isInitial": self.fixed,
            "notes": sorted(self.notes),
            "isError": self.has_error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cell":
        return cls(
            row=data["row"],
            col=data["col"],
            value=data.get("value"),
            fixed=bool(data.get("isInitial", False)),
            notes=set(data.get("notes") or []),
            has_error=bool(data.get("isError", False)),
        )


class Board:
    """81 cells in a flat row-major list; slot ``row*9+col`` holds the cell at (row, col)."""

    def __init__(self, cells: list[Cell] | None = None):
        if cells is None:
            cells = [Cell(i // 9, i % 9) for i in range(81)]
        if len(cells) != 81:
            raise BoardError(f"a board holds 81 cells, got {len(cells)}")
        for i, cell in enumerate(cells):
            if (cell.row, cell.col) != divmod(i, 9):
                raise BoardError(f"cell ({cell.row}, {cell.col}) stored at slot {i}")
        self.cells = cells

    def cell(self, r: int, c: int) -> Cell:
        _check_coord(r, c)
        return self.cells[r * 9 + c]

    def rows(self) -> list[list[Cell]]:
        return [self.cells[r * 9 : r * 9 + 9] for r in range(9)]

    def values(self) -> Grid:
        return [[cell.value or 0 for cell in row] for row in self.rows()]

    def flat_values(self) -> list[int]:
        return [cell.value or 0 for cell in self.cells]

    def empty_count(self) -> int:
        return sum(1 for cell in self.cells if cell.is_empty)

    def copy(self) -> "Board":
        return Board([cell.copy() for cell in self.cells])

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self):
        return f"Board(empty={self.empty_count()})"

    @classmethod
    def from_values(cls, grid: Grid) -> "Board":
        """Build a board from a 9x9 matrix; non-zero entries become fixed givens."""
        if len(grid) != 9 or any(len(row) != 9 for row in grid):
            raise BoardError("grid must be 9x9")
        cells = []
        for r, row in enumerate(grid):
            for c, v in enumerate(row):
                if v:
                    cells.append(Cell(r, c, v, fixed=True))
                else:
                    cells.append(Cell(r, c))
        return cls(cells)

    def to_dict(self) -> list[list[dict[str, Any]]]:
        return [[cell.to_dict() for cell in row] for row in self.rows()]

    @classmethod
    def from_dict(cls, data: list[list[dict[str, Any]]]) -> "Board":
        if len(data) != 9 or any(len(row) != 9 for row in data):
            raise BoardError("serialized board must be 9x9")
        return cls([Cell.from_dict(item) for row in data for item in row])


@dataclass(frozen=True)
class Hint:
    """Next recommended placement. Recomputed on demand, never stored with the board."""

    row: int
    col: int
    value: int
    technique: Technique
    explanation: str

    @property
    def is_deduction(self) -> bool:
        return self.technique is not Technique.STRATEGIC_GUESS

    @property
    def key(self) -> str:
        return f"r{self.row + 1}c{self.col + 1}"

    def to_move(self) -> Move:
        r, c = self.row + 1, self.col + 1
        box = 3 * (self.row // 3) + (self.col // 3) + 1
        highlights: dict[str, Any] = {"cells": [self.key]}
        if self.technique is Technique.HIDDEN_SINGLE_ROW:
            highlights["row"] = f"r{r}"
        elif self.technique is Technique.HIDDEN_SINGLE_COL:
            highlights["col"] = f"c{c}"
        elif self.technique is Technique.HIDDEN_SINGLE_BOX:
            highlights["box"] = f"b{box}"
        return {
            "technique": self.technique.value,
            "type": "placement",
            "cell": self.key,
            "digit": self.value,
            "confident": self.is_deduction,
            "explanation": {
                "why": self.explanation,
                "units": {"row": f"r{r}", "col": f"c{c}", "box": f"b{box}"},
            },
            "highlights": highlights,
        }
