# sudoku_tool_api.py
# FastAPI wrapper for the engine tool functions.
# uvicorn is the server, installed with the "api" extra: pip install -e ".[api]"
# Run from the repo root with: uvicorn apps.api.sudoku_tool_api:app --reload

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from solver.config import load_config
from solver.errors import SudokuError
from solver.generator import generate
from solver.solver_core import compute_candidates, is_placement_valid, sanity_check
from solver.sudoku_tools import is_solved, next_hint
from types_sudoku import Board, Difficulty

app = FastAPI(title="Sudoku Puzzle Engine API")


class GridModel(BaseModel):
    grid: list[list[int]]


class NewGameRequest(BaseModel):
    difficulty: Difficulty = Difficulty.EASY
    seed: int | None = None


class CellRequest(BaseModel):
    grid: list[list[int]]
    row: int = Field(ge=0, le=8)
    col: int = Field(ge=0, le=8)


class PlacementRequest(CellRequest):
    digit: int = Field(ge=1, le=9)


class BoardModel(BaseModel):
    board: list[list[dict]]


def _board(grid: list[list[int]]) -> Board:
    try:
        return Board.from_values(grid)
    except SudokuError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/new_game")
def api_new_game(req: NewGameRequest):
    board, solution = generate(req.difficulty, seed=req.seed, config=load_config())
    return {
        "difficulty": req.difficulty.value,
        "board": board.to_dict(),
        "puzzle": board.values(),
        "solution": solution,
    }


@app.post("/candidates")
def api_candidates(req: CellRequest):
    board = _board(req.grid)
    try:
        cands = compute_candidates(board, req.row, req.col)
    except SudokuError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"row": req.row, "col": req.col, "candidates": sorted(cands)}


@app.post("/validate_placement")
def api_validate(req: PlacementRequest):
    _board(req.grid)
    return {"valid": is_placement_valid(req.grid, req.row, req.col, req.digit)}


@app.post("/next_hint")
def api_next_hint(payload: GridModel):
    hint = next_hint(_board(payload.grid))
    return {"hint": hint.to_move() if hint is not None else None}


@app.post("/is_solved")
def api_is_solved(payload: BoardModel):
    try:
        board = Board.from_dict(payload.board)
    except (SudokuError, KeyError) as e:
        raise HTTPException(status_code=400, detail=f"bad board: {e}")
    return {"solved": is_solved(board)}


@app.post("/sanity_check")
def api_sanity(payload: GridModel):
    try:
        return sanity_check(payload.grid)
    except SudokuError as e:
        raise HTTPException(status_code=400, detail=str(e))
