"""Command-line demo: generate a puzzle, list its candidates, and show the suggested next moves."""

# demo_cli.py
# - Generates a puzzle of the requested difficulty (optionally seeded)
# - Computes candidates
# - Asks the deduction engine for the next hint
# - With --walkthrough N, plays N successive hints on a copy of the board
#
# Usage (from the repo root):
#   python -m apps.cli.demo_cli --difficulty Medium --seed 123 --walkthrough 5

import argparse
import json
import logging

from solver.config import load_config
from solver.generator import generate
from solver.sudoku_tools import compute_candidates_tool, next_hint, solve_with_hints
from types_sudoku import Difficulty


def build_payload(difficulty, seed=None, walkthrough=0, config=None):
    cfg = config if config is not None else load_config()
    board, solution = generate(difficulty, seed=seed, config=cfg)
    cands = compute_candidates_tool(board)["candidates"]
    hint = next_hint(board)
    payload = {
        "difficulty": Difficulty.parse(difficulty).value,
        "seed": seed,
        "puzzle": board.values(),
        "solution": solution,
        "empty_cells": board.empty_count(),
        "candidates_count": sum(len(v) for v in cands.values()),
        "next_hint": hint.to_move() if hint is not None else None,
    }
    if walkthrough:
        moves = []
        for i, h in enumerate(solve_with_hints(board, limit=walkthrough), 1):
            move = h.to_move()
            move["index"] = i
            moves.append(move)
        payload["moves"] = moves
    return payload


def main(args):
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    cfg = load_config(args.config)
    payload = build_payload(args.difficulty, seed=args.seed, walkthrough=args.walkthrough, config=cfg)
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--difficulty", type=str, default="Easy", choices=[d.value for d in Difficulty])
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--walkthrough", type=int, default=0, help="Number of successive hints to play")
    ap.add_argument("--config", type=str, default=None, help="YAML config (defaults: configs/engine.yaml values)")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()
    main(args)
