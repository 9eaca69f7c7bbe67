"""Puzzle engine: constraint checks, board generation, and human-style next-move search."""
