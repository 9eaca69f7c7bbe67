"""Exception types raised by the engine and the game session."""


class SudokuError(Exception):
    pass


class BoardError(SudokuError, ValueError):
    """Malformed board, cell, or coordinates."""


class CellNotEmptyError(BoardError):
    """Candidates were requested for a cell that already holds a value."""


class GenerationError(SudokuError, RuntimeError):
    pass


class ConfigError(SudokuError, ValueError):
    pass


class GameError(SudokuError):
    pass


class FixedCellError(GameError):
    pass


class GameOverError(GameError):
    pass


class HintsExhaustedError(GameError):
    pass
