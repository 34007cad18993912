"""
Exceptions raised by the mazesweeper engines.

Illegal game actions never raise; they return the input state. These
exceptions cover programmer errors and generation failure only.
"""


class MinesweeperError(Exception):
    """Base class for all mazesweeper errors."""


class OutOfBoundsError(MinesweeperError, IndexError):
    """A coordinate lies outside the grid."""

    def __init__(self, row: int, col: int, rows: int, cols: int) -> None:
        super().__init__(
            f"Position ({row}, {col}) is outside the {rows}x{cols} grid"
        )
        self.row = row
        self.col = col


class MazeUnsatisfiableError(MinesweeperError, RuntimeError):
    """Maze generation ran out of attempts without a valid layout."""

    def __init__(self, rows: int, cols: int, attempts: int) -> None:
        super().__init__(
            f"Could not generate a {rows}x{cols} maze "
            f"after {attempts} attempts"
        )
        self.rows = rows
        self.cols = cols
        self.attempts = attempts
