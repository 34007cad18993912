"""
Board module for Minesweeper game.

Implements the classic board: configuration and difficulty presets,
mine placement, and the pure reveal/flag transitions over an
immutable GameState.
"""
import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

from .cell import Cell, CellState
from .grid import Grid, GridEditor, Position, check_bounds, neighbors


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(str, Enum):
    """Possible states of the game."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        mines: Total mines to place. Values above rows * cols are
            accepted and capped at placement time.
        difficulty: Optional difficulty label.
    """

    rows: int = 9
    cols: int = 9
    mines: int = 10
    difficulty: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Board dimensions must be positive")
        if self.mines < 0:
            raise ValueError("Number of mines cannot be negative")

    @property
    def cell_count(self) -> int:
        """Total number of cells on the board."""
        return self.rows * self.cols


# Preset difficulty levels
EASY = BoardConfig(9, 9, 10, "easy")
MEDIUM = BoardConfig(16, 16, 40, "medium")
HARD = BoardConfig(16, 30, 99, "hard")

DIFFICULTY_LEVELS: Tuple[BoardConfig, ...] = (EASY, MEDIUM, HARD)


def get_difficulty(name: str) -> BoardConfig:
    """Look up a preset by name, falling back to easy."""
    for level in DIFFICULTY_LEVELS:
        if level.difficulty == name:
            return level
    logger.warning("Unknown difficulty %r, using %r", name, EASY.difficulty)
    return EASY


# ============================================================================
# Game State
# ============================================================================

@dataclass(frozen=True)
class GameState:
    """
    Immutable snapshot of a classic game.

    Attributes:
        board: Grid of cells, indexed board[row][col].
        game_over: Whether the game has ended.
        won: Whether the game ended in a win.
        flags_left: Flags the player may still place.
        config: Configuration the board was built from.
    """

    board: Grid
    game_over: bool
    won: bool
    flags_left: int
    config: BoardConfig

    @property
    def rows(self) -> int:
        """Number of board rows."""
        return self.config.rows

    @property
    def cols(self) -> int:
        """Number of board columns."""
        return self.config.cols

    def cell(self, row: int, col: int) -> Cell:
        """Get cell at position, raising OutOfBoundsError if invalid."""
        check_bounds(row, col, self.rows, self.cols)
        return self.board[row][col]

    def cells(self) -> Iterable[Tuple[Position, Cell]]:
        """Iterate over every (position, cell) pair in row order."""
        for row, cells in enumerate(self.board):
            for col, cell in enumerate(cells):
                yield Position(row, col), cell

    @property
    def mine_count(self) -> int:
        """Number of mines actually placed."""
        return sum(1 for _, cell in self.cells() if cell.is_mine)

    def hidden_cells(self) -> List[Position]:
        """
        Get list of cells that can still be revealed.

        Returns:
            List of positions whose cells are hidden (not flagged).
        """
        return [
            position for position, cell in self.cells()
            if cell.state == CellState.HIDDEN
        ]

    def observation(self) -> np.ndarray:
        """
        Get board state as numpy array for ML agent.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for (row, col), cell in self.cells():
            obs[row, col] = cell.to_observation()
        return obs


# ============================================================================
# Board Generation (Low-level)
# ============================================================================

def place_mines(
    rows: int, cols: int, count: int, rng: random.Random
) -> Set[Position]:
    """
    Choose mine positions uniformly at random without replacement.

    Shuffles every cell index and takes the first ``count``, so exactly
    min(count, rows * cols) mines are chosen.
    """
    indices = list(range(rows * cols))
    rng.shuffle(indices)
    return {Position(*divmod(index, cols)) for index in indices[:count]}


def count_adjacent_mines(
    row: int, col: int, rows: int, cols: int, mines: Set[Position]
) -> int:
    """Count mines adjacent to a specific cell."""
    return sum(1 for position in neighbors(row, col, rows, cols)
               if position in mines)


def board_from_mines(
    config: BoardConfig, mine_positions: Iterable[Tuple[int, int]]
) -> GameState:
    """
    Build a fresh game from an explicit mine layout.

    Args:
        config: Board configuration.
        mine_positions: (row, col) pairs holding mines.

    Returns:
        New GameState with all cells hidden.
    """
    mines = set()
    for row, col in mine_positions:
        check_bounds(row, col, config.rows, config.cols)
        mines.add(Position(row, col))

    board = tuple(
        tuple(
            Cell(is_mine=True) if (row, col) in mines else Cell(
                adjacent_mines=count_adjacent_mines(
                    row, col, config.rows, config.cols, mines
                )
            )
            for col in range(config.cols)
        )
        for row in range(config.rows)
    )
    return GameState(
        board=board,
        game_over=False,
        won=False,
        flags_left=config.mines,
        config=config,
    )


def new_game(
    config: BoardConfig, rng: Optional[random.Random] = None
) -> GameState:
    """
    Start a new classic game.

    Args:
        config: Board configuration.
        rng: Random source; a fresh unseeded one is used when omitted.

    Returns:
        GameState with min(config.mines, rows * cols) mines placed.
    """
    rng = rng or random.Random()
    mines = place_mines(config.rows, config.cols, config.mines, rng)
    return board_from_mines(config, mines)


def safe_new_game(
    config: BoardConfig,
    row: int,
    col: int,
    rng: Optional[random.Random] = None,
    max_attempts: int = 100,
) -> GameState:
    """
    Start a game whose (row, col) cell is blank, for a safe first click.

    Regenerates until the cell is neither a mine nor next to one. After
    max_attempts the last board is returned even if the cell is unsafe.
    """
    check_bounds(row, col, config.rows, config.cols)
    rng = rng or random.Random()
    state = new_game(config, rng)
    for _ in range(max_attempts - 1):
        cell = state.board[row][col]
        if not cell.is_mine and cell.adjacent_mines == 0:
            break
        state = new_game(config, rng)
    return state


# ============================================================================
# Game Actions (Mid-level)
# ============================================================================

def reveal(state: GameState, row: int, col: int) -> GameState:
    """
    Reveal a cell at the given position.

    If the cell is empty (0 adjacent mines), its connected empty region
    and the numbered cells bordering it are revealed too. If the cell
    is a mine, the game is lost.

    Args:
        state: Current game state.
        row: Row index to reveal.
        col: Column index to reveal.

    Returns:
        New state, or the same state if the reveal is not allowed.
    """
    cell = state.cell(row, col)
    if state.game_over or cell.state != CellState.HIDDEN:
        return state

    editor = GridEditor(state.board)
    editor[row, col] = cell.reveal()

    if cell.is_mine:
        return replace(state, board=editor.freeze(), game_over=True, won=False)

    if cell.adjacent_mines == 0:
        _flood_reveal(editor, row, col, state.rows, state.cols)

    board = editor.freeze()
    won = _all_safe_cells_revealed(board)
    return replace(state, board=board, game_over=won, won=won)


def _flood_reveal(
    editor: GridEditor, row: int, col: int, rows: int, cols: int
) -> None:
    """Reveal outward from an empty cell using an explicit stack."""
    stack = [Position(row, col)]
    visited = {Position(row, col)}
    while stack:
        current = stack.pop()
        for neighbor in neighbors(current.row, current.col, rows, cols):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            cell = editor[neighbor]
            if cell.state != CellState.HIDDEN or cell.is_mine:
                continue
            editor[neighbor] = cell.reveal()
            if cell.adjacent_mines == 0:
                stack.append(neighbor)


def _all_safe_cells_revealed(board: Grid) -> bool:
    """Check if all non-mine cells are revealed."""
    return all(
        cell.is_revealed or cell.is_mine
        for cells in board
        for cell in cells
    )


def toggle_flag(state: GameState, row: int, col: int) -> GameState:
    """
    Toggle flag on a cell.

    Placing a flag needs flags_left > 0; removing one gives it back.

    Args:
        state: Current game state.
        row: Row index.
        col: Column index.

    Returns:
        New state, or the same state if the toggle is not allowed.
    """
    cell = state.cell(row, col)
    if state.game_over or cell.is_revealed:
        return state

    if cell.is_flagged:
        flags_left = state.flags_left + 1
    elif state.flags_left > 0:
        flags_left = state.flags_left - 1
    else:
        return state

    editor = GridEditor(state.board)
    editor[row, col] = cell.toggle_flag()
    return replace(state, board=editor.freeze(), flags_left=flags_left)


# ============================================================================
# State Accessors (High-level)
# ============================================================================

def status(state: GameState) -> GameStatus:
    """Get current game status."""
    if state.game_over:
        return GameStatus.WON if state.won else GameStatus.LOST
    return GameStatus.PLAYING
