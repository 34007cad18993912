"""
Mazesweeper game module.

Provides the classic Minesweeper engine and the Maze-Minesweeper
variant: immutable game states, pure transitions, and maze generation.
"""
from .cell import Cell, CellState, ChestContent, MazeCell, Opened
from .errors import MazeUnsatisfiableError, MinesweeperError, OutOfBoundsError
from .grid import Position
from .board import (
    BoardConfig,
    GameState,
    GameStatus,
    EASY,
    MEDIUM,
    HARD,
    DIFFICULTY_LEVELS,
    get_difficulty,
    board_from_mines,
    new_game,
    safe_new_game,
    reveal,
    toggle_flag,
    status,
)
from .maze import (
    Inventory,
    MazeEvent,
    MazeState,
    build_maze_state,
    check_invariants,
    generate_maze,
)
from .pathfinding import OPEN, WALL, find_path, reachable_from
from .session import GameSession, Mode, Theme
from .environment import MinesweeperEnv, MazeEnv

__all__ = [
    "Cell",
    "CellState",
    "ChestContent",
    "MazeCell",
    "Opened",
    "MazeUnsatisfiableError",
    "MinesweeperError",
    "OutOfBoundsError",
    "Position",
    "BoardConfig",
    "GameState",
    "GameStatus",
    "EASY",
    "MEDIUM",
    "HARD",
    "DIFFICULTY_LEVELS",
    "get_difficulty",
    "board_from_mines",
    "new_game",
    "safe_new_game",
    "reveal",
    "toggle_flag",
    "status",
    "Inventory",
    "MazeEvent",
    "MazeState",
    "build_maze_state",
    "check_invariants",
    "generate_maze",
    "OPEN",
    "WALL",
    "find_path",
    "reachable_from",
    "GameSession",
    "Mode",
    "Theme",
    "MinesweeperEnv",
    "MazeEnv",
]
