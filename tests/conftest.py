"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mazesweeper import (
    BoardConfig,
    Cell,
    ChestContent,
    GameState,
    MazeState,
    board_from_mines,
    build_maze_state,
)


# ============================================================================
# Random Source Fixtures
# ============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible generation."""
    return random.Random(1234)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def empty_board() -> GameState:
    """Create a 3x3 board with no mines for cascade testing."""
    return board_from_mines(BoardConfig(3, 3, 0), [])


@pytest.fixture
def corner_mine_board() -> GameState:
    """Create a 3x3 board with a single mine in the top-left corner."""
    return board_from_mines(BoardConfig(3, 3, 1), [(0, 0)])


@pytest.fixture
def tiny_board() -> GameState:
    """Create a 2x2 board with one mine at (0, 0)."""
    return board_from_mines(BoardConfig(2, 2, 1), [(0, 0)])


@pytest.fixture
def one_flag_board() -> GameState:
    """Create a mine-free 3x3 board that still allows one flag."""
    return board_from_mines(BoardConfig(3, 3, 1), [])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Maze Fixtures
# ============================================================================

# Row 0 is the guaranteed path from (0, 0) to the exit at (0, 6).
# Row 1 is wall except for a gap at (1, 3) leading to row 2.
CORRIDOR = (
    (0, 0, 0, 0, 0, 0, 0),
    (1, 1, 1, 0, 1, 1, 1),
    (0, 0, 0, 0, 0, 0, 0),
)
CORRIDOR_PATH = [(0, col) for col in range(7)]
KEY_CHEST = (0, 2)
DOOR = (0, 4)
DEFUSER_CHEST = (0, 5)
MINES = [(2, 0), (2, 6)]


@pytest.fixture
def corridor_layout() -> dict:
    """Keyword arguments for build_maze_state describing the corridor maze."""
    return {
        "maze": CORRIDOR,
        "path": CORRIDOR_PATH,
        "doors": [DOOR],
        "chests": [KEY_CHEST, DEFUSER_CHEST],
        "chest_contents": {
            KEY_CHEST: ChestContent.KEY,
            DEFUSER_CHEST: ChestContent.DEFUSER,
        },
        "mines": MINES,
    }


@pytest.fixture
def corridor_maze(corridor_layout: dict) -> MazeState:
    """
    Hand-built maze with a key chest, a door and a defuser chest on the
    path, and two mines in the lower corridor.
    """
    return build_maze_state(**corridor_layout)


@pytest.fixture
def trapped_chest_maze(corridor_layout: dict) -> MazeState:
    """Maze whose (0, 4) cell is both a defuser chest and a locked door."""
    layout = dict(
        corridor_layout,
        chests=[KEY_CHEST, DOOR],
        chest_contents={KEY_CHEST: ChestContent.KEY, DOOR: ChestContent.DEFUSER},
    )
    return build_maze_state(**layout)
