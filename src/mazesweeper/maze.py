"""
Maze module for Maze-Minesweeper.

Generates a random wall/open grid with a guaranteed path from the
start to a distant exit, places locked doors and chests along that
path, and scatters mines away from it.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .board import BoardConfig
from .cell import CellState, ChestContent, MazeCell
from .errors import MazeUnsatisfiableError
from .grid import Grid, Position, check_bounds, freeze, manhattan, neighbors
from .pathfinding import OPEN, WALL, find_path, reachable_from


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

WALL_PROBABILITY = 0.25
DEFAULT_MAX_ATTEMPTS = 1000

# One door per this many path cells, between MIN_DOORS and MAX_DOORS
DOOR_SPACING = 8
MIN_DOORS = 1
MAX_DOORS = 2


class MazeEvent(str, Enum):
    """Feedback produced by a maze transition."""

    KEY_FOUND = "key_found"
    DEFUSER_FOUND = "defuser_found"
    DOOR_UNLOCKED = "door_unlocked"
    DOOR_LOCKED = "door_locked"
    MINE_DEFUSED = "mine_defused"
    MINE_DETONATED = "mine_detonated"
    ESCAPED = "escaped"


# ============================================================================
# Maze State
# ============================================================================

@dataclass(frozen=True)
class Inventory:
    """Items collected from chests."""

    keys: int = 0
    defusers: int = 0


@dataclass(frozen=True)
class MazeState:
    """
    Immutable snapshot of a Maze-Minesweeper game.

    Attributes:
        maze: Grid of OPEN/WALL values.
        cell_state: Grid of MazeCell, indexed cell_state[row][col].
        player: Current player position.
        exit: Exit position; stepping onto it wins.
        mines: Mine positions chosen at generation time.
        chests: Chest positions, all on the guaranteed path.
        chest_contents: Item held by each chest.
        doors: Locked door positions, all on the guaranteed path.
        path: Guaranteed open path from the start to the exit.
        rows: Grid height.
        cols: Grid width.
        game_over: Whether the game has ended.
        won: Whether the player escaped.
        inventory: Keys and defusers held.
        events: Feedback from the transition that produced this state.
    """

    maze: Grid
    cell_state: Grid
    player: Position
    exit: Position
    mines: Tuple[Position, ...]
    chests: Tuple[Position, ...]
    chest_contents: Mapping[Position, ChestContent]
    doors: Tuple[Position, ...]
    path: Tuple[Position, ...]
    rows: int
    cols: int
    game_over: bool = False
    won: bool = False
    inventory: Inventory = field(default_factory=Inventory)
    events: Tuple[MazeEvent, ...] = ()

    @property
    def start(self) -> Position:
        """Player position at generation time."""
        return self.path[0]

    def cell(self, row: int, col: int) -> MazeCell:
        """Get cell at position, raising OutOfBoundsError if invalid."""
        check_bounds(row, col, self.rows, self.cols)
        return self.cell_state[row][col]

    def is_wall(self, row: int, col: int) -> bool:
        """Check if a position is a wall, raising OutOfBoundsError if invalid."""
        check_bounds(row, col, self.rows, self.cols)
        return self.maze[row][col] == WALL

    def cells(self) -> Iterable[Tuple[Position, MazeCell]]:
        """Iterate over every (position, cell) pair in row order."""
        for row, cells in enumerate(self.cell_state):
            for col, cell in enumerate(cells):
                yield Position(row, col), cell

    def observation(self) -> np.ndarray:
        """
        Get maze state as numpy array for ML agent.

        Returns:
            2D numpy array using the MazeCell encoding, with
                -3 = wall
                12 = exit
                13 = player
        """
        obs = np.zeros((self.rows, self.cols), dtype=np.int8)
        for (row, col), cell in self.cells():
            if self.maze[row][col] == WALL:
                obs[row, col] = -3
            else:
                obs[row, col] = cell.to_observation()
        obs[self.exit.row, self.exit.col] = 12
        obs[self.player.row, self.player.col] = 13
        return obs


# ============================================================================
# Generation (Low-level)
# ============================================================================

def minimum_distance(rows: int, cols: int) -> int:
    """Minimum Manhattan distance between start and exit."""
    return (rows + cols) // 3


def door_count(path_length: int) -> int:
    """Number of doors to place on a path of the given length."""
    return min(MAX_DOORS, max(MIN_DOORS, path_length // DOOR_SPACING))


def _random_walls(rows: int, cols: int, rng: random.Random) -> Grid:
    """Make each cell a wall independently with WALL_PROBABILITY."""
    return freeze(
        [WALL if rng.random() < WALL_PROBABILITY else OPEN
         for _ in range(cols)]
        for _ in range(rows)
    )


def _open_cells(maze: Grid) -> List[Position]:
    return [
        Position(row, col)
        for row, cells in enumerate(maze)
        for col, value in enumerate(cells)
        if value == OPEN
    ]


def _try_layout(
    rows: int, cols: int, rng: random.Random
) -> Optional[Tuple[Grid, List[Position]]]:
    """
    Make one attempt at a wall grid with a long enough start-exit path.

    Returns:
        (maze, path) on success, None if the attempt is rejected.
    """
    maze = _random_walls(rows, cols, rng)
    min_dist = minimum_distance(rows, cols)

    open_cells = _open_cells(maze)
    if len(open_cells) < 2:
        return None

    start = rng.choice(open_cells)
    far_cells = [cell for cell in open_cells if manhattan(cell, start) >= min_dist]
    if not far_cells:
        return None
    exit_ = rng.choice(far_cells)

    path = find_path(maze, start, exit_)
    if path is None or len(path) <= min_dist:
        return None
    # Interior must fit every door plus one chest per door and a defuser chest
    if len(path) - 2 < 2 * door_count(len(path)) + 1:
        return None
    return maze, path


def generate_maze(
    rows: int,
    cols: int,
    mine_count: int,
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> MazeState:
    """
    Generate a new Maze-Minesweeper game.

    Args:
        rows: Grid height.
        cols: Grid width.
        mine_count: Mines requested; fewer are placed if the cells off
            the guaranteed path run out.
        rng: Random source; a fresh unseeded one is used when omitted.
        max_attempts: Wall grids to try before giving up.

    Returns:
        New MazeState with the start cell revealed.

    Raises:
        ValueError: If dimensions or mine count are invalid.
        MazeUnsatisfiableError: If no attempt produced a valid layout.
    """
    BoardConfig(rows, cols, mine_count)
    rng = rng or random.Random()

    for attempt in range(1, max_attempts + 1):
        layout = _try_layout(rows, cols, rng)
        if layout is not None:
            break
        logger.debug("Rejected %dx%d maze layout (attempt %d)", rows, cols, attempt)
    else:
        logger.error("Gave up on %dx%d maze after %d attempts", rows, cols, max_attempts)
        raise MazeUnsatisfiableError(rows, cols, max_attempts)

    maze, path = layout
    start, exit_ = path[0], path[-1]

    doors_needed = door_count(len(path))
    picks = rng.sample(range(1, len(path) - 1), 2 * doors_needed + 1)
    doors = [path[index] for index in picks[:doors_needed]]
    chests = [path[index] for index in picks[doors_needed:]]
    chest_contents = {
        position: ChestContent.KEY if index < doors_needed else ChestContent.DEFUSER
        for index, position in enumerate(chests)
    }

    forbidden = set(path) | set(chests) | set(doors) | {start, exit_}
    available = [cell for cell in _open_cells(maze) if cell not in forbidden]
    mines = rng.sample(available, min(mine_count, len(available)))

    return build_maze_state(
        maze, path, doors, chests, chest_contents, mines
    )


def build_maze_state(
    maze: Sequence[Sequence[int]],
    path: Sequence[Tuple[int, int]],
    doors: Iterable[Tuple[int, int]],
    chests: Iterable[Tuple[int, int]],
    chest_contents: Mapping[Tuple[int, int], ChestContent],
    mines: Iterable[Tuple[int, int]],
) -> MazeState:
    """
    Materialize cell state for a maze layout.

    The first path cell is the start (revealed, player placed there)
    and the last is the exit. Walls get inert cells; adjacency counts
    cover open non-mine cells.
    """
    maze = freeze(maze)
    rows, cols = len(maze), len(maze[0])
    path = tuple(Position(*position) for position in path)
    doors = tuple(Position(*position) for position in doors)
    chests = tuple(Position(*position) for position in chests)
    mines = tuple(Position(*position) for position in mines)
    start, exit_ = path[0], path[-1]
    for position in (start, exit_) + doors + chests + mines:
        check_bounds(position.row, position.col, rows, cols)

    mine_set, door_set, chest_set = set(mines), set(doors), set(chests)
    cell_state = []
    for row in range(rows):
        cells = []
        for col in range(cols):
            position = Position(row, col)
            if maze[row][col] == WALL:
                cells.append(MazeCell())
                continue
            is_mine = position in mine_set
            adjacent = 0 if is_mine else sum(
                1 for neighbor in neighbors(row, col, rows, cols)
                if neighbor in mine_set
            )
            cells.append(MazeCell(
                is_mine=is_mine,
                adjacent_mines=adjacent,
                state=CellState.REVEALED if position == start else CellState.HIDDEN,
                chest=position in chest_set,
                door=position in door_set,
            ))
        cell_state.append(cells)

    return MazeState(
        maze=maze,
        cell_state=freeze(cell_state),
        player=start,
        exit=exit_,
        mines=mines,
        chests=chests,
        chest_contents=MappingProxyType(
            {Position(*key): ChestContent(value) for key, value in chest_contents.items()}
        ),
        doors=doors,
        path=path,
        rows=rows,
        cols=cols,
    )


# ============================================================================
# Validation
# ============================================================================

def check_invariants(state: MazeState) -> List[str]:
    """
    Re-check the generation guarantees of a maze.

    Returns:
        Human-readable violations; empty when the maze is sound.
    """
    problems = []
    start, exit_ = state.start, state.exit

    for name, position in (("start", start), ("exit", exit_), ("player", state.player)):
        if state.maze[position.row][position.col] != OPEN:
            problems.append(f"{name} {tuple(position)} is not on an open cell")

    if find_path(state.maze, start, exit_) is None:
        problems.append("no open path from start to exit")

    min_dist = minimum_distance(state.rows, state.cols)
    if manhattan(start, exit_) < min_dist:
        problems.append(f"exit is closer than {min_dist} to start")

    reachable = reachable_from(state.maze, start)
    on_path = set(state.path)
    for kind, positions in (("door", state.doors), ("chest", state.chests)):
        for position in positions:
            if position not in on_path:
                problems.append(f"{kind} {tuple(position)} is off the guaranteed path")
            if position not in reachable:
                problems.append(f"{kind} {tuple(position)} is unreachable from start")

    contents = list(state.chest_contents.values())
    if contents.count(ChestContent.KEY) < max(1, len(state.doors)):
        problems.append("not enough key chests for the doors")
    if contents.count(ChestContent.DEFUSER) != 1:
        problems.append("expected exactly one defuser chest")

    forbidden = on_path | set(state.chests) | set(state.doors) | {start, exit_}
    for position in state.mines:
        if position in forbidden:
            problems.append(f"mine {tuple(position)} on a forbidden cell")
        if state.maze[position.row][position.col] == WALL:
            problems.append(f"mine {tuple(position)} on a wall")

    for position, cell in state.cells():
        if state.maze[position.row][position.col] == WALL and (
            cell.is_mine or cell.chest or cell.door
        ):
            problems.append(f"wall {tuple(position)} carries content")

    if state.inventory.keys < 0 or state.inventory.defusers < 0:
        problems.append("negative inventory")
    return problems
