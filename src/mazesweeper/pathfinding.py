"""
Shortest-path utilities over a maze grid.

The grid holds OPEN (0) and WALL (1) values; movement is 4-connected
through open cells only.
"""
from collections import deque
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .grid import Position, orthogonal_neighbors


OPEN = 0
WALL = 1

MazeGrid = Sequence[Sequence[int]]


def _open_neighbors(maze: MazeGrid, position: Position) -> List[Position]:
    """4-connected open neighbors of a cell."""
    rows, cols = len(maze), len(maze[0])
    return [
        neighbor
        for neighbor in orthogonal_neighbors(position.row, position.col, rows, cols)
        if maze[neighbor.row][neighbor.col] == OPEN
    ]


def find_path(
    maze: MazeGrid, start: Tuple[int, int], end: Tuple[int, int]
) -> Optional[List[Position]]:
    """
    Find the shortest open path using breadth-first search.

    Args:
        maze: Grid of OPEN/WALL values.
        start: Starting (row, col).
        end: Target (row, col).

    Returns:
        Path from start to end inclusive, or None if end is unreachable.
    """
    start = Position(*start)
    end = Position(*end)
    queue = deque([start])
    previous: Dict[Position, Optional[Position]] = {start: None}

    while queue:
        current = queue.popleft()
        if current == end:
            break
        for neighbor in _open_neighbors(maze, current):
            if neighbor not in previous:
                previous[neighbor] = current
                queue.append(neighbor)

    if end not in previous:
        return None

    path = []
    step: Optional[Position] = end
    while step is not None:
        path.append(step)
        step = previous[step]
    path.reverse()
    return path


def reachable_from(maze: MazeGrid, start: Tuple[int, int]) -> Set[Position]:
    """Get every open cell 4-connected to start, start included."""
    start = Position(*start)
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in _open_neighbors(maze, current):
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen
