"""
Grid utilities shared by the classic and maze engines.

Grids are tuples of row tuples. Transitions edit them through a
GridEditor, which copies only the rows it touches so untouched rows
are shared between the old and the new state.
"""
from typing import Dict, Generic, List, NamedTuple, Sequence, Tuple, TypeVar

from .errors import OutOfBoundsError


T = TypeVar("T")

Grid = Tuple[Tuple[T, ...], ...]


class Position(NamedTuple):
    """A (row, col) coordinate on the grid."""

    row: int
    col: int


# ============================================================================
# Neighbor Utilities
# ============================================================================

# Orthogonal directions in scan order: right, down, left, up
ORTHOGONAL = ((0, 1), (1, 0), (0, -1), (-1, 0))

MOORE = tuple(
    (delta_row, delta_col)
    for delta_row in (-1, 0, 1)
    for delta_col in (-1, 0, 1)
    if (delta_row, delta_col) != (0, 0)
)


def in_bounds(row: int, col: int, rows: int, cols: int) -> bool:
    """Check if position is within grid bounds."""
    return 0 <= row < rows and 0 <= col < cols


def check_bounds(row: int, col: int, rows: int, cols: int) -> None:
    """Raise OutOfBoundsError if position is outside the grid."""
    if not in_bounds(row, col, rows, cols):
        raise OutOfBoundsError(row, col, rows, cols)


def neighbors(
    row: int, col: int, rows: int, cols: int
) -> List[Position]:
    """
    Get valid positions in the 8-connected neighborhood.

    Args:
        row: Row index of center cell.
        col: Column index of center cell.
        rows: Grid height.
        cols: Grid width.

    Returns:
        List of positions clipped at the grid edges.
    """
    result = []
    for delta_row, delta_col in MOORE:
        new_row = row + delta_row
        new_col = col + delta_col
        if in_bounds(new_row, new_col, rows, cols):
            result.append(Position(new_row, new_col))
    return result


def orthogonal_neighbors(
    row: int, col: int, rows: int, cols: int
) -> List[Position]:
    """Get valid 4-connected neighbors in right, down, left, up order."""
    result = []
    for delta_row, delta_col in ORTHOGONAL:
        new_row = row + delta_row
        new_col = col + delta_col
        if in_bounds(new_row, new_col, rows, cols):
            result.append(Position(new_row, new_col))
    return result


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Manhattan distance between two positions."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def freeze(rows: Sequence[Sequence[T]]) -> Grid:
    """Convert nested sequences to a tuple grid."""
    return tuple(tuple(row) for row in rows)


# ============================================================================
# Copy-on-write Editing
# ============================================================================

class GridEditor(Generic[T]):
    """
    Copy-on-write view over a tuple grid.

    Reads go to the original grid until a row is written; the first
    write to a row copies that row into a list.
    """

    def __init__(self, grid: Grid) -> None:
        self._grid = grid
        self._dirty: Dict[int, List[T]] = {}

    def __getitem__(self, position: Tuple[int, int]) -> T:
        row, col = position
        if row in self._dirty:
            return self._dirty[row][col]
        return self._grid[row][col]

    def __setitem__(self, position: Tuple[int, int], value: T) -> None:
        row, col = position
        if row not in self._dirty:
            self._dirty[row] = list(self._grid[row])
        self._dirty[row][col] = value

    @property
    def changed(self) -> bool:
        """Whether any row has been written."""
        return bool(self._dirty)

    def freeze(self) -> Grid:
        """Build the new grid, sharing rows that were never written."""
        if not self._dirty:
            return self._grid
        return tuple(
            tuple(self._dirty[index]) if index in self._dirty else row
            for index, row in enumerate(self._grid)
        )
