"""
Cell module for Minesweeper game.

Represents individual cells on the game board with their state
(hidden/revealed/flagged) and content (mine/number), plus the maze
variant carrying chests and doors.

Cells are frozen: every change produces a new cell.
"""
from enum import Enum, auto
from dataclasses import dataclass, replace
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


class ChestContent(str, Enum):
    """Item stored in a maze chest."""

    KEY = "key"
    DEFUSER = "defuser"


class Opened(str, Enum):
    """One-shot marker left on a maze cell for UI feedback."""

    KEY = "key"
    DEFUSER = "defuser"
    DOOR = "door"


# ============================================================================
# Cell Data Classes
# ============================================================================

@dataclass(frozen=True)
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
        state: Current visual state (hidden, revealed, or flagged).
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    def reveal(self) -> "Cell":
        """Return a revealed copy of this cell."""
        return replace(self, state=CellState.REVEALED)

    def toggle_flag(self) -> "Cell":
        """
        Return a copy with the flag toggled.

        Revealed cells cannot be flagged and are returned unchanged.
        """
        if self.state == CellState.REVEALED:
            return self
        if self.state == CellState.HIDDEN:
            return replace(self, state=CellState.FLAGGED)
        return replace(self, state=CellState.HIDDEN)

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to observation value for ML agent.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.is_mine:
            return 9
        return self.adjacent_mines


@dataclass(frozen=True)
class MazeCell(Cell):
    """
    Cell of a maze board.

    Attributes:
        chest: An unopened chest sits on this cell.
        door: A locked door sits on this cell.
        just_opened: Marker for the item collected or door unlocked here
            by the most recent actions, cleared by the UI.
    """

    chest: bool = False
    door: bool = False
    just_opened: Optional[Opened] = None

    def to_observation(self) -> int:
        """
        Extend the classic encoding with visible maze features.

        Returns:
            10: Hidden cell holding an unopened chest
            11: Hidden locked door
            otherwise the classic value
        """
        if self.state == CellState.HIDDEN:
            if self.door:
                return 11
            if self.chest:
                return 10
        return super().to_observation()
