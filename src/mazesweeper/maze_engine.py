"""
Maze-Minesweeper game actions.

Pure transitions over MazeState: revealing (with chest pickups, door
unlocking and defusers), flagging, moving the player, and status.
"""
import logging
from dataclasses import replace
from typing import Dict, List

from .board import GameStatus
from .cell import CellState, ChestContent, MazeCell, Opened
from .grid import GridEditor, Position, manhattan, neighbors, orthogonal_neighbors
from .maze import Inventory, MazeEvent, MazeState
from .pathfinding import WALL


logger = logging.getLogger(__name__)


MESSAGES: Dict[MazeEvent, str] = {
    MazeEvent.KEY_FOUND: "You found a key!",
    MazeEvent.DEFUSER_FOUND: "You found a bomb defuser!",
    MazeEvent.DOOR_UNLOCKED: "You unlocked a door!",
    MazeEvent.DOOR_LOCKED: "You need a key to unlock this door!",
    MazeEvent.MINE_DEFUSED: "You defused a mine!",
    MazeEvent.MINE_DETONATED: "You hit a mine!",
    MazeEvent.ESCAPED: "You escaped the maze!",
}


class _Reveal:
    """Mutable scratch space for a single reveal transition."""

    def __init__(self, state: MazeState) -> None:
        self.state = state
        self.cells = GridEditor(state.cell_state)
        self.keys = state.inventory.keys
        self.defusers = state.inventory.defusers
        self.events: List[MazeEvent] = []

    def open_chest(self, position: Position) -> None:
        content = self.state.chest_contents.get(position)
        opened = None
        if content == ChestContent.KEY:
            self.keys += 1
            opened = Opened.KEY
            self.events.append(MazeEvent.KEY_FOUND)
        elif content == ChestContent.DEFUSER:
            self.defusers += 1
            opened = Opened.DEFUSER
            self.events.append(MazeEvent.DEFUSER_FOUND)
        cell = self.cells[position]
        self.cells[position] = replace(
            cell, chest=False, just_opened=opened or cell.just_opened
        )

    def update(self, position: Position, **changes) -> None:
        self.cells[position] = replace(self.cells[position], **changes)

    def finish(self, **changes) -> MazeState:
        return replace(
            self.state,
            cell_state=self.cells.freeze(),
            inventory=Inventory(keys=self.keys, defusers=self.defusers),
            events=tuple(self.events),
            **changes,
        )


# ============================================================================
# Game Actions
# ============================================================================

def reveal(
    state: MazeState, row: int, col: int, use_defuser: bool = False
) -> MazeState:
    """
    Reveal a maze cell.

    Opening a chest adds its item to the inventory. A locked door needs
    a key; without one the door stays locked and only the chest effects
    of this call are kept. A mine ends the game unless use_defuser is
    set and a defuser is available. Empty cells flood-fill through open,
    unflagged, non-door neighbors, collecting chests on the way.

    Args:
        state: Current maze state.
        row: Row index to reveal.
        col: Column index to reveal.
        use_defuser: Spend a defuser if the cell holds a mine.

    Returns:
        New state, or the same state if the reveal is not allowed.
    """
    cell = state.cell(row, col)
    if state.game_over or state.maze[row][col] == WALL:
        return state
    if cell.is_revealed or cell.is_flagged:
        return state

    position = Position(row, col)
    step = _Reveal(state)

    if cell.chest:
        step.open_chest(position)

    if cell.door:
        if step.keys > 0:
            step.keys -= 1
            step.update(position, door=False, just_opened=Opened.DOOR)
            step.events.append(MazeEvent.DOOR_UNLOCKED)
        else:
            logger.debug("Door at %s is locked and no key is held", tuple(position))
            step.events.append(MazeEvent.DOOR_LOCKED)
            return step.finish()

    step.update(position, state=CellState.REVEALED)

    if cell.is_mine:
        if use_defuser and step.defusers > 0:
            step.defusers -= 1
            step.update(position, is_mine=False)
            step.events.append(MazeEvent.MINE_DEFUSED)
        else:
            for (mine_row, mine_col), other in state.cells():
                if other.is_mine:
                    step.update(Position(mine_row, mine_col), state=CellState.REVEALED)
            step.events.append(MazeEvent.MINE_DETONATED)
            return step.finish(game_over=True, won=False)

    if cell.adjacent_mines == 0:
        _flood_reveal(step, position)

    return step.finish()


def _flood_reveal(step: _Reveal, origin: Position) -> None:
    """Reveal outward from an empty cell using an explicit stack."""
    state = step.state
    stack = [origin]
    visited = {origin}
    while stack:
        current = stack.pop()
        for neighbor in neighbors(current.row, current.col, state.rows, state.cols):
            if neighbor in visited or state.maze[neighbor.row][neighbor.col] == WALL:
                continue
            visited.add(neighbor)
            cell: MazeCell = step.cells[neighbor]
            if cell.state != CellState.HIDDEN or cell.is_mine or cell.door:
                continue
            step.update(neighbor, state=CellState.REVEALED)
            if cell.chest:
                step.open_chest(neighbor)
            if cell.adjacent_mines == 0:
                stack.append(neighbor)


def toggle_flag(state: MazeState, row: int, col: int) -> MazeState:
    """
    Toggle flag on a maze cell.

    There is no flag budget in maze mode. Walls and revealed cells
    cannot be flagged.
    """
    cell = state.cell(row, col)
    if state.game_over or state.maze[row][col] == WALL or cell.is_revealed:
        return state
    editor = GridEditor(state.cell_state)
    editor[row, col] = cell.toggle_flag()
    return replace(state, cell_state=editor.freeze(), events=())


def move(state: MazeState, row: int, col: int) -> MazeState:
    """
    Move the player one step.

    The target must be orthogonally adjacent, revealed, and hold
    neither a mine nor a locked door. Reaching the exit wins.
    """
    target = state.cell(row, col)
    if state.game_over:
        return state
    if manhattan(state.player, (row, col)) != 1:
        return state
    if not target.is_revealed or target.is_mine or target.door:
        return state

    position = Position(row, col)
    if position == state.exit:
        return replace(
            state, player=position, game_over=True, won=True,
            events=(MazeEvent.ESCAPED,),
        )
    return replace(state, player=position, events=())


def use_defuser_on_adjacent_mine(state: MazeState) -> MazeState:
    """Defuse the first hidden mine next to the player, if a defuser is held."""
    if state.game_over or state.inventory.defusers <= 0:
        return state
    player = state.player
    for neighbor in orthogonal_neighbors(player.row, player.col, state.rows, state.cols):
        cell = state.cell_state[neighbor.row][neighbor.col]
        if cell.is_mine and not cell.is_revealed:
            return reveal(state, neighbor.row, neighbor.col, use_defuser=True)
    return state


def clear_feedback(state: MazeState) -> MazeState:
    """Drop every just_opened marker and pending event."""
    editor = GridEditor(state.cell_state)
    for position, cell in state.cells():
        if cell.just_opened is not None:
            editor[position] = replace(cell, just_opened=None)
    if not editor.changed and not state.events:
        return state
    return replace(state, cell_state=editor.freeze(), events=())


# ============================================================================
# State Accessors
# ============================================================================

def status(state: MazeState) -> GameStatus:
    """Get current game status."""
    if state.game_over:
        return GameStatus.WON if state.won else GameStatus.LOST
    return GameStatus.PLAYING


def changed(before: MazeState, after: MazeState) -> bool:
    """
    Check whether a transition altered the game, ignoring its events.

    A reveal on a locked door with no key returns a new state that only
    carries the DOOR_LOCKED event; callers treat that as no change.
    """
    if after is before:
        return False
    return (
        after.cell_state is not before.cell_state
        or after.inventory != before.inventory
        or after.player != before.player
        or after.game_over != before.game_over
    )


def status_message(state: MazeState) -> str:
    """Status line with the inventory counts."""
    current = status(state)
    if current == GameStatus.WON:
        headline = MESSAGES[MazeEvent.ESCAPED]
    elif current == GameStatus.LOST:
        headline = MESSAGES[MazeEvent.MINE_DETONATED]
    else:
        headline = "Navigate to the exit"
    inventory = state.inventory
    return f"{headline} | Keys: {inventory.keys} | Defusers: {inventory.defusers}"
