"""
Game session module.

A GameSession is the caller-owned context a UI holds: the mode,
configuration and theme in use, the current state, and the history
of earlier states for undo.
"""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional, Union

from . import board as classic
from . import maze_engine
from .board import EASY, BoardConfig, GameState, GameStatus
from .maze import MazeState, generate_maze


GameValue = Union[GameState, MazeState]


class Mode(str, Enum):
    """Game modes a session can run."""

    CLASSIC = "classic"
    MAZE = "maze"


@dataclass(frozen=True)
class Theme:
    """
    Opaque presentation theme, passed through unchanged.

    Attributes:
        name: Display name.
        identifier: CSS class or other renderer-specific handle.
        assets: Asset name to URL or path.
    """

    name: str = "default"
    identifier: str = ""
    assets: Mapping[str, str] = field(default_factory=dict)


DEFAULT_THEME = Theme()


@dataclass
class GameSession:
    """
    One player's game in progress.

    Every action applies a pure transition to the current state; states
    that actually changed are pushed onto the history so they can be
    undone.
    """

    mode: Mode = Mode.CLASSIC
    config: BoardConfig = EASY
    theme: Theme = DEFAULT_THEME
    seed: Optional[int] = None
    state: GameValue = field(init=False)
    _history: List[GameValue] = field(default_factory=list, init=False, repr=False)
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.mode = Mode(self.mode)
        self._rng = random.Random(self.seed)
        self.reset()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def reset(self, config: Optional[BoardConfig] = None) -> GameValue:
        """Start a new game, optionally with a different configuration."""
        if config is not None:
            self.config = config
        if self.mode == Mode.MAZE:
            self.state = generate_maze(
                self.config.rows, self.config.cols, self.config.mines, self._rng
            )
        else:
            self.state = classic.new_game(self.config, self._rng)
        self._history.clear()
        return self.state

    def set_theme(self, theme: Theme) -> None:
        self.theme = theme

    def undo(self) -> bool:
        """
        Restore the previous state.

        Returns:
            True if a state was restored, False if there is no history.
        """
        if not self._history:
            return False
        self.state = self._history.pop()
        return True

    @property
    def history_size(self) -> int:
        return len(self._history)

    # ========================================================================
    # Actions
    # ========================================================================

    def reveal(self, row: int, col: int) -> GameValue:
        if self.mode == Mode.MAZE:
            return self._apply(maze_engine.reveal(self.state, row, col))
        return self._apply(classic.reveal(self.state, row, col))

    def toggle_flag(self, row: int, col: int) -> GameValue:
        if self.mode == Mode.MAZE:
            return self._apply(maze_engine.toggle_flag(self.state, row, col))
        return self._apply(classic.toggle_flag(self.state, row, col))

    def move(self, row: int, col: int) -> GameValue:
        """Move the maze player; classic sessions have no player."""
        self._require_maze("move")
        return self._apply(maze_engine.move(self.state, row, col))

    def use_defuser(self) -> GameValue:
        self._require_maze("use_defuser")
        return self._apply(maze_engine.use_defuser_on_adjacent_mine(self.state))

    @property
    def status(self) -> GameStatus:
        """Current game status."""
        if self.mode == Mode.MAZE:
            return maze_engine.status(self.state)
        return classic.status(self.state)

    def _require_maze(self, action: str) -> None:
        if self.mode != Mode.MAZE:
            raise ValueError(f"{action} is only available in maze mode")

    def _apply(self, new_state: GameValue) -> GameValue:
        if new_state is self.state:
            return self.state
        # Event-only results (a locked door) replace the state without an undo entry
        if not isinstance(new_state, MazeState) or maze_engine.changed(
            self.state, new_state
        ):
            self._history.append(self.state)
        self.state = new_state
        return self.state
