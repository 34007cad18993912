"""
Gymnasium environment wrappers for Minesweeper and Maze-Minesweeper.

Provides a standard RL interface over the pure game transitions.
"""
import random
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from . import board as classic
from . import maze_engine
from .board import BoardConfig, GameState, GameStatus
from .grid import ORTHOGONAL, in_bounds
from .maze import MazeState, generate_maze
from .pathfinding import WALL


def _seeded_rng(np_random: np.random.Generator) -> random.Random:
    """Derive a game random source from the environment's generator."""
    return random.Random(int(np_random.integers(2**32)))


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for classic Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size rows * cols.
        Action i corresponds to cell at (i // cols, i % cols).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (already revealed/flagged)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: easy, 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.render_mode = render_mode
        self.state: Optional[GameState] = None

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.rows, self.config.cols),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.rows * self.config.cols)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.state = classic.new_game(self.config, _seeded_rng(self.np_random))
        self._steps = 0
        return self.state.observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Cell index to reveal (row * cols + col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        row, col = divmod(int(action), self.config.cols)
        self._steps += 1

        reward = self._calculate_reward(row, col)
        terminated = self.state.game_over

        return self.state.observation(), reward, terminated, False, self._get_info()

    def _calculate_reward(self, row: int, col: int) -> float:
        """Reveal a cell and score the outcome."""
        new_state = classic.reveal(self.state, row, col)
        if new_state is self.state:
            return -0.1
        self.state = new_state

        current = classic.status(new_state)
        if current == GameStatus.WON:
            return 10.0
        if current == GameStatus.LOST:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        revealed = sum(1 for _, cell in self.state.cells() if cell.is_revealed)
        return {
            "steps": self._steps,
            "revealed": revealed,
            "total_safe": self.config.cell_count - self.state.mine_count,
            "flags_left": self.state.flags_left,
            "status": classic.status(self.state).value,
        }

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for row, col in self.state.hidden_cells():
            mask[row * self.config.cols + col] = True
        return mask

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_text(self.state.observation())
        if self.render_mode == "human":
            print(render_text(self.state.observation()))
        return None


# ============================================================================
# Maze Environment
# ============================================================================

class MazeEnv(gym.Env):
    """
    Gymnasium environment for Maze-Minesweeper.

    Observation:
        MazeState.observation(): the classic encoding plus
        -3 = wall, 10 = hidden chest, 11 = hidden door,
        12 = exit, 13 = player.

    Actions:
        0 .. rows*cols-1: reveal that cell
        then 4 moves (right, down, left, up) and one defuse action.

    Rewards:
        - +10 for reaching the exit
        - -10 for hitting a mine
        - +0.1 for any other action that changed the state
        - -0.1 for an action that changed nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
        max_attempts: int = 1000,
    ) -> None:
        super().__init__()

        self.config = config or BoardConfig()
        self.render_mode = render_mode
        self.max_attempts = max_attempts
        self.state: Optional[MazeState] = None

        self._cells = self.config.rows * self.config.cols
        self.observation_space = spaces.Box(
            low=-3,
            high=13,
            shape=(self.config.rows, self.config.cols),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self._cells + len(ORTHOGONAL) + 1)

        self._steps = 0

    @property
    def defuse_action(self) -> int:
        return self._cells + len(ORTHOGONAL)

    def move_action(self, direction: int) -> int:
        """Action index for a move in ORTHOGONAL[direction]."""
        return self._cells + direction

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.state = generate_maze(
            self.config.rows,
            self.config.cols,
            self.config.mines,
            _seeded_rng(self.np_random),
            self.max_attempts,
        )
        self._steps = 0
        return self.state.observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        action = int(action)
        self._steps += 1

        new_state = self._apply(action)
        progressed = maze_engine.changed(self.state, new_state)
        self.state = new_state
        if not progressed:
            reward = -0.1
        else:
            current = maze_engine.status(new_state)
            if current == GameStatus.WON:
                reward = 10.0
            elif current == GameStatus.LOST:
                reward = -10.0
            else:
                reward = 0.1

        terminated = self.state.game_over
        return self.state.observation(), reward, terminated, False, self._get_info()

    def _apply(self, action: int) -> MazeState:
        """Run the transition an action stands for."""
        if action < self._cells:
            row, col = divmod(action, self.config.cols)
            return maze_engine.reveal(self.state, row, col)
        if action == self.defuse_action:
            return maze_engine.use_defuser_on_adjacent_mine(self.state)
        delta_row, delta_col = ORTHOGONAL[action - self._cells]
        row = self.state.player.row + delta_row
        col = self.state.player.col + delta_col
        if not in_bounds(row, col, self.config.rows, self.config.cols):
            return self.state
        return maze_engine.move(self.state, row, col)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "steps": self._steps,
            "keys": self.state.inventory.keys,
            "defusers": self.state.inventory.defusers,
            "events": [event.value for event in self.state.events],
            "status": maze_engine.status(self.state).value,
        }

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that may change the state.

        Reveals are masked by cell visibility, moves by the move rules,
        and the defuse action by the defuser count. Locked doors are
        masked while no key is held, unless a chest sits on the door.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        state = self.state
        if state.game_over:
            return mask
        locked = state.inventory.keys == 0
        for (row, col), cell in state.cells():
            if state.maze[row][col] == WALL or not cell.is_hidden:
                continue
            if locked and cell.door and not cell.chest:
                continue
            mask[row * self.config.cols + col] = True
        for direction, (delta_row, delta_col) in enumerate(ORTHOGONAL):
            row = state.player.row + delta_row
            col = state.player.col + delta_col
            if not in_bounds(row, col, self.config.rows, self.config.cols):
                continue
            cell = state.cell_state[row][col]
            if cell.is_revealed and not cell.is_mine and not cell.door:
                mask[self.move_action(direction)] = True
        mask[self.defuse_action] = state.inventory.defusers > 0
        return mask

    def render(self) -> Optional[str]:
        text = render_text(self.state.observation())
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
        return None


# ============================================================================
# Text Rendering
# ============================================================================

_SYMBOLS = {-3: "#", -2: "F", -1: ".", 0: " ", 9: "*", 10: "C", 11: "D", 12: "E", 13: "@"}


def render_text(obs: np.ndarray) -> str:
    """Render an observation array as ASCII, one row per line."""
    lines = []
    for row in obs:
        lines.append(" ".join(_SYMBOLS.get(int(value), str(int(value))) for value in row))
    return "\n".join(lines)
