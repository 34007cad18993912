"""
Base agent interface for the Minesweeper environments.

Defines the abstract interface that all agents must implement and a
helper that plays one episode.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import gymnasium as gym
import numpy as np


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for agents acting on a discrete action space.

    Agents pick an action index from the observation, usually
    restricted by the environment's action mask.
    """

    def __init__(self, num_actions: int) -> None:
        """
        Initialize the agent.

        Args:
            num_actions: Size of the environment's action space.
        """
        self.num_actions = num_actions

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: 2D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Action index.
        """

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get valid actions mask from observation.

        Hidden cells (value -1) are valid reveal actions; any action past
        the grid is left out.
        """
        mask = np.zeros(self.num_actions, dtype=bool)
        flat_obs = observation.flatten()
        mask[:flat_obs.size] = flat_obs == -1
        return mask

    def reset(self) -> None:
        """Reset agent state for new episode."""


# ============================================================================
# Episode Runner
# ============================================================================

@dataclass
class EpisodeStats:
    """Statistics for a single episode."""

    total_reward: float = 0.0
    steps: int = 0
    won: bool = False


def play_episode(
    env: gym.Env,
    agent: BaseAgent,
    seed: Optional[int] = None,
    max_steps: int = 10000,
) -> EpisodeStats:
    """
    Play one episode with the agent choosing among masked actions.

    Args:
        env: A MinesweeperEnv or MazeEnv.
        agent: Agent selecting the actions.
        seed: Seed for env.reset.
        max_steps: Cut the episode off after this many steps.

    Returns:
        Statistics of the finished episode.
    """
    obs, info = env.reset(seed=seed)
    agent.reset()
    stats = EpisodeStats()

    while stats.steps < max_steps:
        mask = env.get_action_mask()
        if not mask.any():
            break
        action = agent.select_action(obs, mask)
        obs, reward, terminated, truncated, info = env.step(action)
        stats.total_reward += float(reward)
        stats.steps += 1
        if terminated or truncated:
            break

    stats.won = info["status"] == "won"
    return stats
