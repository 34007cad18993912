"""
Random baseline agent.

Picks uniformly among the actions the environment's mask leaves open.
In the maze environment that covers cell reveals, the four player
moves and the defuse action alike.
"""
from typing import Optional

import numpy as np

from .base_agent import BaseAgent


class RandomAgent(BaseAgent):
    """Uniformly random choice over unmasked actions."""

    def __init__(self, num_actions: int, seed: Optional[int] = None) -> None:
        super().__init__(num_actions)
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Choose an action.

        Args:
            observation: Grid observation from the environment.
            valid_actions: Boolean mask; derived from hidden cells when omitted.

        Returns:
            Action index. With everything masked, the last action is
            returned: the defuse action in the maze environment, which
            costs one step and leaves the state as it is.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        candidates = np.flatnonzero(valid_actions)
        if candidates.size == 0:
            return self.num_actions - 1
        return int(self.rng.choice(candidates))
