"""
Agents for the Minesweeper environments.

Available agents:
- RandomAgent: Baseline that selects random valid actions
"""
from .base_agent import BaseAgent, EpisodeStats, play_episode
from .random_agent import RandomAgent

__all__ = [
    "BaseAgent",
    "EpisodeStats",
    "RandomAgent",
    "play_episode",
]
