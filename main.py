#!/usr/bin/env python3
"""
Mazesweeper - Main entry point.

Usage:
    python main.py classic [--difficulty NAME] [--seed N] [--show-all]
    python main.py maze [--rows R --cols C --mines M] [--seed N]
    python main.py simulate [--mode {classic,maze}] [--episodes N]
"""
import argparse
import logging
import random
import sys

from mazesweeper import (
    BoardConfig,
    MazeUnsatisfiableError,
    check_invariants,
    generate_maze,
    get_difficulty,
    new_game,
)
from mazesweeper.agents import RandomAgent, play_episode
from mazesweeper.environment import MazeEnv, MinesweeperEnv, render_text
from mazesweeper.maze_engine import status_message


def _config(args: argparse.Namespace) -> BoardConfig:
    """Build a config from a preset, overridden by explicit sizes."""
    preset = get_difficulty(args.difficulty)
    return BoardConfig(
        rows=args.rows or preset.rows,
        cols=args.cols or preset.cols,
        mines=preset.mines if args.mines is None else args.mines,
        difficulty=preset.difficulty,
    )


def classic(args: argparse.Namespace) -> None:
    """Print a freshly generated classic board."""
    config = _config(args)
    state = new_game(config, random.Random(args.seed))
    print(f"Board: {config.rows}x{config.cols} with {state.mine_count} mines")
    if args.show_all:
        obs = state.observation()
        for (row, col), cell in state.cells():
            obs[row, col] = 9 if cell.is_mine else cell.adjacent_mines
        print(render_text(obs))
    else:
        print(render_text(state.observation()))


def maze(args: argparse.Namespace) -> None:
    """Print a freshly generated maze."""
    config = _config(args)
    try:
        state = generate_maze(
            config.rows, config.cols, config.mines, random.Random(args.seed)
        )
    except MazeUnsatisfiableError as error:
        print(f"Error: {error}")
        sys.exit(1)

    print(f"Maze: {state.rows}x{state.cols}, path length {len(state.path)}, "
          f"{len(state.doors)} doors, {len(state.mines)} mines")
    print(render_text(state.observation()))
    print(status_message(state))
    for problem in check_invariants(state):
        print(f"Invariant violated: {problem}")


def simulate(args: argparse.Namespace) -> None:
    """Play random-agent episodes and report the win rate."""
    config = _config(args)
    env = MazeEnv(config) if args.mode == "maze" else MinesweeperEnv(config)
    agent = RandomAgent(env.action_space.n, seed=args.seed)

    print(f"Simulating {args.episodes} {args.mode} episodes "
          f"on {config.rows}x{config.cols} with {config.mines} mines...")

    wins = 0
    total_steps = 0
    for episode in range(args.episodes):
        seed = None if args.seed is None else args.seed + episode
        stats = play_episode(env, agent, seed=seed)
        wins += stats.won
        total_steps += stats.steps

    print(f"Win rate: {wins / args.episodes:.1%}")
    print(f"Average steps: {total_steps / args.episodes:.1f}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Minesweeper and Maze-Minesweeper engine"
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_board_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--difficulty", default="easy",
                         help="Preset: easy, medium or hard")
        sub.add_argument("--rows", type=int, default=None)
        sub.add_argument("--cols", type=int, default=None)
        sub.add_argument("--mines", type=int, default=None)
        sub.add_argument("--seed", type=int, default=None,
                         help="Random seed for reproducibility")

    classic_parser = subparsers.add_parser("classic", help="Print a new classic board")
    add_board_options(classic_parser)
    classic_parser.add_argument("--show-all", action="store_true",
                                help="Show mines and counts")

    maze_parser = subparsers.add_parser("maze", help="Print a new maze")
    add_board_options(maze_parser)

    simulate_parser = subparsers.add_parser("simulate", help="Play random episodes")
    add_board_options(simulate_parser)
    simulate_parser.add_argument("--mode", choices=["classic", "maze"], default="classic")
    simulate_parser.add_argument("--episodes", type=int, default=100)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "classic":
        classic(args)
    elif args.command == "maze":
        maze(args)
    elif args.command == "simulate":
        simulate(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
