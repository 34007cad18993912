"""
Unit tests for maze generation.

Tests the path, distance and placement guarantees of generated mazes,
bounded retries, and cell-state materialization.
"""
import random

import pytest
from mazesweeper import (
    WALL,
    ChestContent,
    MazeState,
    MazeUnsatisfiableError,
    build_maze_state,
    check_invariants,
    find_path,
    generate_maze,
)
from mazesweeper.grid import manhattan
from mazesweeper.maze import door_count, minimum_distance


@pytest.fixture(scope="module")
def mazes() -> list:
    """One hundred seeded 8x8 mazes with 5 mines."""
    return [generate_maze(8, 8, 5, random.Random(seed)) for seed in range(100)]


# ============================================================================
# Generation Invariant Tests
# ============================================================================

class TestGeneratedMazes:
    """Test guarantees that hold for every generated maze."""

    def test_invariants_hold(self, mazes: list) -> None:
        """generate_maze(8, 8, 5) always passes the invariant check."""
        for state in mazes:
            assert check_invariants(state) == []

    def test_path_connects_start_to_exit(self, mazes: list) -> None:
        for state in mazes:
            assert state.player == state.path[0]
            assert state.exit == state.path[-1]
            assert find_path(state.maze, state.player, state.exit) is not None

    def test_exit_is_far_enough(self, mazes: list) -> None:
        min_dist = minimum_distance(8, 8)
        assert min_dist == 5
        for state in mazes:
            assert manhattan(state.player, state.exit) >= min_dist
            assert len(state.path) > min_dist

    def test_doors_and_chests_on_path_interior(self, mazes: list) -> None:
        for state in mazes:
            interior = set(state.path[1:-1])
            assert 1 <= len(state.doors) <= 2
            assert len(state.chests) == len(state.doors) + 1
            assert set(state.doors) <= interior
            assert set(state.chests) <= interior
            assert not set(state.doors) & set(state.chests)

    def test_chest_contents(self, mazes: list) -> None:
        """One key per door and exactly one defuser."""
        for state in mazes:
            contents = [state.chest_contents[chest] for chest in state.chests]
            assert contents.count(ChestContent.KEY) == len(state.doors)
            assert contents.count(ChestContent.DEFUSER) == 1

    def test_mines_avoid_forbidden_cells(self, mazes: list) -> None:
        for state in mazes:
            forbidden = set(state.path) | set(state.chests) | set(state.doors)
            assert len(state.mines) <= 5
            for row, col in state.mines:
                assert (row, col) not in forbidden
                assert state.maze[row][col] != WALL
                assert state.cell_state[row][col].is_mine

    def test_walls_are_inert(self, mazes: list) -> None:
        for state in mazes:
            for (row, col), cell in state.cells():
                if state.maze[row][col] == WALL:
                    assert not (cell.is_mine or cell.chest or cell.door)
                    assert cell.is_hidden

    def test_only_start_is_revealed(self, mazes: list) -> None:
        for state in mazes:
            revealed = [pos for pos, cell in state.cells() if cell.is_revealed]
            assert revealed == [state.player]
            assert state.inventory.keys == 0
            assert state.inventory.defusers == 0
            assert state.game_over is False


class TestGenerationOptions:
    """Test generation parameters and failure modes."""

    def test_same_seed_same_maze(self) -> None:
        first = generate_maze(10, 10, 8, random.Random(42))
        second = generate_maze(10, 10, 8, random.Random(42))
        assert first.maze == second.maze
        assert first.path == second.path
        assert first.mines == second.mines
        assert first.doors == second.doors

    def test_excess_mines_fill_available_cells(self) -> None:
        """Fewer mines than requested are placed when space runs out."""
        state = generate_maze(8, 8, 1000, random.Random(3))
        forbidden = set(state.path) | set(state.chests) | set(state.doors)
        available = [
            pos for pos, _ in state.cells()
            if state.maze[pos.row][pos.col] != WALL and pos not in forbidden
        ]
        assert len(state.mines) == len(available)

    def test_degenerate_grid_raises(self) -> None:
        """A 1x1 grid can never hold a path, so generation gives up."""
        with pytest.raises(MazeUnsatisfiableError) as info:
            generate_maze(1, 1, 0, random.Random(0), max_attempts=10)
        assert info.value.attempts == 10
        assert isinstance(info.value, RuntimeError)

    def test_invalid_dimensions_raise(self) -> None:
        with pytest.raises(ValueError):
            generate_maze(0, 5, 1)
        with pytest.raises(ValueError):
            generate_maze(5, 5, -1)

    @pytest.mark.parametrize(
        "length, expected", [(6, 1), (8, 1), (15, 1), (16, 2), (40, 2)]
    )
    def test_door_count(self, length: int, expected: int) -> None:
        assert door_count(length) == expected


# ============================================================================
# Materialization Tests
# ============================================================================

class TestBuildMazeState:
    """Test cell-state materialization of a layout."""

    def test_adjacency_counts(self, corridor_maze: MazeState) -> None:
        cells = corridor_maze.cell_state
        assert cells[2][1].adjacent_mines == 1
        assert cells[2][5].adjacent_mines == 1
        assert cells[2][3].adjacent_mines == 0
        assert cells[0][3].adjacent_mines == 0

    def test_features_are_marked(self, corridor_maze: MazeState) -> None:
        cells = corridor_maze.cell_state
        assert cells[0][2].chest
        assert cells[0][5].chest
        assert cells[0][4].door
        assert cells[2][0].is_mine and cells[2][6].is_mine

    def test_start_revealed(self, corridor_maze: MazeState) -> None:
        assert corridor_maze.player == (0, 0)
        assert corridor_maze.exit == (0, 6)
        assert corridor_maze.cell(0, 0).is_revealed

    def test_invariant_check_flags_mine_on_path(
        self, corridor_layout: dict
    ) -> None:
        state = build_maze_state(**{**corridor_layout, "mines": [(0, 3)]})
        problems = check_invariants(state)
        assert any("mine (0, 3)" in problem for problem in problems)

    def test_invariant_check_flags_missing_defuser(
        self, corridor_layout: dict
    ) -> None:
        layout = dict(
            corridor_layout,
            chests=[(0, 2)],
            chest_contents={(0, 2): ChestContent.KEY},
        )
        state = build_maze_state(**layout)
        assert "expected exactly one defuser chest" in check_invariants(state)

    def test_observation_marks_player_exit_and_walls(
        self, corridor_maze: MazeState
    ) -> None:
        obs = corridor_maze.observation()
        assert obs[0, 0] == 13
        assert obs[0, 6] == 12
        assert obs[1, 0] == -3
        assert obs[0, 2] == 10
        assert obs[0, 4] == 11
        assert obs[2, 3] == -1
