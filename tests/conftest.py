"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Tuple

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Cell, GameConfig, Grid, Luck
from gameplay import GameSession


# ============================================================================
# Grid Helpers
# ============================================================================

def build_grid(
    rows: List[str], reveal: Iterable[Tuple[int, int]] = ()
) -> Grid:
    """
    Build a grid from a picture: '*' is a mine, anything else is safe.

    Args:
        rows: One string per row, all the same length.
        reveal: Positions to reveal (with flood) after placing mines.
    """
    grid = Grid(len(rows[0]), len(rows))
    for y, row in enumerate(rows):
        for x, char in enumerate(row):
            if char == "*":
                grid.place_mine(x, y)
    for x, y in reveal:
        grid.reveal(x, y)
    return grid


def brute_force_adjacency(grid: Grid) -> np.ndarray:
    """Count mines around every cell straight from the mine mask."""
    padded = np.pad(grid.mine_mask().astype(np.int8), 1)
    counts = np.zeros((grid.height, grid.width), dtype=np.int8)
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            counts += padded[1 + dy:1 + dy + grid.height, 1 + dx:1 + dx + grid.width]
    return counts


def snapshot(grid: Grid) -> Tuple[np.ndarray, ...]:
    """Everything observable about a grid, for exact comparisons."""
    exploded = np.array(
        [[grid.cell(x, y).exploded for x in range(grid.width)] for y in range(grid.height)]
    )
    return (
        grid.mine_mask(),
        grid.visible_mask(),
        grid.adjacency(),
        grid.get_observation(),
        exploded,
    )


def same_snapshot(a: Tuple[np.ndarray, ...], b: Tuple[np.ndarray, ...]) -> bool:
    return all(np.array_equal(x, y) for x, y in zip(a, b))


@pytest.fixture
def grid_factory() -> Callable[..., Grid]:
    """Factory building grids from row pictures."""
    return build_grid


@pytest.fixture
def adjacency_of() -> Callable[[Grid], np.ndarray]:
    """Reference adjacency computation."""
    return brute_force_adjacency


@pytest.fixture
def grid_snapshot() -> Callable[[Grid], Tuple[np.ndarray, ...]]:
    """Capture a grid's full observable state."""
    return snapshot


@pytest.fixture
def snapshots_equal() -> Callable[..., bool]:
    """Compare two grid snapshots bit for bit."""
    return same_snapshot


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def empty_grid() -> Grid:
    """Create a 5x5 grid with no mines for cascade testing."""
    return Grid(5, 5)


@pytest.fixture
def center_mine_grid() -> Grid:
    """Create a 3x3 grid with a single mine in the middle."""
    return build_grid(["...", ".*.", "..."])


@pytest.fixture
def frontier_grid() -> Grid:
    """
    4x2 grid: a revealed 1 at (0, 0) next to a mine at (1, 0),
    plus one deep mine at (3, 0).
    """
    return build_grid([".*.*", "...."], reveal=[(0, 0)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a revealed cell with adjacent mines."""
    cell = Cell(adjacent_mines=3)
    cell.reveal()
    return cell


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def empty_config() -> GameConfig:
    """A 5x3 configuration that scatters no mines."""
    return GameConfig(width=5, height=3, mine_density=0.0)


@pytest.fixture
def session_factory(empty_config: GameConfig) -> Callable[..., GameSession]:
    """
    Factory for sessions on a hand-placed minefield.

    The session starts with density 0, then the pictured mines are placed.
    """
    def make(
        rows: List[str],
        luck: Luck = Luck.NEUTRAL,
        question_marks: bool = False,
        seed: int = 7,
    ) -> GameSession:
        config = empty_config.with_changes(
            width=len(rows[0]),
            height=len(rows),
            luck=luck,
            question_marks=question_marks,
        )
        session = GameSession(config, seed=seed)
        for y, row in enumerate(rows):
            for x, char in enumerate(row):
                if char == "*":
                    session.grid.place_mine(x, y)
        return session

    return make
