"""
Minefield module.

Provides the grid model: cells, mine placement, adjacency counts,
region reveal and game configuration.
"""
from .cell import Cell, CellState
from .grid import Grid
from .config import (
    GameConfig,
    Luck,
    DENSITY_LEVELS,
    GRID_SIZES,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)

__all__ = [
    "Cell",
    "CellState",
    "Grid",
    "GameConfig",
    "Luck",
    "DENSITY_LEVELS",
    "GRID_SIZES",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
]
