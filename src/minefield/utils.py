"""Coordinate helpers shared by the grid and the consistency engine."""

from functools import lru_cache
from typing import Dict, Tuple

Position = Tuple[int, int]

# Row-major offsets, so neighbor tuples list cells row by row.
_OFFSETS: Tuple[Position, ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)


@lru_cache(maxsize=16)
def get_neighborhoods(width: int, height: int) -> Dict[Position, Tuple[Position, ...]]:
    """
    Build the 8-connected neighbor table of a width x height grid.

    Tables are shared between grids of the same size and must not be
    modified.

    Raises:
        ValueError: If a dimension is not positive.
    """
    if width < 1 or height < 1:
        raise ValueError("Grid dimensions must be positive")

    return {
        (x, y): tuple(
            (x + dx, y + dy)
            for dx, dy in _OFFSETS
            if 0 <= x + dx < width and 0 <= y + dy < height
        )
        for y in range(height)
        for x in range(width)
    }
