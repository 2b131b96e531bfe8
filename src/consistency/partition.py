"""
Partition of the hidden cells.

A hidden cell is shallow when at least one neighbor is revealed and
deep otherwise. Shallow cells become solver variables; deep cells are
interchangeable and only their mine count matters.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from minefield.grid import Grid
from minefield.utils import Position

logger = logging.getLogger(__name__)


@dataclass
class Partition:
    """
    Snapshot of how the hidden cells split up.

    Attributes:
        shallow: Shallow cells in row-major order; list index is the
            solver variable index.
        deep: Deep cells in row-major order.
        sources: Revealed cells with a nonzero count.
        variable_index: Position of each shallow cell -> variable index.
        shallow_mines: Mines currently among the shallow cells.
        deep_mines: Mines currently among the deep cells.
    """

    shallow: List[Position] = field(default_factory=list)
    deep: List[Position] = field(default_factory=list)
    sources: List[Position] = field(default_factory=list)
    variable_index: Dict[Position, int] = field(default_factory=dict)
    shallow_mines: int = 0
    deep_mines: int = 0

    @property
    def n(self) -> int:
        """Number of shallow cells."""
        return len(self.shallow)

    @property
    def dh(self) -> int:
        """Number of deep cells."""
        return len(self.deep)

    @property
    def m(self) -> int:
        """Number of constraint sources."""
        return len(self.sources)

    def is_deep(self, position: Position) -> bool:
        """Check if a hidden position belongs to the deep group."""
        return position not in self.variable_index


def partition_grid(grid: Grid) -> Partition:
    """
    Classify every cell of the grid in a single pass.

    Args:
        grid: Grid to inspect. Not modified.

    Returns:
        The partition of the hidden cells and the list of sources.
    """
    part = Partition()
    for x, y in grid.positions():
        cell = grid.cell(x, y)
        if cell.is_revealed:
            if cell.adjacent_mines != 0:
                part.sources.append((x, y))
            continue
        if grid.count_adjacent_visible(x, y) == 0:
            part.deep.append((x, y))
            if cell.is_mine:
                part.deep_mines += 1
        else:
            part.variable_index[(x, y)] = len(part.shallow)
            part.shallow.append((x, y))
            if cell.is_mine:
                part.shallow_mines += 1

    assert (part.m == 0) == (part.n == 0), "sources and shallow cells out of step"
    logger.debug(
        "Partition: %d shallow (%d mines), %d deep (%d mines), %d sources",
        part.n, part.shallow_mines, part.dh, part.deep_mines, part.m,
    )
    return part
