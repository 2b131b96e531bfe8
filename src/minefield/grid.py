"""
Grid module for the minefield.

Implements the rectangular array of cells with mine placement,
adjacency bookkeeping and region reveal.
"""
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState
from .utils import Position, get_neighborhoods


# ============================================================================
# Grid Class
# ============================================================================

class Grid:
    """
    Fixed-size minefield.

    Owns every cell of one game. Coordinates are (x, y) with x the
    column and y the row. The adjacency count of every cell always
    equals the number of mines among its neighbors; every mutation
    that moves mines restores this before returning.
    """

    def __init__(self, width: int, height: int) -> None:
        """
        Create an empty, fully hidden grid.

        Args:
            width: Number of columns.
            height: Number of rows.

        Raises:
            ValueError: If a dimension is not positive.
        """
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be positive")
        self.width = width
        self.height = height
        self._neighborhoods: Dict[Position, Tuple[Position, ...]] = get_neighborhoods(
            width, height
        )
        self._cells: List[List[Cell]] = [
            [Cell() for _ in range(width)] for _ in range(height)
        ]
        self._visible_count = 0

    def __repr__(self) -> str:
        return (
            f"Grid(width={self.width}, height={self.height}, "
            f"mines={self.mines_total()}, visible={self._visible_count})"
        )

    # ========================================================================
    # Addressing (Low-level)
    # ========================================================================

    @property
    def area(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if position is within grid bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        """
        Get the cell at (x, y).

        Raises:
            IndexError: If the position is outside the grid.
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the {self.width}x{self.height} grid")
        return self._cells[y][x]

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self.in_bounds(x, y):
            return None
        return self._cells[y][x]

    def neighbors(self, x: int, y: int) -> Tuple[Position, ...]:
        """Return the in-bounds 8-neighborhood of (x, y)."""
        return self._neighborhoods[(x, y)]

    def positions(self) -> Iterator[Position]:
        """Iterate over every position in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    # ========================================================================
    # Neighbor Counts
    # ========================================================================

    def count_adjacent_mines(self, x: int, y: int) -> int:
        """Count mines adjacent to a specific cell."""
        return sum(1 for nx, ny in self.neighbors(x, y) if self._cells[ny][nx].is_mine)

    def count_adjacent_visible(self, x: int, y: int) -> int:
        """Count revealed cells adjacent to a specific cell."""
        return sum(
            1 for nx, ny in self.neighbors(x, y) if self._cells[ny][nx].is_revealed
        )

    def count_adjacent_flags(self, x: int, y: int) -> int:
        """Count flagged hidden cells adjacent to a specific cell."""
        return sum(1 for nx, ny in self.neighbors(x, y) if self._cells[ny][nx].is_flagged)

    # ========================================================================
    # Mine Placement
    # ========================================================================

    def scatter_mines(self, density: float, rng: np.random.Generator) -> int:
        """
        Place a mine in each cell independently with the given probability.

        Args:
            density: Bernoulli probability per cell, in [0, 1].
            rng: Random source.

        Returns:
            Number of mines placed.
        """
        placed = 0
        for x, y in self.positions():
            if rng.random() < density and self.place_mine(x, y):
                placed += 1
        return placed

    def place_mine(self, x: int, y: int) -> bool:
        """
        Put a mine at (x, y) and bump the counts around it.

        Returns:
            True if a mine was added, False if one was already there.
        """
        cell = self.cell(x, y)
        if cell.is_mine:
            return False
        cell.is_mine = True
        for nx, ny in self.neighbors(x, y):
            self._cells[ny][nx].adjacent_mines += 1
        return True

    def remove_mine(self, x: int, y: int) -> bool:
        """
        Take the mine away from (x, y) and lower the counts around it.

        A revealed neighbor whose count drops to zero floods open its
        own hidden neighbors, exactly as if it had just been revealed.

        Returns:
            True if a mine was removed, False if there was none.
        """
        cell = self.cell(x, y)
        if not cell.is_mine:
            return False
        cell.is_mine = False
        for nx, ny in self.neighbors(x, y):
            self._cells[ny][nx].adjacent_mines -= 1
        for nx, ny in self.neighbors(x, y):
            if self._cells[ny][nx].is_revealed:
                self.reveal(nx, ny)
        return True

    def recompute_all_adjacency(self) -> None:
        """Recalculate adjacent mine counts for every cell."""
        for x, y in self.positions():
            self._cells[y][x].adjacent_mines = self.count_adjacent_mines(x, y)

    # ========================================================================
    # Region Reveal
    # ========================================================================

    def reveal(self, x: int, y: int) -> int:
        """
        Reveal (x, y) and flood open the zero region around it.

        Marks and question marks on every revealed cell are discarded.
        Calling this on a visible cell is allowed: a visible zero still
        opens any hidden neighbors it has. The flood uses an explicit
        stack, so its depth is not bounded by the interpreter.

        Args:
            x: Column of the cell to reveal.
            y: Row of the cell to reveal.

        Returns:
            Number of cells that became visible.
        """
        cell = self.cell(x, y)
        revealed = 0
        if cell.reveal():
            revealed += 1
        if cell.adjacent_mines != 0:
            self._visible_count += revealed
            return revealed

        stack = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            for nx, ny in self.neighbors(cx, cy):
                neighbor = self._cells[ny][nx]
                if not neighbor.reveal():
                    continue
                revealed += 1
                if neighbor.adjacent_mines == 0:
                    stack.append((nx, ny))

        self._visible_count += revealed
        return revealed

    # ========================================================================
    # Marks
    # ========================================================================

    def clear_question_marks(self) -> None:
        """Remove every question mark from the grid."""
        for row in self._cells:
            for cell in row:
                cell.clear_question_mark()

    def mark_mistakes(self) -> int:
        """
        Flag every misplaced flag as a mistake.

        Returns:
            Number of mistakes found.
        """
        mistakes = 0
        for row in self._cells:
            for cell in row:
                if cell.is_flagged and not cell.is_mine:
                    cell.mistake = True
                    mistakes += 1
        return mistakes

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def visible_count(self) -> int:
        """Number of revealed cells."""
        return self._visible_count

    def mines_total(self) -> int:
        """Count every mine on the grid, flagged or not."""
        return sum(1 for row in self._cells for cell in row if cell.is_mine)

    def mines_remaining(self) -> int:
        """Total mines minus the flags that are not known mistakes."""
        count = 0
        for row in self._cells:
            for cell in row:
                if cell.is_mine:
                    count += 1
                if cell.is_flagged and not cell.mistake:
                    count -= 1
        return count

    def all_safe_cells_revealed(self) -> bool:
        """Check if every non-mine cell is visible."""
        return self._visible_count + self.mines_total() == self.area

    def flags_match_mines(self) -> bool:
        """Check if the flags sit exactly on the mines."""
        return all(
            cell.is_flagged == cell.is_mine for row in self._cells for cell in row
        )

    def mine_mask(self) -> np.ndarray:
        """Boolean (height, width) array of mine positions."""
        return np.array(
            [[cell.is_mine for cell in row] for row in self._cells], dtype=bool
        )

    def visible_mask(self) -> np.ndarray:
        """Boolean (height, width) array of revealed positions."""
        return np.array(
            [[cell.is_revealed for cell in row] for row in self._cells], dtype=bool
        )

    def adjacency(self) -> np.ndarray:
        """(height, width) array of adjacent mine counts."""
        return np.array(
            [[cell.adjacent_mines for cell in row] for row in self._cells],
            dtype=np.int8,
        )

    def get_observation(self) -> np.ndarray:
        """
        Get the player's view of the grid.

        Returns:
            2D int8 array of Cell.to_observation() codes.
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for x, y in self.positions():
            obs[y, x] = self._cells[y][x].to_observation()
        return obs

    def hidden_positions(self) -> List[Position]:
        """Get every position that is not revealed, in row-major order."""
        return [
            (x, y) for x, y in self.positions() if self._cells[y][x].state != CellState.REVEALED
        ]
