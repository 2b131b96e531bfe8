"""
Cell module for the minefield.

Represents individual grid positions with their visual state
(hidden/revealed/flagged/question-marked) and content (mine/number).
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()
    QUESTIONED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the minefield.

    A revealed cell may still hold a mine (a fatal reveal), so the
    mine flag and the visual state are independent.

    Attributes:
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-8).
        state: Current visual state.
        exploded: Set only on the mine that ended the game.
        mistake: Flag found on a non-mine when the game ended.
    """

    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN
    exploded: bool = False
    mistake: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell, discarding any flag or question mark.

        Returns:
            True if the cell was newly revealed, False if it was
            already visible.
        """
        if self.state == CellState.REVEALED:
            return False
        self.state = CellState.REVEALED
        return True

    def cycle_mark(self, question_marks: bool = False) -> bool:
        """
        Advance the mark on a hidden cell: none -> flag -> ? -> none.

        Args:
            question_marks: Whether the cycle passes through a question mark.

        Returns:
            True if the mark changed, False if the cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        elif self.state == CellState.FLAGGED and question_marks:
            self.state = CellState.QUESTIONED
        else:
            self.state = CellState.HIDDEN
        return True

    def clear_question_mark(self) -> None:
        """Drop a question mark, leaving other states alone."""
        if self.state == CellState.QUESTIONED:
            self.state = CellState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        """Check if cell is not revealed (marked or not)."""
        return self.state != CellState.REVEALED

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_questioned(self) -> bool:
        """Check if cell carries a question mark."""
        return self.state == CellState.QUESTIONED

    @property
    def is_marked(self) -> bool:
        """Check if cell carries a flag or a question mark."""
        return self.state in (CellState.FLAGGED, CellState.QUESTIONED)

    def to_observation(self) -> int:
        """
        Convert cell to a compact integer code.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Question-marked cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.state == CellState.QUESTIONED:
            return -3
        if self.is_mine:
            return 9
        return self.adjacent_mines
