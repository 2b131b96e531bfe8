"""
Game session.

Owns the grid, the random source and the consistency engine for one
player, and implements the moves the front end forwards: clicks with
luck, marks, chording, and the smiley-face button.
"""
import logging
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

from consistency import AdjustResult, ConsistencyEngine, FeasibilitySolver
from minefield import DENSITY_LEVELS, GRID_SIZES, GameConfig, Grid, Luck

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


def _nearest_level(value: float, table: Tuple[float, ...]) -> int:
    return min(range(len(table)), key=lambda i: abs(table[i] - value))


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    One player's game, from new_game() to won or lost.

    All state lives here; nothing is global. Randomness comes from a
    single numpy Generator shared by the mine scatter and the engine.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        solver: Optional[FeasibilitySolver] = None,
    ) -> None:
        """
        Initialize the session and start a game.

        Args:
            config: Game configuration (default: GameConfig()).
            seed: Seed for the random source; OS entropy when None.
            solver: Feasibility backend for the engine (default: CP-SAT).
        """
        self.config = config or GameConfig()
        self.rng = np.random.default_rng(seed)
        self.engine = ConsistencyEngine(self.rng, solver)
        self.grid = Grid(self.config.width, self.config.height)
        self._game_state = GameState.PLAYING
        self._first_move = True
        self.new_game()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def new_game(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        mine_density: Optional[float] = None,
    ) -> None:
        """
        Throw the grid away and scatter a fresh one.

        Args:
            width: New width (default: keep).
            height: New height (default: keep).
            mine_density: New per-cell mine probability (default: keep).
        """
        changes = {}
        if width is not None:
            changes["width"] = width
        if height is not None:
            changes["height"] = height
        if mine_density is not None:
            changes["mine_density"] = mine_density
        if changes:
            self.config = self.config.with_changes(**changes)

        self.grid = Grid(self.config.width, self.config.height)
        placed = self.grid.scatter_mines(self.config.mine_density, self.rng)
        self._game_state = GameState.PLAYING
        self._first_move = True
        logger.debug(
            "New %dx%d game with %d mines", self.config.width, self.config.height, placed
        )

    def end_game(self, won: bool) -> None:
        """Fix the result and expose misplaced flags."""
        self._game_state = GameState.WON if won else GameState.LOST
        self.grid.mark_mistakes()

    def _check_win_condition(self) -> None:
        """Win once every non-mine cell is revealed."""
        if self.is_playing and self.grid.all_safe_cells_revealed():
            self._game_state = GameState.WON

    # ========================================================================
    # Consistency Engine
    # ========================================================================

    def try_adjust_mine(
        self,
        x: int,
        y: int,
        want_mine: bool,
        timeout_ms: Optional[float] = None,
    ) -> bool:
        """
        Ask the engine to put a mine at (x, y), or take it away.

        Args:
            x: Column.
            y: Row.
            want_mine: Requested content.
            timeout_ms: Budget (default: config.compute_timeout_ms).

        Returns:
            True if the grid now matches the request; on False the grid
            is unchanged.
        """
        return self.adjust_mine(x, y, want_mine, timeout_ms).success

    def adjust_mine(
        self,
        x: int,
        y: int,
        want_mine: bool,
        timeout_ms: Optional[float] = None,
    ) -> AdjustResult:
        """Same as try_adjust_mine, returning the engine's full result."""
        budget = timeout_ms if timeout_ms is not None else self.config.compute_timeout_ms
        return self.engine.adjust(self.grid, x, y, want_mine, budget)

    # ========================================================================
    # Player Actions
    # ========================================================================

    def reveal(self, x: int, y: int) -> int:
        """
        Reveal (x, y) and flood the zero region around it.

        Returns:
            Number of cells that became visible.
        """
        return self.grid.reveal(x, y)

    def click(self, x: int, y: int) -> bool:
        """
        Left click on a cell, with the configured luck applied.

        Args:
            x: Column.
            y: Row.

        Returns:
            True if the click was processed, False if it was ignored.
        """
        if not self.is_playing or not self.grid.in_bounds(x, y):
            return False
        cell = self.grid.cell(x, y)
        if cell.is_marked:
            return False

        luck = self.config.luck
        if self._first_move and luck != Luck.BAD:
            luck = Luck.GREAT
        force_mine = luck == Luck.BAD
        # Merely good luck only helps next to cells already revealed.
        force_safe = luck == Luck.GREAT or (
            luck == Luck.GOOD and self.grid.count_adjacent_visible(x, y) > 0
        )

        if cell.is_mine:
            safe = force_safe and self.try_adjust_mine(x, y, False)
        else:
            safe = not (force_mine and self.try_adjust_mine(x, y, True))

        if safe:
            self.grid.reveal(x, y)
            self._check_win_condition()
        else:
            cell.exploded = True
            self.end_game(False)

        self._first_move = False
        return True

    def toggle_mark(self, x: int, y: int) -> bool:
        """
        Cycle the flag / question mark on a hidden cell.

        Returns:
            True if the mark changed.
        """
        if not self.is_playing or not self.grid.in_bounds(x, y):
            return False
        return self.grid.cell(x, y).cycle_mark(self.config.question_marks)

    def chord_reveal(self, x: int, y: int) -> bool:
        """
        Reveal every unmarked hidden neighbor of a satisfied number.

        Nothing happens if a neighbor carries a question mark or the
        flag count differs from the number. Chording never bends the
        minefield: a mine among the neighbors explodes.

        Returns:
            True if any neighbor was opened.
        """
        if not self.is_playing or not self.grid.in_bounds(x, y):
            return False
        cell = self.grid.cell(x, y)
        if not cell.is_revealed:
            return False

        neighbors = self.grid.neighbors(x, y)
        if any(self.grid.cell(nx, ny).is_questioned for nx, ny in neighbors):
            return False
        if self.grid.count_adjacent_flags(x, y) != cell.adjacent_mines:
            return False

        opened = False
        for nx, ny in neighbors:
            neighbor = self.grid.cell(nx, ny)
            if not neighbor.is_hidden or neighbor.is_marked:
                continue
            opened = True
            if neighbor.is_mine:
                neighbor.exploded = True
                self.end_game(False)
            else:
                self.grid.reveal(nx, ny)

        self._check_win_condition()
        return opened

    def click_face(self) -> None:
        """
        Smiley button: claim victory, resign, or start over.

        While playing with every mine accounted for by flags, the game is
        won if the flags sit exactly on the mines. While playing otherwise,
        the player resigns. After the game it starts a new one.
        """
        if not self.is_playing:
            self.new_game()
        elif self.mines_remaining() == 0:
            self.end_game(self.grid.flags_match_mines())
        else:
            self.end_game(False)

    # ========================================================================
    # Settings
    # ========================================================================

    def cycle_luck(self) -> Luck:
        """Advance to the next luck mode and return it."""
        self.config = self.config.with_changes(luck=self.config.luck.next())
        return self.config.luck

    def set_question_marks(self, enabled: bool) -> None:
        """Turn question marks on or off; off clears existing ones."""
        self.config = self.config.with_changes(question_marks=enabled)
        if not enabled:
            self.grid.clear_question_marks()

    def adjust_density(self, step: int) -> bool:
        """
        Move the density level by `step` and start a new game.

        Returns:
            False if the level is already at its limit.
        """
        level = _nearest_level(self.config.mine_density, DENSITY_LEVELS) + step
        if not 0 <= level < len(DENSITY_LEVELS):
            return False
        self.new_game(mine_density=DENSITY_LEVELS[level])
        return True

    def adjust_size(self, step: int) -> bool:
        """
        Move the size level by `step` and start a new game.

        Returns:
            False if the level is already at its limit.
        """
        widths = tuple(float(w) for w, _ in GRID_SIZES)
        level = _nearest_level(float(self.config.width), widths) + step
        if not 0 <= level < len(GRID_SIZES):
            return False
        width, height = GRID_SIZES[level]
        self.new_game(width=width, height=height)
        return True

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    @property
    def first_move(self) -> bool:
        """Check if no cell has been clicked yet."""
        return self._first_move

    def mines_total(self) -> int:
        """Count every mine on the grid."""
        return self.grid.mines_total()

    def mines_remaining(self) -> int:
        """Total mines minus the flags that are not known mistakes."""
        return self.grid.mines_remaining()

    def mines_displayed(self) -> int:
        """Counter value: remaining while playing, total afterwards."""
        return self.mines_remaining() if self.is_playing else self.mines_total()
