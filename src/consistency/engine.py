"""
Minefield consistency engine.

Moves mines around behind the player's back so that one hidden cell
ends up holding (or not holding) a mine, while every revealed number
and the total mine count stay exactly as they were.

How a request is solved:

1. Split the hidden cells into shallow cells (next to a revealed
   number) and deep cells (everything else).
2. If the deep cells alone can absorb the change, skip the solver: the
   deep cells are interchangeable, so reshuffling them is enough.
3. Otherwise ask a 0/1 solver for shallow mines matching every revealed
   number, with the clicked cell pinned when it is shallow, and with a
   shallow total that leaves the deep cells between empty and full.
4. Scatter the mines that are left uniformly over the deep cells and
   recompute every adjacency count.

Nothing is written to the grid until step 4, so a failed or timed out
solve leaves the grid exactly as it was.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

import numpy as np

from minefield.grid import Grid
from minefield.utils import Position

from .encoder import ConstraintSystem, encode_constraints
from .partition import Partition, partition_grid
from .sampler import sample_combination
from .solver import CpSatSolver, Deadline, FeasibilitySolver, SolveResult, SolveStatus

logger = logging.getLogger(__name__)


# ============================================================================
# Results
# ============================================================================

class AdjustOutcome(Enum):
    """What happened to a try_adjust request."""

    UNCHANGED = auto()
    RELOCATED = auto()
    SOLVED = auto()
    IMPOSSIBLE = auto()
    INFEASIBLE = auto()
    TIMED_OUT = auto()
    ERROR = auto()


_SUCCESSES = frozenset(
    {AdjustOutcome.UNCHANGED, AdjustOutcome.RELOCATED, AdjustOutcome.SOLVED}
)

_FAILURES = {
    SolveStatus.INFEASIBLE: AdjustOutcome.INFEASIBLE,
    SolveStatus.TIMED_OUT: AdjustOutcome.TIMED_OUT,
    SolveStatus.ERROR: AdjustOutcome.ERROR,
}


@dataclass
class AdjustResult:
    """
    Result of one adjustment request.

    Attributes:
        outcome: What the engine did.
        shallow_mines: Mines among shallow cells after the commit.
        deep_mines: Mines among deep cells after the commit,
            including the clicked cell when it is deep.
    """

    outcome: AdjustOutcome
    shallow_mines: int = 0
    deep_mines: int = 0

    @property
    def success(self) -> bool:
        """Check if the grid now satisfies the request."""
        return self.outcome in _SUCCESSES

    def __bool__(self) -> bool:
        return self.success


# ============================================================================
# Engine
# ============================================================================

class ConsistencyEngine:
    """
    Applies mine requests to a grid while keeping it consistent.

    The engine holds no per-request state: the partition and the
    constraint system are rebuilt on every call and dropped afterwards.
    """

    def __init__(
        self,
        rng: np.random.Generator,
        solver: Optional[FeasibilitySolver] = None,
    ) -> None:
        """
        Args:
            rng: Random source for redistributing deep mines.
            solver: Feasibility backend (default: CP-SAT).
        """
        self.rng = rng
        self.solver = solver if solver is not None else CpSatSolver()

    def adjust(
        self,
        grid: Grid,
        x: int,
        y: int,
        want_mine: bool,
        timeout_ms: float,
    ) -> AdjustResult:
        """
        Try to make (x, y) hold a mine or not, as requested.

        Args:
            grid: Grid to modify in place on success.
            x: Column of the clicked cell.
            y: Row of the clicked cell.
            want_mine: Requested content of the cell.
            timeout_ms: Wall-clock budget for the whole request.

        Returns:
            The outcome; the grid is untouched unless it is a success
            other than UNCHANGED.
        """
        deadline = Deadline(timeout_ms)
        cell = grid.cell(x, y)

        if cell.is_mine == want_mine:
            return AdjustResult(AdjustOutcome.UNCHANGED)
        if cell.is_revealed:
            logger.debug("Refusing to alter revealed cell (%d, %d)", x, y)
            return AdjustResult(AdjustOutcome.IMPOSSIBLE)

        total = grid.mines_total()
        if total == 0:
            logger.debug("There are no mines to move.")
            return AdjustResult(AdjustOutcome.IMPOSSIBLE)
        if total == grid.area and not want_mine:
            logger.debug("The grid is full of mines; none can be removed.")
            return AdjustResult(AdjustOutcome.IMPOSSIBLE)

        part = partition_grid(grid)
        assert total == part.shallow_mines + part.deep_mines, "mines outside hidden cells"

        target_is_deep = part.is_deep((x, y))
        deep_cells = part.dh
        if target_is_deep:
            # The target is settled by the caller; the others share the rest.
            deep_cells -= 1
            if want_mine:
                total -= 1

        if self._can_skip_solver(part, target_is_deep, want_mine, deep_cells):
            return self._commit(grid, part, (x, y), target_is_deep, want_mine,
                                total, deep_cells, None)

        system = encode_constraints(grid, part, total, deep_cells, (x, y), want_mine)
        result = self._run_solver(system, deadline)
        if not result.is_feasible:
            self._log_failure(result)
            return AdjustResult(_FAILURES[result.status])

        assert system.is_satisfied(result.assignment), "solver returned an infeasible point"
        return self._commit(grid, part, (x, y), target_is_deep, want_mine,
                            total, deep_cells, result.assignment)

    # ========================================================================
    # Solving
    # ========================================================================

    @staticmethod
    def _can_skip_solver(
        part: Partition, target_is_deep: bool, want_mine: bool, deep_cells: int
    ) -> bool:
        """Check the cases where reshuffling deep cells is enough."""
        if part.m == 0:
            return True
        if not target_is_deep:
            return False
        if want_mine:
            # Pull a mine in from elsewhere in the deep region.
            return part.deep_mines > 0
        # Push the mine out to a free deep cell.
        return part.deep_mines <= deep_cells

    def _run_solver(self, system: ConstraintSystem, deadline: Deadline) -> SolveResult:
        try:
            return self.solver.solve(system, deadline)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Solver raised %s: %s", type(exc).__name__, exc)
            return SolveResult(SolveStatus.ERROR, message=str(exc))

    @staticmethod
    def _log_failure(result: SolveResult) -> None:
        if result.status == SolveStatus.TIMED_OUT:
            logger.info("Computation timeout exceeded.")
        elif result.status == SolveStatus.INFEASIBLE:
            logger.info("No compatible minefield configuration exists.")
        else:
            logger.warning(
                "Failed to find a compatible minefield configuration: %s",
                result.message or "unknown solver error",
            )

    # ========================================================================
    # Completion & Commit
    # ========================================================================

    def _commit(
        self,
        grid: Grid,
        part: Partition,
        target: Position,
        target_is_deep: bool,
        want_mine: bool,
        total: int,
        deep_cells: int,
        assignment: Optional[List[int]],
    ) -> AdjustResult:
        """Fill the deep cells around the shallow assignment and write it all."""
        if assignment is None:
            shallow_mines = part.shallow_mines
        else:
            shallow_mines = sum(assignment)

        leftover = total - shallow_mines
        if not 0 <= leftover <= deep_cells:
            logger.debug(
                "%d mines do not fit in %d deep cells", leftover, deep_cells
            )
            return AdjustResult(AdjustOutcome.IMPOSSIBLE)

        deep_mask = sample_combination(deep_cells, leftover, self.rng)

        if assignment is not None:
            for (sx, sy), value in zip(part.shallow, assignment):
                grid.cell(sx, sy).is_mine = value == 1

        j = 0
        for position in part.deep:
            if position == target:
                continue
            grid.cell(*position).is_mine = bool(deep_mask[j])
            j += 1
        assert j == deep_cells

        if target_is_deep:
            grid.cell(*target).is_mine = want_mine

        grid.recompute_all_adjacency()

        logger.info("Successfully shuffled mines around.")
        deep_total = leftover + (1 if target_is_deep and want_mine else 0)
        outcome = AdjustOutcome.RELOCATED if assignment is None else AdjustOutcome.SOLVED
        return AdjustResult(outcome, shallow_mines=shallow_mines, deep_mines=deep_total)
