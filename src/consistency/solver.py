"""
Feasibility solving.

Wraps a 0/1 integer programming backend behind a small interface: hand
it a ConstraintSystem and a Deadline, get back a SolveResult. The
default backend is OR-Tools CP-SAT.
"""
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional

from ortools.sat.python import cp_model

from .encoder import ConstraintSystem, LinearConstraint, Relation

logger = logging.getLogger(__name__)


# ============================================================================
# Deadline
# ============================================================================

class Deadline:
    """
    Wall-clock budget doubling as a cancellation predicate.

    Calling the deadline returns True once the budget is spent.
    """

    def __init__(
        self,
        budget_ms: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Start the budget now.

        Args:
            budget_ms: Budget in milliseconds.
            clock: Monotonic clock in seconds; injectable for tests.
        """
        self._clock = clock
        self.budget_ms = budget_ms
        self._expires_at = clock() + budget_ms / 1000.0

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        """Check if the budget is spent."""
        return self._clock() >= self._expires_at

    def __call__(self) -> bool:
        return self.expired()


# ============================================================================
# Results
# ============================================================================

class SolveStatus(Enum):
    """Outcome of one feasibility solve."""

    FEASIBLE = auto()
    INFEASIBLE = auto()
    TIMED_OUT = auto()
    ERROR = auto()


@dataclass
class SolveResult:
    """
    Result of one feasibility solve.

    Attributes:
        status: Outcome.
        assignment: 0/1 value per variable when FEASIBLE, else None.
        message: Backend detail for ERROR outcomes.
    """

    status: SolveStatus
    assignment: Optional[List[int]] = None
    message: str = ""

    @property
    def is_feasible(self) -> bool:
        return self.status == SolveStatus.FEASIBLE


# ============================================================================
# Solver Interface
# ============================================================================

class FeasibilitySolver(ABC):
    """Anything that can find one 0/1 point satisfying a ConstraintSystem."""

    @abstractmethod
    def solve(self, system: ConstraintSystem, deadline: Deadline) -> SolveResult:
        """
        Look for any feasible assignment.

        Args:
            system: Constraints over binary variables.
            deadline: Budget; the search must stop soon after it expires.

        Returns:
            FEASIBLE with an assignment, INFEASIBLE, TIMED_OUT or ERROR.
        """


def _trivially_violated(constraint: LinearConstraint) -> bool:
    return not constraint.variables and not constraint.relation.holds(0, constraint.rhs)


class CpSatSolver(FeasibilitySolver):
    """
    OR-Tools CP-SAT backend.

    No objective is posted, so the search ends at the first feasible
    point. The deadline's remaining time becomes CP-SAT's own time limit,
    which it checks inside the search.
    """

    def __init__(self, num_workers: int = 1, random_seed: Optional[int] = None) -> None:
        """
        Args:
            num_workers: CP-SAT search workers; one keeps solves sequential.
            random_seed: Optional CP-SAT seed.
        """
        self.num_workers = num_workers
        self.random_seed = random_seed

    def solve(self, system: ConstraintSystem, deadline: Deadline) -> SolveResult:
        if deadline.expired():
            return SolveResult(SolveStatus.TIMED_OUT)

        model = cp_model.CpModel()
        xs = [model.new_bool_var(f"x{j}") for j in range(system.num_variables)]

        for constraint in system.constraints:
            if not constraint.variables:
                if _trivially_violated(constraint):
                    logger.debug("Empty constraint %r cannot hold", constraint.label)
                    return SolveResult(SolveStatus.INFEASIBLE)
                continue
            lhs = sum(c * xs[v] for v, c in zip(constraint.variables, constraint.coefficients))
            if constraint.relation is Relation.EQ:
                model.add(lhs == constraint.rhs)
            elif constraint.relation is Relation.LE:
                model.add(lhs <= constraint.rhs)
            else:
                model.add(lhs >= constraint.rhs)

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = max(deadline.remaining(), 1e-3)
        solver.parameters.num_workers = self.num_workers
        if self.random_seed is not None:
            solver.parameters.random_seed = self.random_seed

        status = solver.solve(model)

        if status in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            return SolveResult(
                SolveStatus.FEASIBLE,
                assignment=[int(solver.value(x)) for x in xs],
            )
        if status == cp_model.INFEASIBLE:
            return SolveResult(SolveStatus.INFEASIBLE)
        if status == cp_model.UNKNOWN:
            return SolveResult(SolveStatus.TIMED_OUT)
        return SolveResult(SolveStatus.ERROR, message=solver.status_name(status))
