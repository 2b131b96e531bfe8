"""
Constraint encoding.

Turns the revealed numbers around the shallow cells into a system of
linear constraints over 0/1 variables, one variable per shallow cell.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from minefield.grid import Grid
from minefield.utils import Position

from .partition import Partition


# ============================================================================
# Constraint Types
# ============================================================================

class Relation(Enum):
    """Comparison between a linear sum and its right-hand side."""

    EQ = "=="
    LE = "<="
    GE = ">="

    def holds(self, lhs: int, rhs: int) -> bool:
        """Evaluate `lhs <relation> rhs`."""
        if self is Relation.EQ:
            return lhs == rhs
        if self is Relation.LE:
            return lhs <= rhs
        return lhs >= rhs


@dataclass(frozen=True)
class LinearConstraint:
    """
    A sparse linear constraint: sum(coef * x[var]) <relation> rhs.

    Attributes:
        variables: Variable indices.
        coefficients: One coefficient per variable.
        relation: Comparison operator.
        rhs: Right-hand side.
        label: Human-readable origin, for logs.
    """

    variables: Tuple[int, ...]
    coefficients: Tuple[int, ...]
    relation: Relation
    rhs: int
    label: str = ""

    def __post_init__(self) -> None:
        assert len(self.variables) == len(self.coefficients)

    def evaluate(self, assignment: Sequence[int]) -> int:
        """Left-hand side under a full assignment."""
        return sum(c * int(assignment[v]) for v, c in zip(self.variables, self.coefficients))

    def is_satisfied(self, assignment: Sequence[int]) -> bool:
        """Check the constraint against a full assignment."""
        return self.relation.holds(self.evaluate(assignment), self.rhs)


@dataclass
class ConstraintSystem:
    """Binary variables plus the constraints over them."""

    num_variables: int
    constraints: List[LinearConstraint] = field(default_factory=list)

    def add(
        self,
        variables: Sequence[int],
        relation: Relation,
        rhs: int,
        label: str = "",
    ) -> None:
        """Append a constraint whose coefficients are all one."""
        self.constraints.append(
            LinearConstraint(
                variables=tuple(variables),
                coefficients=(1,) * len(variables),
                relation=relation,
                rhs=rhs,
                label=label,
            )
        )

    def is_satisfied(self, assignment: Sequence[int]) -> bool:
        """Check every constraint against a full assignment."""
        if len(assignment) != self.num_variables:
            return False
        return all(c.is_satisfied(assignment) for c in self.constraints)

    def __len__(self) -> int:
        return len(self.constraints)


# ============================================================================
# Encoding
# ============================================================================

def encode_constraints(
    grid: Grid,
    part: Partition,
    total_mines: int,
    deep_cells: int,
    target: Optional[Position] = None,
    want_mine: bool = False,
) -> ConstraintSystem:
    """
    Build the feasibility problem for the shallow cells.

    One equality per source: its hidden neighbors hold exactly its
    displayed number of mines. Two bounds on the shallow total: the
    deep cells can absorb at most `deep_cells` mines, and no more than
    `total_mines` exist. When `target` is shallow, one more equality
    pins its variable to `want_mine`.

    Args:
        grid: Grid the partition was taken from.
        part: Partition of the hidden cells.
        total_mines: Mines to distribute over shallow and deep cells.
        deep_cells: Deep cells free to receive mines.
        target: Clicked position, or None.
        want_mine: Requested content of the target.

    Returns:
        The constraint system over `part.n` variables.
    """
    system = ConstraintSystem(num_variables=part.n)

    for x, y in part.sources:
        columns = [
            part.variable_index[(nx, ny)]
            for nx, ny in grid.neighbors(x, y)
            if not grid.cell(nx, ny).is_revealed
        ]
        system.add(
            columns, Relation.EQ, grid.cell(x, y).adjacent_mines, label=f"number at ({x}, {y})"
        )

    every = range(part.n)
    system.add(every, Relation.GE, total_mines - deep_cells, label="shallow minimum")
    system.add(every, Relation.LE, total_mines, label="shallow maximum")

    if target is not None and target in part.variable_index:
        system.add(
            [part.variable_index[target]],
            Relation.EQ,
            1 if want_mine else 0,
            label=f"request at {target}",
        )

    return system
