"""
Minefield consistency engine.

Rearranges hidden mines so a clicked cell gets the requested content
while every revealed number and the mine total stay the same.
"""
from .engine import AdjustOutcome, AdjustResult, ConsistencyEngine
from .encoder import ConstraintSystem, LinearConstraint, Relation, encode_constraints
from .partition import Partition, partition_grid
from .sampler import sample_combination
from .solver import CpSatSolver, Deadline, FeasibilitySolver, SolveResult, SolveStatus

__all__ = [
    "AdjustOutcome",
    "AdjustResult",
    "ConsistencyEngine",
    "ConstraintSystem",
    "LinearConstraint",
    "Relation",
    "encode_constraints",
    "Partition",
    "partition_grid",
    "sample_combination",
    "CpSatSolver",
    "Deadline",
    "FeasibilitySolver",
    "SolveResult",
    "SolveStatus",
]
