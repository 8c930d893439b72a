"""Stage solvers for explicit, diagonally implicit and additive tableaux."""

from rkimex.solvers.base import StageSolver, StageSolution
from rkimex.solvers.factory import create_stage_solver

__all__ = [
    "StageSolver",
    "StageSolution",
    "create_stage_solver",
]
