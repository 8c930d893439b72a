"""Solver factory and dispatch logic."""

from typing import Optional, Union

from rkimex.solvers.base import StageSolver
from rkimex.solvers.explicit import ExplicitStageSolver
from rkimex.solvers.dirk import DIRKStageSolver
from rkimex.solvers.additive import AdditiveStageSolver
from rkimex.core.config import NewtonConfig
from rkimex.core.errors import ConfigurationError
from rkimex.core.tableau import AdditiveTableau, ButcherTableau, StageType


def create_stage_solver(
    scheme: Union[ButcherTableau, AdditiveTableau],
    newton: Optional[NewtonConfig] = None,
) -> StageSolver:
    """
    Pick the stage solver matching the scheme's stage structure.

    Args:
        scheme: Single or additive tableau
        newton: Newton settings for implicit stages

    Returns:
        Appropriate stage solver

    Raises:
        ConfigurationError: For fully implicit tableaux
    """
    if scheme.is_additive:
        return AdditiveStageSolver(scheme, newton)

    if scheme.stage_type == StageType.EXPLICIT:
        return ExplicitStageSolver(scheme)

    if scheme.stage_type == StageType.IMPLICIT:
        raise ConfigurationError(
            f"Fully implicit tableau '{scheme.name}' is not supported; "
            "stages must be at most diagonally implicit"
        )

    return DIRKStageSolver(scheme, newton)
