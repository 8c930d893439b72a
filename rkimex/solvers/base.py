"""Base stage solver interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from numpy.typing import NDArray

from rkimex.core.rhs import RHS
from rkimex.core.stages import StageValues


@dataclass
class StageSolution:
    """Stage values of one attempted step and the weighted updates they produce."""

    stage_values: StageValues
    y1: NDArray                            # (n,) propagated solution
    y1_embedded: Optional[NDArray] = None  # (n,) embedded solution, if available
    newton_iterations: int = 0


class StageSolver(ABC):
    """Solves the stage equations for one time step."""

    @abstractmethod
    def solve_stages(
        self,
        t_n: float,
        y_n: NDArray,
        h: float,
        rhs: RHS,
        k0: Optional[NDArray] = None,
    ) -> StageSolution:
        """
        Solve stage equations for one time step.

        Args:
            t_n: Time at start of step
            y_n: State at start of step (n,)
            h: Step size
            rhs: Right-hand side
            k0: First stage derivative if already known (FSAL reuse)

        Returns:
            Stage values together with the propagated and embedded solutions

        Raises:
            ConvergenceError: If an implicit stage solve fails
        """
        ...
