"""Step records and run results."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
from numpy.typing import NDArray

from rkimex.core.stages import StageValues


class StepFailure(Enum):
    """Why an attempted step was rejected without an error-norm verdict."""
    CONVERGENCE = auto()  # Newton failed in an implicit stage
    NON_FINITE = auto()   # NaN/Inf in the solution or error estimate


@dataclass
class StepRecord:
    """One attempted step, as seen by the integrator."""

    initial_time: float
    final_time: float
    initial_values: NDArray              # (n,)
    accepted: bool
    next_step_size: float
    final_values: Optional[NDArray] = None   # (n,), None if stages failed
    stage_values: Optional[StageValues] = None
    error_norm: Optional[float] = None       # None without an embedded estimate
    failure: Optional[StepFailure] = None
    newton_iterations: int = 0

    @property
    def step_size(self) -> float:
        return self.final_time - self.initial_time


@dataclass
class IntegrationStats:
    """Counters accumulated over a run."""

    accepted: int = 0
    rejected: int = 0
    convergence_failures: int = 0
    non_finite: int = 0
    newton_iterations: int = 0

    @property
    def attempted(self) -> int:
        return self.accepted + self.rejected


@dataclass
class IntegrationResult:
    """Final state of a run."""

    t: float
    y: NDArray      # (n,)
    stats: IntegrationStats
