"""Integrator configuration."""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union
import numpy as np
from numpy.typing import NDArray

from rkimex.core.errors import ConfigurationError


SQRT_EPS = float(np.sqrt(np.finfo(float).eps))


class ErrorNorm(Enum):
    """How scaled error components are combined into one number."""
    RMS = auto()
    MAX = auto()


class ControllerKind(Enum):
    """Step-size controller formula for accepted steps."""
    PI = auto()          # elementary, or PI when beta > 0
    PREDICTIVE = auto()  # Gustafsson, uses the previous accepted step


@dataclass(frozen=True)
class StepControlConfig:
    """
    Step-size controller settings.

    Attributes:
        safety: Factor applied to the optimal step-size ratio.
        fac_min: Smallest allowed step-size ratio.
        fac_max: Largest allowed step-size ratio.
        beta: Exponent of the PI term on the previous error norm (0 disables it).
        kind: Controller formula used on accepted steps.
        norm: Combination of scaled error components.
        initial_safety: Safety factor of the initial step-size selector.
    """

    safety: float = 0.9
    fac_min: float = 0.2
    fac_max: float = 5.0
    beta: float = 0.0
    kind: ControllerKind = ControllerKind.PI
    norm: ErrorNorm = ErrorNorm.RMS
    initial_safety: float = 0.8

    def __post_init__(self) -> None:
        if not 0.0 < self.safety < 1.0:
            raise ConfigurationError(f"safety must lie in (0, 1), got {self.safety}")
        if not 0.0 < self.fac_min < 1.0:
            raise ConfigurationError(f"fac_min must lie in (0, 1), got {self.fac_min}")
        if self.fac_max <= 1.0:
            raise ConfigurationError(f"fac_max must exceed 1, got {self.fac_max}")
        if self.beta < 0.0:
            raise ConfigurationError(f"beta must be non-negative, got {self.beta}")


@dataclass(frozen=True)
class NewtonConfig:
    """Newton iteration settings for implicit stages."""

    tol: float = SQRT_EPS
    max_iter: int = 10

    def __post_init__(self) -> None:
        if self.tol <= 0.0:
            raise ConfigurationError(f"Newton tolerance must be positive, got {self.tol}")
        if self.max_iter < 1:
            raise ConfigurationError(f"max_iter must be at least 1, got {self.max_iter}")


@dataclass(frozen=True)
class IntegratorConfig:
    """
    Top-level integrator settings.

    Attributes:
        rtol: Relative tolerance.
        atol: Absolute tolerance, scalar or per component.
        adaptive: Use the embedded estimate to adapt the step size.
        initial_step: Initial step; None selects one automatically
            (adaptive) or uses 1e-2 (fixed step).
        max_reject: Consecutive rejections allowed before the run fails.
        notify_rejected: Also publish rejected attempts to modules.
        control: Step-size controller settings.
        newton: Newton iteration settings.
    """

    rtol: float = 1e-6
    atol: Union[float, NDArray] = 1e-9
    adaptive: bool = True
    initial_step: Optional[float] = None
    max_reject: int = 25
    notify_rejected: bool = False
    control: StepControlConfig = field(default_factory=StepControlConfig)
    newton: NewtonConfig = field(default_factory=NewtonConfig)

    def __post_init__(self) -> None:
        if self.rtol <= 0.0:
            raise ConfigurationError(f"rtol must be positive, got {self.rtol}")
        if np.any(np.asarray(self.atol) < 0.0):
            raise ConfigurationError("atol must be non-negative")
        if self.initial_step is not None and self.initial_step <= 0.0:
            raise ConfigurationError(
                f"initial_step must be positive, got {self.initial_step}"
            )
        if self.max_reject < 0:
            raise ConfigurationError(f"max_reject must be non-negative, got {self.max_reject}")
