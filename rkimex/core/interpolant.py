"""Dense-output interpolants."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable
import numpy as np
from numpy.typing import NDArray

from rkimex.core.errors import InterpolationRangeError
from rkimex.core.stages import StageValues


def check_theta(theta: float) -> float:
    """Return theta if it lies in [0, 1], otherwise raise."""
    if not 0.0 <= theta <= 1.0:
        raise InterpolationRangeError(f"Theta passed ({theta}) is not between 0 and 1")
    return theta


class Interpolant(ABC):
    """
    Continuous extension of one accepted step.

    evaluate(y0, y1, 0, ...) == y0 and evaluate(y0, y1, 1, ...) == y1 up to
    rounding. Behaviour for theta outside [0, 1] is undefined; callers
    range-check with check_theta.
    """

    def evaluate(
        self,
        y0: NDArray,
        y1: NDArray,
        theta: float,
        dt: float,
        stage_values: StageValues,
    ) -> NDArray:
        """Solution at t0 + theta·dt."""
        return y0 + self.increment(y0, y1, theta, dt, stage_values)

    @abstractmethod
    def increment(
        self,
        y0: NDArray,
        y1: NDArray,
        theta: float,
        dt: float,
        stage_values: StageValues,
    ) -> NDArray:
        """Displacement y(t0 + theta·dt) - y0."""
        ...


class DefaultInterpolant(Interpolant):
    """Linear interpolation between the step endpoints."""

    def increment(self, y0, y1, theta, dt, stage_values):
        return theta * (y1 - y0)


@dataclass(frozen=True)
class PolynomialWeights:
    """θ-dependent quadrature weights b_i(θ) = Σ_k coefficients[i, k] θ^(k+1)."""

    coefficients: NDArray  # (s, p)

    def __call__(self, theta: float) -> NDArray:
        p = self.coefficients.shape[1]
        powers = theta ** np.arange(1, p + 1)
        return self.coefficients @ powers


class RKInterpolant(Interpolant):
    """
    Dense output Σ_i b_i(θ) k_i · dt from a weight function b(θ).

    The weight function is either PolynomialWeights or a closed-form
    continuous extension such as dormand_prince_weights.
    """

    def __init__(self, weights: Callable[[float], NDArray]):
        self.weights = weights

    @classmethod
    def from_coefficients(cls, coefficients) -> "RKInterpolant":
        return cls(PolynomialWeights(np.asarray(coefficients, dtype=float)))

    def increment(self, y0, y1, theta, dt, stage_values):
        if stage_values.is_additive:
            raise TypeError("RKInterpolant needs single stage values, got an additive pair")
        return self.stage_increment(theta, dt, stage_values.k)

    def stage_increment(self, theta: float, dt: float, K: NDArray) -> NDArray:
        """Displacement for one (s, n) stage array."""
        return dt * (self.weights(theta) @ K)


class ARKInterpolant(Interpolant):
    """Sum of two RK interpolants, one per additive component."""

    def __init__(self, explicit: RKInterpolant, implicit: RKInterpolant):
        self.explicit = explicit
        self.implicit = implicit

    def increment(self, y0, y1, theta, dt, stage_values):
        if not stage_values.is_additive:
            raise TypeError("ARKInterpolant needs an additive stage-value pair")
        return (
            self.explicit.stage_increment(theta, dt, stage_values.k_explicit)
            + self.implicit.stage_increment(theta, dt, stage_values.k_implicit)
        )


_DP_B = np.array([35/384, 0.0, 500/1113, 125/192, -2187/6784, 11/84, 0.0])


def dormand_prince_weights(theta: float) -> NDArray:
    """Continuous extension weights of the Dormand-Prince 5(4) pair."""
    theta1 = theta**2 * (3.0 - 2.0*theta)
    theta2 = theta**2 * (theta - 1.0)**2

    w = theta1 * _DP_B
    w[0] += theta * (theta - 1.0)**2 - theta2 * 5.0 * (2558722523.0 - 31403016.0*theta) / 11282082432.0
    w[2] += theta2 * 100.0 * (882725551.0 - 15701508.0*theta) / 32700410799.0
    w[3] -= theta2 * 25.0 * (443332067.0 - 31403016.0*theta) / 1880347072.0
    w[4] += theta2 * 32805.0 * (23143187.0 - 3489224.0*theta) / 199316789632.0
    w[5] -= theta2 * 55.0 * (29972135.0 - 7076736.0*theta) / 822651844.0
    w[6] = theta**2 * (theta - 1.0) + theta2 * 10.0 * (7414447.0 - 829305.0*theta) / 29380423.0
    return w


def dormand_prince_interpolant() -> RKInterpolant:
    """Fourth-order dense output for dormand_prince54."""
    return RKInterpolant(dormand_prince_weights)
