"""Finite-difference Jacobian approximation."""

from typing import Callable, Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.core.config import SQRT_EPS


def finite_difference_jacobian(
    fun: Callable[[float, NDArray], NDArray],
    t: float,
    y: NDArray,
    f0: Optional[NDArray] = None,
    delta_y: float = SQRT_EPS,
    delta_min: float = SQRT_EPS,
) -> NDArray:
    """
    Forward-difference approximation of ∂f/∂y at (t, y).

    Component i is perturbed by max(|y_i|, delta_y)·sqrt(eps), floored at
    delta_min; column i is (f(y + δ e_i) - f(y)) / δ.

    Args:
        fun: Vector field f(t, y)
        t: Time
        y: State, shape (n,)
        f0: f(t, y) if already available
        delta_y: Lower bound on the magnitude used to scale the perturbation
        delta_min: Smallest perturbation

    Returns:
        J: Dense Jacobian, shape (n, n)
    """
    y = np.asarray(y, dtype=float)
    n = y.shape[0]
    if f0 is None:
        f0 = np.asarray(fun(t, y), dtype=float)

    J = np.empty((n, n))
    y_pert = y.copy()
    for i in range(n):
        delta = max(max(abs(y[i]), delta_y) * SQRT_EPS, delta_min)
        y_pert[i] = y[i] + delta
        # Use the representable step
        delta = y_pert[i] - y[i]
        J[:, i] = (np.asarray(fun(t, y_pert), dtype=float) - f0) / delta
        y_pert[i] = y[i]

    return J
