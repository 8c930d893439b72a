"""Linear radioactive decay chain."""

import numpy as np
from numpy.typing import NDArray

from rkimex.core.rhs import RHS


class DecayChain(RHS):
    """
    y_0 → y_1 → ... → y_{n-1} with rates 1, 2, ..., n-1.

    The last species is stable, so the total Σ y_i is conserved by the exact
    flow and by any Runge-Kutta step.
    """

    def __init__(self, n: int = 10):
        if n < 2:
            raise ValueError(f"Decay chain needs at least 2 species, got {n}")
        self.n = n
        rates = np.arange(1.0, n)
        M = np.zeros((n, n))
        M[np.arange(n - 1), np.arange(n - 1)] = -rates
        M[np.arange(1, n), np.arange(n - 1)] = rates
        self.M = M

    @property
    def size(self) -> int:
        return self.n

    def f(self, t, y):
        return self.M @ y

    def jacobian(self, t: float, y: NDArray) -> NDArray:
        return self.M.copy()

    def initial_values(self) -> NDArray:
        y0 = np.zeros(self.n)
        y0[0] = 1.0
        return y0
