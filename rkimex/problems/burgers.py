"""Method-of-lines discretisation of the viscous Burgers equation."""

import numpy as np
from numpy.typing import NDArray

from rkimex.core.rhs import AdditiveRHS


class BurgersMOL(AdditiveRHS):
    """
    u_t + u u_x = ν u_xx on a uniform grid with Dirichlet boundaries.

    f1 is the upwinded convection term u_i (u_{i-1} - u_i)/dx, treated
    explicitly; f2 is the centred diffusion ν(u_{i-1} - 2u_i + u_{i+1})/dx²,
    treated implicitly. Boundary values are held fixed.
    """

    def __init__(self, n: int, dx: float, nu: float):
        if n < 3:
            raise ValueError(f"Need at least 3 grid points, got {n}")
        self.n = n
        self.dx = dx
        self.nu = nu

        coeff = nu / dx**2
        D = np.zeros((n, n))
        i = np.arange(1, n - 1)
        D[i, i - 1] = coeff
        D[i, i] = -2.0 * coeff
        D[i, i + 1] = coeff
        self.D = D

    @property
    def size(self) -> int:
        return self.n

    def f1(self, t, y):
        yp = np.zeros_like(y)
        yp[1:-1] = y[1:-1] * (y[:-2] - y[1:-1]) / self.dx
        return yp

    def f2(self, t, y):
        return self.D @ y

    def jacobian2(self, t: float, y: NDArray) -> NDArray:
        return self.D.copy()

    def grid(self) -> NDArray:
        return self.dx * np.arange(self.n)
