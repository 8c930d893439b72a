"""Prothero-Robinson stiffness probe."""

import numpy as np
from numpy.typing import NDArray

from rkimex.core.rhs import AdditiveRHS


class ProtheroRobinson(AdditiveRHS):
    """
    y' = λ(y - g(t)) + g'(t) with g = sin, split as f1 = g', f2 = λ(y - g).

    The exact solution through y(0) = g(0) is g(t) for every λ; λ < 0
    controls the stiffness.
    """

    def __init__(self, lam: float = -1e3):
        self.lam = lam

    @property
    def size(self) -> int:
        return 1

    def f1(self, t, y):
        return np.array([np.cos(t)])

    def f2(self, t, y):
        return self.lam * (y - np.sin(t))

    def jacobian2(self, t: float, y: NDArray) -> NDArray:
        return np.array([[self.lam]])

    def exact(self, t: float) -> NDArray:
        return np.array([np.sin(t)])
