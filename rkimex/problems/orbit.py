"""Restricted three-body (Arenstorf) orbit."""

import numpy as np
from numpy.typing import NDArray

from rkimex.core.rhs import RHS

MU = 0.012277471          # mass of the moon
MU_HAT = 1.0 - MU         # mass of the earth

# Initial value of the periodic orbit and its period
INITIAL = np.array([0.994, 0.0, 0.0, -2.00158510637908252240537862224])
PERIOD = 17.0652165601579625588917206249


class ArenstorfOrbit(RHS):
    """
    Satellite in the rotating frame of the earth-moon system.

    State (x, y, x', y'). Starting from INITIAL the solution returns to the
    start after PERIOD.
    """

    @property
    def size(self) -> int:
        return 4

    def f(self, t: float, y: NDArray) -> NDArray:
        x0, x1, v0, v1 = y
        d1 = ((x0 + MU)**2 + x1**2) ** 1.5
        d2 = ((x0 - MU_HAT)**2 + x1**2) ** 1.5
        return np.array([
            v0,
            v1,
            x0 + 2.0*v1 - MU_HAT*(x0 + MU)/d1 - MU*(x0 - MU_HAT)/d2,
            x1 - 2.0*v0 - MU_HAT*x1/d1 - MU*x1/d2,
        ])
