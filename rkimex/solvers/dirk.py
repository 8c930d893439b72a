"""DIRK stage solver."""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.solvers.base import StageSolver, StageSolution
from rkimex.solvers.newton import NewtonMixin
from rkimex.core.config import NewtonConfig
from rkimex.core.rhs import RHS
from rkimex.core.stages import StageValues
from rkimex.core.tableau import ButcherTableau


class DIRKStageSolver(NewtonMixin, StageSolver):
    """Diagonally implicit stages (DIRK, SDIRK, ESDIRK) on the full RHS."""

    def __init__(self, tableau: ButcherTableau, newton: Optional[NewtonConfig] = None):
        self.tableau = tableau
        self.newton = newton or NewtonConfig()

    def solve_stages(
        self,
        t_n: float,
        y_n: NDArray,
        h: float,
        rhs: RHS,
        k0: Optional[NDArray] = None,
    ) -> StageSolution:
        """Solve DIRK stages one at a time."""
        tab = self.tableau
        s, n = tab.s, y_n.shape[0]
        A, c = tab.A, tab.c

        K = np.zeros((s, n))
        iterations = 0

        for i in range(s):
            t_stage = t_n + c[i] * h
            base = y_n + h * (A[i, :i] @ K[:i])

            if tab.explicit_stages[i]:
                K[i] = k0 if (i == 0 and k0 is not None) else rhs.f(t_stage, base)
                continue

            # Implicit stage: k_i = f(t_i, base + h a_ii k_i)
            guess = K[i - 1] if i > 0 else rhs.f(t_n, y_n)
            K[i], it = self.solve_stage_derivative(
                t_stage, base, h * A[i, i], rhs.f, rhs.jacobian, guess,
                tol=self.newton.tol, max_iter=self.newton.max_iter,
            )
            iterations += it

        y1 = y_n + h * (tab.b @ K)
        y1_emb = y_n + h * (tab.b_embedded @ K) if tab.has_embedded else None
        return StageSolution(StageValues.single(K), y1, y1_emb, iterations)
