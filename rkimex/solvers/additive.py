"""Additive (IMEX) stage solver."""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.solvers.base import StageSolver, StageSolution
from rkimex.solvers.newton import NewtonMixin
from rkimex.core.config import NewtonConfig
from rkimex.core.rhs import RHS, LinearizedSplit
from rkimex.core.stages import StageValues
from rkimex.core.tableau import AdditiveTableau


class AdditiveStageSolver(NewtonMixin, StageSolver):
    """
    IMEX stages: f1 through the explicit table, f2 through the implicit one.

    Stage i solves
        Y_i = y_n + h Σ_{j<i} (â_ij k1_j + a_ij k2_j) + h a_ii k2_i,
        k2_i = f2(t_i, Y_i),   k1_i = f1(t_i, Y_i),
    so only f2 enters the Newton residual. An unsplit RHS is split per step
    with LinearizedSplit.
    """

    def __init__(self, tableau: AdditiveTableau, newton: Optional[NewtonConfig] = None):
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
        """Solve additive stages; k0 is ignored since the pair is not FSAL."""
        tab = self.tableau
        split = rhs if rhs.is_additive else LinearizedSplit(rhs, t_n, y_n)
        s, n = tab.s, y_n.shape[0]
        A_E, A_I, c = tab.explicit.A, tab.implicit.A, tab.c

        K1 = np.zeros((s, n))   # f1 stage derivatives
        K2 = np.zeros((s, n))   # f2 stage derivatives
        iterations = 0

        for i in range(s):
            t_stage = t_n + c[i] * h
            base = y_n + h * (A_E[i, :i] @ K1[:i] + A_I[i, :i] @ K2[:i])

            if tab.explicit_stages[i]:
                Y = base
                K2[i] = split.f2(t_stage, Y)
            else:
                gamma = A_I[i, i]
                guess = K2[i - 1] if i > 0 else split.f2(t_n, y_n)
                K2[i], it = self.solve_stage_derivative(
                    t_stage, base, h * gamma, split.f2, split.jacobian2, guess,
                    tol=self.newton.tol, max_iter=self.newton.max_iter,
                )
                iterations += it
                Y = base + h * gamma * K2[i]

            K1[i] = split.f1(t_stage, Y)

        E, I = tab.explicit, tab.implicit
        y1 = y_n + h * (E.b @ K1 + I.b @ K2)
        y1_emb = None
        if tab.has_embedded:
            y1_emb = y_n + h * (E.b_embedded @ K1 + I.b_embedded @ K2)
        return StageSolution(StageValues.pair(K1, K2), y1, y1_emb, iterations)
