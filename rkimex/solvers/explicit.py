"""Explicit stage solver."""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.solvers.base import StageSolver, StageSolution
from rkimex.core.rhs import RHS
from rkimex.core.stages import StageValues
from rkimex.core.tableau import ButcherTableau


class ExplicitStageSolver(StageSolver):
    """Forward substitution for strictly lower triangular A."""

    def __init__(self, tableau: ButcherTableau):
        self.tableau = tableau

    def solve_stages(
        self,
        t_n: float,
        y_n: NDArray,
        h: float,
        rhs: RHS,
        k0: Optional[NDArray] = None,
    ) -> StageSolution:
        """Solve explicit stages via forward substitution."""
        tab = self.tableau
        s, n = tab.s, y_n.shape[0]
        A, c = tab.A, tab.c

        K = np.zeros((s, n))
        for i in range(s):
            if i == 0 and k0 is not None:
                K[0] = k0
                continue
            # Y_i = y_n + h Σ_{j<i} a_ij k_j
            Y = y_n + h * (A[i, :i] @ K[:i])
            K[i] = rhs.f(t_n + c[i] * h, Y)

        y1 = y_n + h * (tab.b @ K)
        y1_emb = y_n + h * (tab.b_embedded @ K) if tab.has_embedded else None
        return StageSolution(StageValues.single(K), y1, y1_emb)
