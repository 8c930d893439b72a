"""In-memory trajectory collector."""

import numpy as np
from numpy.typing import NDArray

from rkimex.core import properties as P
from rkimex.modules.base import SolverModule


class SolutionCollectorModule(SolverModule):
    """Gathers the initial point and every accepted (t, y)."""

    required_properties = frozenset({P.FINAL_TIME, P.FINAL_VALUES, P.STEP_ACCEPTED})

    def __init__(self):
        self._times: list[float] = []
        self._values: list[NDArray] = []

    def begin_stepping(self, initial_time, initial_state, constant_properties):
        self._times = [float(initial_time)]
        self._values = [np.array(initial_state, dtype=float)]

    def step(self, properties):
        if properties.get_bool(P.STEP_ACCEPTED):
            self._times.append(properties.get_real(P.FINAL_TIME))
            self._values.append(np.array(properties.get_vector(P.FINAL_VALUES)))

    @property
    def times(self) -> NDArray:
        """Accepted times (m,)"""
        return np.array(self._times)

    @property
    def values(self) -> NDArray:
        """Accepted states (m, n)"""
        return np.vstack(self._values) if self._values else np.empty((0, 0))
