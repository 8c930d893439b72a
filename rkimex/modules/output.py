"""Output modules that feed solution writers."""

from typing import Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.core import properties as P
from rkimex.core.errors import ConfigurationError
from rkimex.core.interpolant import check_theta
from rkimex.core.properties import PropertyHolder
from rkimex.modules.base import SolverModule
from rkimex.modules.writers import SolutionWriter

_EPS = np.finfo(float).eps


class AllSolutionWriterModule(SolverModule):
    """Writes the initial point and the end point of every accepted step."""

    required_properties = frozenset({P.FINAL_TIME, P.FINAL_VALUES, P.STEP_ACCEPTED})

    def __init__(self, writer: SolutionWriter):
        self.writer = writer

    def begin_stepping(self, initial_time, initial_state, constant_properties):
        self.writer.begin()
        self.writer.emit(initial_time, initial_state)

    def step(self, properties: PropertyHolder) -> None:
        if not properties.get_bool(P.STEP_ACCEPTED):
            return
        self.writer.emit(
            properties.get_real(P.FINAL_TIME),
            properties.get_vector(P.FINAL_VALUES),
        )

    def end_stepping(self) -> None:
        self.writer.end()


class InterpolatingSolutionWriterModule(SolverModule):
    """
    Writes the solution at chosen output times using the scheme's interpolant.

    Output times are either an increasing sequence or a fixed interval from
    the start time. The initial point is always written. Each accepted step
    writes the outputs in (t_n, t_{n+1}].
    """

    required_properties = frozenset({
        P.SCHEME,
        P.INITIAL_TIME,
        P.INITIAL_VALUES,
        P.FINAL_TIME,
        P.FINAL_VALUES,
        P.STAGE_VALUES,
        P.STEP_ACCEPTED,
    })

    def __init__(
        self,
        writer: SolutionWriter,
        times: Optional[NDArray] = None,
        interval: Optional[float] = None,
    ):
        if (times is None) == (interval is None):
            raise ConfigurationError("Give exactly one of output times or output interval")
        if interval is not None and interval <= 0.0:
            raise ConfigurationError(f"Output interval must be positive, got {interval}")
        if times is not None:
            times = np.asarray(times, dtype=float)
            if np.any(np.diff(times) <= 0.0):
                raise ConfigurationError("Output times must be strictly increasing")

        self.writer = writer
        self.times = times
        self.interval = interval
        self._scheme = None
        self._t0 = 0.0
        self._next = 0  # index of the next output time (or interval count)

    def begin_stepping(self, initial_time, initial_state, constant_properties):
        self._scheme = constant_properties.get_opaque(P.SCHEME)
        self._t0 = initial_time
        if self.times is not None:
            self._next = int(np.searchsorted(self.times, initial_time, side="right"))
        else:
            self._next = 1
        self.writer.begin()
        self.writer.emit(initial_time, initial_state)

    def _next_time(self) -> Optional[float]:
        if self.times is None:
            return self._t0 + self._next * self.interval
        if self._next < len(self.times):
            return float(self.times[self._next])
        return None

    def step(self, properties: PropertyHolder) -> None:
        if not properties.get_bool(P.STEP_ACCEPTED):
            return

        t_i = properties.get_real(P.INITIAL_TIME)
        t_f = properties.get_real(P.FINAL_TIME)
        y_i = properties.get_vector(P.INITIAL_VALUES)
        y_f = properties.get_vector(P.FINAL_VALUES)
        stage_values = properties.get_stage_values(P.STAGE_VALUES)
        h = t_f - t_i
        slack = 4.0 * _EPS * max(1.0, abs(t_f))

        t_out = self._next_time()
        while t_out is not None and t_out <= t_f + slack:
            theta = check_theta(min((t_out - t_i) / h, 1.0))
            y = self._scheme.interpolant.evaluate(y_i, y_f, theta, h, stage_values)
            self.writer.emit(t_out, y)
            self._next += 1
            t_out = self._next_time()

    def end_stepping(self) -> None:
        self.writer.end()
