"""Progress reporting module."""

import sys
from typing import Optional, TextIO

from rkimex.core import properties as P
from rkimex.modules.base import SolverModule


class ProgressReporterModule(SolverModule):
    """
    Prints the completed fraction of the integration interval.

    A line is written whenever the fraction has advanced by more than
    precision since the last report, and once more at the end of stepping
    if the final fraction has not been reported.
    """

    required_properties = frozenset({P.FINAL_TIME, P.STEP_ACCEPTED})

    def __init__(self, precision: float = 0.01, stream: Optional[TextIO] = None):
        self.precision = precision
        self.stream = stream
        self.formatter = "{:.2%}".format
        self._t0 = 0.0
        self._span = 1.0
        self._done = 0.0
        self._last = 0.0

    def begin_stepping(self, initial_time, initial_state, constant_properties):
        self._t0 = initial_time
        self._span = constant_properties.get_real(P.END_TIME) - initial_time
        self._done = 0.0
        self._last = 0.0

    def step(self, properties):
        if not properties.get_bool(P.STEP_ACCEPTED):
            return
        self._done = (properties.get_real(P.FINAL_TIME) - self._t0) / self._span
        if self._done > self._last + self.precision:
            self._report()

    def end_stepping(self) -> None:
        if self._done > self._last:
            self._report()

    def _report(self) -> None:
        out = self.stream or sys.stdout
        out.write(self.formatter(self._done) + "\n")
        out.flush()
        self._last = self._done
