"""Solver module (observer) contract."""

from abc import ABC, abstractmethod
from enum import Enum, auto
from numpy.typing import NDArray

from rkimex.core.properties import PropertyHolder


class ModuleState(Enum):
    """Lifecycle of a registered module."""
    UNREGISTERED = auto()
    STEPPING = auto()
    FINISHED = auto()


class SolverModule(ABC):
    """
    Observer notified by the integrator.

    Subclasses list the property names they read in required_properties;
    the integrator checks them against what it supplies when the module is
    added. Holders passed to step are only valid during that call.
    """

    required_properties: frozenset[str] = frozenset()

    def declare_required_properties(self) -> set[str]:
        """Names of the properties this module reads."""
        return set(self.required_properties)

    def begin_stepping(
        self,
        initial_time: float,
        initial_state: NDArray,
        constant_properties: PropertyHolder,
    ) -> None:
        """Called once before the first step."""

    @abstractmethod
    def step(self, properties: PropertyHolder) -> None:
        """Called for each published step."""
        ...

    def end_stepping(self) -> None:
        """Called once when the run completes or fails."""
