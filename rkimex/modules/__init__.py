"""Solver modules: observers of the integration and their solution writers."""

from rkimex.modules.base import SolverModule, ModuleState
from rkimex.modules.writers import (
    SolutionWriter,
    MemoryWriter,
    DiskWriter,
    CompoundSolutionWriter,
)
from rkimex.modules.output import AllSolutionWriterModule, InterpolatingSolutionWriterModule
from rkimex.modules.progress import ProgressReporterModule
from rkimex.modules.collector import SolutionCollectorModule

__all__ = [
    "SolverModule",
    "ModuleState",
    "SolutionWriter",
    "MemoryWriter",
    "DiskWriter",
    "CompoundSolutionWriter",
    "AllSolutionWriterModule",
    "InterpolatingSolutionWriterModule",
    "ProgressReporterModule",
    "SolutionCollectorModule",
]
