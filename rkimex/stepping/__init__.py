"""Integration engine, step records and step-size control."""

from rkimex.stepping.integrator import Integrator, integrate
from rkimex.stepping.record import (
    StepRecord,
    StepFailure,
    IntegrationStats,
    IntegrationResult,
)
from rkimex.stepping.control import error_norm, step_size_factor, initial_step_size

__all__ = [
    "Integrator",
    "integrate",
    "StepRecord",
    "StepFailure",
    "IntegrationStats",
    "IntegrationResult",
    "error_norm",
    "step_size_factor",
    "initial_step_size",
]
