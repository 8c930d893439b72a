"""
rkimex: adaptive Runge-Kutta and IMEX integration of ODE initial value problems.

This library integrates y' = f(t, y), or an additively split
y' = f1(t, y) + f2(t, y), with support for:
- Explicit, diagonally implicit and additive (IMEX) Butcher tableaux
- Embedded error estimation and step-size control
- Dense output through per-scheme interpolants
- Observer modules notified after every step
"""

__version__ = "0.1.0"

from rkimex.core.tableau import ButcherTableau, AdditiveTableau, StageType
from rkimex.core.rhs import RHS, AdditiveRHS, FunctionRHS, AdditiveFunctionRHS
from rkimex.core.config import (
    IntegratorConfig,
    StepControlConfig,
    NewtonConfig,
    ErrorNorm,
    ControllerKind,
)
from rkimex.core.properties import PropertyHolder
from rkimex.modules.base import SolverModule
from rkimex.stepping.integrator import Integrator, integrate

__all__ = [
    "ButcherTableau",
    "AdditiveTableau",
    "StageType",
    "RHS",
    "AdditiveRHS",
    "FunctionRHS",
    "AdditiveFunctionRHS",
    "IntegratorConfig",
    "StepControlConfig",
    "NewtonConfig",
    "ErrorNorm",
    "ControllerKind",
    "PropertyHolder",
    "SolverModule",
    "Integrator",
    "integrate",
]
