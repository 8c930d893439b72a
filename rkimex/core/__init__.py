"""Core abstractions: tableaux, interpolants, RHS contracts and properties."""

from rkimex.core.tableau import ButcherTableau, AdditiveTableau, StageType
from rkimex.core.interpolant import (
    Interpolant,
    DefaultInterpolant,
    RKInterpolant,
    ARKInterpolant,
    PolynomialWeights,
    dormand_prince_interpolant,
    check_theta,
)
from rkimex.core.rhs import (
    RHS,
    AdditiveRHS,
    FunctionRHS,
    AdditiveFunctionRHS,
    LinearizedSplit,
)
from rkimex.core.jacobian import finite_difference_jacobian
from rkimex.core.stages import StageValues
from rkimex.core.properties import PropertyHolder, PropertyKind
from rkimex.core.config import (
    IntegratorConfig,
    StepControlConfig,
    NewtonConfig,
    ControllerKind,
    ErrorNorm,
)

__all__ = [
    "ButcherTableau",
    "AdditiveTableau",
    "StageType",
    "Interpolant",
    "DefaultInterpolant",
    "RKInterpolant",
    "ARKInterpolant",
    "PolynomialWeights",
    "dormand_prince_interpolant",
    "check_theta",
    "RHS",
    "AdditiveRHS",
    "FunctionRHS",
    "AdditiveFunctionRHS",
    "LinearizedSplit",
    "finite_difference_jacobian",
    "StageValues",
    "PropertyHolder",
    "PropertyKind",
    "IntegratorConfig",
    "StepControlConfig",
    "NewtonConfig",
    "ControllerKind",
    "ErrorNorm",
]
