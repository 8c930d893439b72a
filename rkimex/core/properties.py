"""Typed, write-once property bag published by the integrator."""

from enum import Enum, auto
from typing import Any, Iterator
import numpy as np
from numpy.typing import NDArray

from rkimex.core.errors import PropertyLookupError, PropertyWriteError
from rkimex.core.stages import StageValues


# Per-step properties
INITIAL_TIME = "initialTime"
INITIAL_VALUES = "initialValues"
FINAL_TIME = "finalTime"
FINAL_VALUES = "finalValues"
STAGE_VALUES = "stageValues"
STEP_ACCEPTED = "stepAccepted"
SCHEME = "scheme"
STEP_SIZE = "stepSize"
NEXT_STEP_SIZE = "nextStepSize"
ERROR_NORM = "errorNorm"

# Constant properties, published once at stepping start
RHS_PROPERTY = "rhs"
START_TIME = "startTime"
END_TIME = "endTime"
RTOL = "rtol"
ATOL = "atol"


class PropertyKind(Enum):
    """Storage kind of a property value."""
    REAL = auto()
    VECTOR = auto()
    BOOL = auto()
    STAGE_VALUES = auto()
    OPAQUE = auto()


class PropertyHolder:
    """
    Name → typed value mapping, valid for one published step.

    Keys are write-once. Getters check the stored kind and raise
    PropertyLookupError for missing or mistyped access. Vectors are stored
    as read-only copies.
    """

    def __init__(self) -> None:
        self._values: dict[str, tuple[PropertyKind, Any]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def names(self) -> set[str]:
        return set(self._values)

    def kind(self, name: str) -> PropertyKind:
        if name not in self._values:
            raise PropertyLookupError(f"Property '{name}' not found")
        return self._values[name][0]

    # Setters

    def set_real(self, name: str, value: float) -> None:
        self._set(name, PropertyKind.REAL, float(value))

    def set_vector(self, name: str, value: NDArray) -> None:
        vec = np.array(value, dtype=float)
        vec.flags.writeable = False
        self._set(name, PropertyKind.VECTOR, vec)

    def set_bool(self, name: str, value: bool) -> None:
        self._set(name, PropertyKind.BOOL, bool(value))

    def set_stage_values(self, name: str, value: StageValues) -> None:
        if not isinstance(value, StageValues):
            raise TypeError(f"Expected StageValues for '{name}', got {type(value).__name__}")
        self._set(name, PropertyKind.STAGE_VALUES, value)

    def set_opaque(self, name: str, value: Any) -> None:
        self._set(name, PropertyKind.OPAQUE, value)

    # Getters

    def get_real(self, name: str) -> float:
        return self._get(name, PropertyKind.REAL)

    def get_vector(self, name: str) -> NDArray:
        return self._get(name, PropertyKind.VECTOR)

    def get_bool(self, name: str) -> bool:
        return self._get(name, PropertyKind.BOOL)

    def get_stage_values(self, name: str) -> StageValues:
        return self._get(name, PropertyKind.STAGE_VALUES)

    def get_opaque(self, name: str) -> Any:
        return self._get(name, PropertyKind.OPAQUE)

    def _set(self, name: str, kind: PropertyKind, value: Any) -> None:
        if name in self._values:
            raise PropertyWriteError(f"Property '{name}' is already set")
        self._values[name] = (kind, value)

    def _get(self, name: str, kind: PropertyKind) -> Any:
        try:
            stored_kind, value = self._values[name]
        except KeyError:
            raise PropertyLookupError(f"Property '{name}' not found") from None
        if stored_kind is not kind:
            raise PropertyLookupError(
                f"Property '{name}' holds a {stored_kind.name.lower()} value, "
                f"not a {kind.name.lower()}"
            )
        return value
