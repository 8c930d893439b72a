"""Stage-value containers passed from the integrator to its observers."""

from dataclasses import dataclass
from typing import Optional
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class StageValues:
    """
    Stage derivatives of one step.

    Either a single (s, n) array, or a pair of (s, n) arrays for additive
    schemes: the f1 evaluations driven by the explicit table and the f2
    evaluations driven by the implicit table.
    """

    k: NDArray                          # (s, n) single, or f1 part if additive
    k_implicit: Optional[NDArray] = None  # (s, n) f2 part, additive only

    @classmethod
    def single(cls, k: NDArray) -> "StageValues":
        return cls(k=_frozen(k))

    @classmethod
    def pair(cls, k_explicit: NDArray, k_implicit: NDArray) -> "StageValues":
        if np.shape(k_explicit) != np.shape(k_implicit):
            raise ValueError(
                f"Stage arrays differ in shape: {np.shape(k_explicit)} "
                f"vs {np.shape(k_implicit)}"
            )
        return cls(k=_frozen(k_explicit), k_implicit=_frozen(k_implicit))

    @property
    def is_additive(self) -> bool:
        return self.k_implicit is not None

    @property
    def k_explicit(self) -> NDArray:
        """f1 stage values of an additive step."""
        if not self.is_additive:
            raise TypeError("Single stage values have no explicit/implicit split")
        return self.k

    @property
    def stages(self) -> int:
        return self.k.shape[0]


def _frozen(a: NDArray) -> NDArray:
    out = np.array(a, dtype=float)
    out.flags.writeable = False
    return out
