"""Butcher tableau specification."""

from dataclasses import dataclass, field
from functools import cached_property
from enum import Enum, auto
from typing import Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.core.errors import ConfigurationError
from rkimex.core.interpolant import DefaultInterpolant, Interpolant


class StageType(Enum):
    """Classification of stage matrix structure."""
    EXPLICIT = auto()   # A strictly lower triangular
    ESDIRK = auto()     # explicit first stage, then constant diagonal γ
    DIRK = auto()       # A lower triangular, varying diagonal
    SDIRK = auto()      # A lower triangular, constant diagonal γ
    IMPLICIT = auto()   # A dense


@dataclass(frozen=True)
class ButcherTableau:
    """Runge-Kutta tableau with optional embedded weights."""

    A: NDArray                            # (s, s) stage coupling
    b: NDArray                            # (s,)   solution weights
    c: Optional[NDArray] = None           # (s,)   abscissae, row sums of A if omitted
    b_embedded: Optional[NDArray] = None  # (s,)   error-estimate weights
    order: int = 1
    embedded_order: Optional[int] = None
    fsal: bool = False
    interpolant: Interpolant = field(default_factory=DefaultInterpolant)
    name: str = ""

    def __post_init__(self) -> None:
        A = np.atleast_2d(np.asarray(self.A, dtype=float))
        b = np.asarray(self.b, dtype=float)
        s = A.shape[0]
        if A.shape != (s, s):
            raise ConfigurationError(f"A must be square, got shape {A.shape}")
        if b.shape != (s,):
            raise ConfigurationError(f"b must have shape ({s},), got {b.shape}")

        c = A.sum(axis=1) if self.c is None else np.asarray(self.c, dtype=float)
        if c.shape != (s,):
            raise ConfigurationError(f"c must have shape ({s},), got {c.shape}")

        b_emb = self.b_embedded
        if b_emb is not None:
            b_emb = np.asarray(b_emb, dtype=float)
            if b_emb.shape != (s,):
                raise ConfigurationError(
                    f"b_embedded must have shape ({s},), got {b_emb.shape}"
                )
            if self.embedded_order is None:
                raise ConfigurationError("embedded weights need an embedded_order")

        if self.fsal and not (np.allclose(A[-1], b) and np.isclose(c[-1], 1.0)):
            raise ConfigurationError("FSAL tableau must have last row of A equal to b")

        object.__setattr__(self, "A", A)
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "c", c)
        object.__setattr__(self, "b_embedded", b_emb)

    @cached_property
    def s(self) -> int:
        """Number of stages."""
        return self.A.shape[0]

    @property
    def stages(self) -> int:
        return self.s

    @property
    def is_additive(self) -> bool:
        return False

    @property
    def has_embedded(self) -> bool:
        return self.b_embedded is not None

    @cached_property
    def error_order(self) -> Optional[int]:
        """Local order of the embedded error estimate, None without one."""
        if not self.has_embedded:
            return None
        return min(self.order, self.embedded_order) + 1

    @cached_property
    def stage_type(self) -> StageType:
        """Classify the stage matrix structure."""
        return _classify_stage_structure(self.A)

    @cached_property
    def explicit_stages(self) -> tuple[bool, ...]:
        """Per-stage flag: True where a_{ii} = 0 (evaluated explicitly)."""
        return tuple(bool(np.isclose(self.A[i, i], 0)) for i in range(self.s))

    @cached_property
    def is_explicit(self) -> bool:
        return self.stage_type == StageType.EXPLICIT


@dataclass(frozen=True)
class AdditiveTableau:
    """
    Additive (IMEX) Runge-Kutta method: f = f1 + f2 with separate tableaux.

    The explicit table drives the non-stiff part f1, the implicit
    (diagonally implicit) table drives the stiff part f2. Both share stage
    count and abscissae.
    """

    explicit: ButcherTableau   # Â strictly lower triangular
    implicit: ButcherTableau   # A lower triangular
    order: int = 1
    embedded_order: Optional[int] = None
    interpolant: Interpolant = field(default_factory=DefaultInterpolant)
    name: str = ""

    def __post_init__(self) -> None:
        if self.explicit.s != self.implicit.s:
            raise ConfigurationError(
                f"Additive tableau stage counts differ: explicit has "
                f"{self.explicit.s}, implicit has {self.implicit.s}"
            )
        if not np.allclose(self.explicit.c, self.implicit.c):
            raise ConfigurationError(
                f"Additive tableau abscissae differ: explicit {self.explicit.c}, "
                f"implicit {self.implicit.c}"
            )
        if not self.explicit.is_explicit:
            raise ConfigurationError("The f1 table of an additive scheme must be explicit")
        if self.implicit.stage_type == StageType.IMPLICIT:
            raise ConfigurationError(
                "The f2 table of an additive scheme must be diagonally implicit"
            )
        if self.explicit.has_embedded != self.implicit.has_embedded:
            raise ConfigurationError(
                "Embedded weights must be given for both tables or for neither"
            )
        if self.has_embedded and self.embedded_order is None:
            raise ConfigurationError("embedded weights need an embedded_order")

    @property
    def s(self) -> int:
        return self.explicit.s

    @property
    def stages(self) -> int:
        return self.s

    @property
    def is_additive(self) -> bool:
        return True

    @property
    def fsal(self) -> bool:
        return False

    @property
    def c(self) -> NDArray:
        return self.explicit.c

    @property
    def has_embedded(self) -> bool:
        return self.explicit.has_embedded

    @cached_property
    def error_order(self) -> Optional[int]:
        """Local order of the embedded error estimate, None without one."""
        if not self.has_embedded:
            return None
        return min(self.order, self.embedded_order) + 1

    @cached_property
    def explicit_stages(self) -> tuple[bool, ...]:
        """Per-stage flag: True where the f2 diagonal vanishes."""
        return self.implicit.explicit_stages


def _classify_stage_structure(A: NDArray) -> StageType:
    """Classify stage matrix structure."""
    s = A.shape[0]

    # Check strictly lower triangular
    if np.allclose(A, np.tril(A, -1)):
        return StageType.EXPLICIT

    # Check lower triangular
    if np.allclose(A, np.tril(A)):
        diag = np.diag(A)
        nonzero = ~np.isclose(diag, 0)
        nonzero_diag = diag[nonzero]

        # SDIRK: ALL diagonal entries equal and nonzero
        if len(nonzero_diag) == s and np.allclose(diag, diag[0]):
            return StageType.SDIRK
        # ESDIRK: only the first stage explicit, the rest share γ
        if (
            s > 1
            and not nonzero[0]
            and nonzero[1:].all()
            and np.allclose(nonzero_diag, nonzero_diag[0])
        ):
            return StageType.ESDIRK
        return StageType.DIRK

    return StageType.IMPLICIT
