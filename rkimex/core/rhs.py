"""Right-hand side contracts."""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.core.jacobian import finite_difference_jacobian


class RHS(ABC):
    """Vector field y' = f(t, y); the Jacobian falls back to finite differences."""

    @property
    @abstractmethod
    def size(self) -> int:
        """State dimension n."""
        ...

    @property
    def is_additive(self) -> bool:
        return False

    @abstractmethod
    def f(self, t: float, y: NDArray) -> NDArray:
        """RHS evaluation: ẏ = f(t, y)."""
        ...

    def jacobian(self, t: float, y: NDArray) -> NDArray:
        """State Jacobian ∂f/∂y, shape (n, n)."""
        return finite_difference_jacobian(self.f, t, y)


class AdditiveRHS(RHS):
    """
    Split vector field f = f1 + f2.

    f1 is the non-stiff (explicitly treated) part, f2 the stiff
    (implicitly treated) part. Implicit stage solves only need ∂f2/∂y.
    """

    @property
    def is_additive(self) -> bool:
        return True

    @abstractmethod
    def f1(self, t: float, y: NDArray) -> NDArray:
        """Non-stiff part."""
        ...

    @abstractmethod
    def f2(self, t: float, y: NDArray) -> NDArray:
        """Stiff part."""
        ...

    def f(self, t: float, y: NDArray) -> NDArray:
        return self.f1(t, y) + self.f2(t, y)

    def jacobian2(self, t: float, y: NDArray) -> NDArray:
        """Jacobian of the stiff part ∂f2/∂y, shape (n, n)."""
        return finite_difference_jacobian(self.f2, t, y)


class FunctionRHS(RHS):
    """Wrap a plain callable f(t, y) and an optional Jacobian callable."""

    def __init__(
        self,
        fun: Callable[[float, NDArray], NDArray],
        size: int,
        jac: Optional[Callable[[float, NDArray], NDArray]] = None,
    ):
        self._fun = fun
        self._size = size
        self._jac = jac

    @property
    def size(self) -> int:
        return self._size

    def f(self, t: float, y: NDArray) -> NDArray:
        return np.asarray(self._fun(t, y), dtype=float)

    def jacobian(self, t: float, y: NDArray) -> NDArray:
        if self._jac is None:
            return super().jacobian(t, y)
        return np.asarray(self._jac(t, y), dtype=float)


class AdditiveFunctionRHS(AdditiveRHS):
    """Wrap two callables f1(t, y), f2(t, y) and an optional ∂f2/∂y callable."""

    def __init__(
        self,
        f1: Callable[[float, NDArray], NDArray],
        f2: Callable[[float, NDArray], NDArray],
        size: int,
        jac2: Optional[Callable[[float, NDArray], NDArray]] = None,
    ):
        self._f1 = f1
        self._f2 = f2
        self._size = size
        self._jac2 = jac2

    @property
    def size(self) -> int:
        return self._size

    def f1(self, t: float, y: NDArray) -> NDArray:
        return np.asarray(self._f1(t, y), dtype=float)

    def f2(self, t: float, y: NDArray) -> NDArray:
        return np.asarray(self._f2(t, y), dtype=float)

    def jacobian2(self, t: float, y: NDArray) -> NDArray:
        if self._jac2 is None:
            return super().jacobian2(t, y)
        return np.asarray(self._jac2(t, y), dtype=float)


class LinearizedSplit(AdditiveRHS):
    """
    Additive view of a single RHS, frozen at (t0, y0).

    With J0 = ∂f/∂y(t0, y0): f2(t, y) = J0 y and f1(t, y) = f(t, y) - J0 y.
    Lets additive schemes integrate an unsplit problem linearly implicitly.
    """

    def __init__(self, rhs: RHS, t0: float, y0: NDArray):
        self.rhs = rhs
        self.J0 = np.asarray(rhs.jacobian(t0, y0), dtype=float)

    @property
    def size(self) -> int:
        return self.rhs.size

    def f1(self, t: float, y: NDArray) -> NDArray:
        return self.rhs.f(t, y) - self.J0 @ y

    def f2(self, t: float, y: NDArray) -> NDArray:
        return self.J0 @ y

    def jacobian(self, t: float, y: NDArray) -> NDArray:
        return self.rhs.jacobian(t, y)

    def jacobian2(self, t: float, y: NDArray) -> NDArray:
        return self.J0
