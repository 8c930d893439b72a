"""Newton solver mixin for implicit stage equations."""

import logging
from typing import Callable
import numpy as np
import scipy.linalg
from numpy.typing import NDArray

from rkimex.core.errors import ConvergenceError

logger = logging.getLogger(__name__)


class NewtonMixin:
    """Mixin providing Newton iteration for diagonally implicit stages."""

    def newton_solve(
        self,
        residual_fn: Callable[[NDArray], NDArray],
        jacobian_fn: Callable[[NDArray], NDArray],
        z0: NDArray,
        tol: float = 1e-10,
        max_iter: int = 10,
    ) -> tuple[NDArray, int]:
        """
        Newton's method for the nonlinear system r(z) = 0.

        Stops once ||r(z)||_inf <= tol · max(1, ||z||_inf).

        Args:
            residual_fn: Function computing residual r(z)
            jacobian_fn: Function computing the iteration matrix ∂r/∂z at z
            z0: Initial guess
            tol: Convergence tolerance
            max_iter: Maximum number of linear corrections

        Returns:
            z: Solution
            iterations: Number of corrections applied

        Raises:
            ConvergenceError: If the iterate becomes non-finite or the
                tolerance is not met within max_iter corrections.
        """
        z = np.array(z0, dtype=float)

        for iteration in range(max_iter + 1):
            r = residual_fn(z)
            r_norm = float(np.linalg.norm(r, np.inf))
            if not np.isfinite(r_norm):
                raise ConvergenceError(
                    f"Non-finite Newton residual after {iteration} iterations",
                    iterations=iteration,
                    residual=r_norm,
                )
            if r_norm <= tol * max(1.0, float(np.linalg.norm(z, np.inf))):
                return z, iteration
            if iteration == max_iter:
                break

            J = jacobian_fn(z)
            if not np.all(np.isfinite(J)):
                raise ConvergenceError(
                    f"Non-finite iteration matrix after {iteration} iterations",
                    iterations=iteration,
                    residual=r_norm,
                )
            lu = scipy.linalg.lu_factor(J, check_finite=False)
            z -= scipy.linalg.lu_solve(lu, r, check_finite=False)

        logger.debug("Newton stalled at residual %.3e after %d iterations", r_norm, max_iter)
        raise ConvergenceError(
            f"Newton iteration did not converge in {max_iter} iterations "
            f"(residual {r_norm:.3e})",
            iterations=max_iter,
            residual=r_norm,
        )

    def solve_stage_derivative(
        self,
        t_stage: float,
        base: NDArray,
        h_gamma: float,
        fun: Callable[[float, NDArray], NDArray],
        jac: Callable[[float, NDArray], NDArray],
        k_guess: NDArray,
        tol: float = 1e-10,
        max_iter: int = 10,
    ) -> tuple[NDArray, int]:
        """
        Solve k = fun(t_stage, base + h_gamma·k) for the stage derivative k.

        Each correction solves (I - h_gamma·J) Δk = fun(...) - k with J
        evaluated at the current iterate.

        Returns:
            k: Stage derivative (n,)
            iterations: Number of Newton corrections
        """
        I = np.eye(base.shape[0])

        def residual(k: NDArray) -> NDArray:
            return k - fun(t_stage, base + h_gamma * k)

        def iteration_matrix(k: NDArray) -> NDArray:
            return I - h_gamma * jac(t_stage, base + h_gamma * k)

        return self.newton_solve(residual, iteration_matrix, k_guess, tol=tol, max_iter=max_iter)
