"""Adaptive integration engine."""

import logging
from typing import Optional, Union
import numpy as np
from numpy.typing import NDArray

from rkimex.core import properties as P
from rkimex.core.config import IntegratorConfig
from rkimex.core.errors import (
    ConfigurationError,
    ConvergenceError,
    IntegratorStateError,
    RetryBudgetExceededError,
    StepSizeUnderflowError,
)
from rkimex.core.properties import PropertyHolder
from rkimex.core.rhs import RHS
from rkimex.core.tableau import AdditiveTableau, ButcherTableau
from rkimex.modules.base import ModuleState, SolverModule
from rkimex.solvers.factory import create_stage_solver
from rkimex.stepping.control import error_norm, initial_step_size, step_size_factor
from rkimex.stepping.record import (
    IntegrationResult,
    IntegrationStats,
    StepFailure,
    StepRecord,
)

logger = logging.getLogger(__name__)

_EPS = np.finfo(float).eps

DEFAULT_FIXED_STEP = 1e-2

STEP_PROPERTIES = frozenset({
    P.INITIAL_TIME,
    P.INITIAL_VALUES,
    P.FINAL_TIME,
    P.FINAL_VALUES,
    P.STAGE_VALUES,
    P.STEP_ACCEPTED,
    P.SCHEME,
    P.STEP_SIZE,
    P.NEXT_STEP_SIZE,
})

CONSTANT_PROPERTIES = frozenset({
    P.SCHEME,
    P.RHS_PROPERTY,
    P.START_TIME,
    P.END_TIME,
    P.RTOL,
    P.ATOL,
})

Scheme = Union[ButcherTableau, AdditiveTableau]


class Integrator:
    """
    Drives y' = f(t, y) from t0 to tf with one scheme.

    Each attempted step runs propose → solve stages → estimate → decide.
    Accepted steps are published to the registered modules in registration
    order; rejected steps are retried from the same (t, y) with a smaller
    step.
    """

    def __init__(
        self,
        rhs: RHS,
        scheme: Scheme,
        config: Optional[IntegratorConfig] = None,
    ):
        self.rhs = rhs
        self.scheme = scheme
        self.config = config or IntegratorConfig()
        self.stage_solver = create_stage_solver(scheme, self.config.newton)

        self._modules: list[SolverModule] = []
        self._states: list[ModuleState] = []
        self._running = False
        self._fixed_step: Optional[float] = None
        self._atol = self.config.atol

    @property
    def adaptive(self) -> bool:
        """Step size follows the embedded estimate."""
        return self.config.adaptive and self.scheme.has_embedded

    @property
    def running(self) -> bool:
        return self._running

    @property
    def modules(self) -> tuple[SolverModule, ...]:
        return tuple(self._modules)

    def module_state(self, module: SolverModule) -> ModuleState:
        for registered, state in zip(self._modules, self._states):
            if registered is module:
                return state
        return ModuleState.UNREGISTERED

    def supplied_properties(self) -> set[str]:
        """Names available to modules, per step or at stepping start."""
        names = set(STEP_PROPERTIES | CONSTANT_PROPERTIES)
        if self.scheme.has_embedded:
            names.add(P.ERROR_NORM)
        return names

    def add_module(self, module: SolverModule) -> None:
        """
        Register an observer.

        Raises:
            IntegratorStateError: If called during solve
            ConfigurationError: If the module requires a property the
                integrator does not supply
        """
        if self._running:
            raise IntegratorStateError("Cannot add a solver module while the integrator is running")

        missing = set(module.declare_required_properties()) - self.supplied_properties()
        if missing:
            raise ConfigurationError(
                f"{type(module).__name__} requires properties the integrator does "
                f"not supply: {', '.join(sorted(missing))}"
            )
        self._modules.append(module)
        self._states.append(ModuleState.UNREGISTERED)

    def solve(
        self,
        t0: float,
        y0: NDArray,
        tf: float,
        h0: Optional[float] = None,
    ) -> IntegrationResult:
        """
        Integrate from (t0, y0) to tf.

        Args:
            t0: Initial time
            y0: Initial state (n,)
            tf: Final time, must exceed t0
            h0: Initial (or, in fixed-step mode, constant) step size

        Returns:
            Final time, state and step statistics

        Raises:
            ConfigurationError: Bad state size, interval or tolerances
            IntegratorStateError: Re-entrant call or finished modules
            RetryBudgetExceededError: Too many consecutive rejections
            StepSizeUnderflowError: Step size below rounding level
        """
        if self._running:
            raise IntegratorStateError("Integrator is already running")

        y = np.array(y0, dtype=float)
        n = self.rhs.size
        if y.shape != (n,):
            raise ConfigurationError(f"Initial state has shape {y.shape}, RHS expects ({n},)")
        if not tf > t0:
            raise ConfigurationError(f"Final time {tf} must exceed initial time {t0}")
        try:
            self._atol = np.broadcast_to(np.asarray(self.config.atol, dtype=float), (n,))
        except ValueError:
            raise ConfigurationError(
                f"atol of shape {np.shape(self.config.atol)} does not match state size {n}"
            ) from None
        if any(state is ModuleState.FINISHED for state in self._states):
            raise IntegratorStateError("Finished solver modules cannot be restarted")

        self._running = True
        stats = IntegrationStats()
        try:
            self._begin_modules(t0, tf, y)
            result = self._run(t0, y, tf, h0, stats)
        finally:
            self._end_modules()
            self._running = False

        logger.info(
            "Reached t=%g: %d accepted, %d rejected steps (%d Newton failures)",
            result.t, stats.accepted, stats.rejected, stats.convergence_failures,
        )
        return result

    def attempt_step(self, t: float, y: NDArray, h: float) -> StepRecord:
        """Attempt one step of size h from (t, y) without advancing."""
        return self._attempt(t, np.asarray(y, dtype=float), h, t + h)

    def _run(
        self,
        t0: float,
        y: NDArray,
        tf: float,
        h0: Optional[float],
        stats: IntegrationStats,
    ) -> IntegrationResult:
        cfg = self.config
        h = self._initial_step(t0, y, tf, h0)
        logger.info(
            "Integrating with %s from t=%g to t=%g (h0=%.3e, %s)",
            self.scheme.name or type(self.scheme).__name__, t0, tf, h,
            "adaptive" if self.adaptive else "fixed step",
        )

        t = t0
        err_prev: Optional[float] = None
        h_prev: Optional[float] = None
        k_fsal: Optional[NDArray] = None
        rejects = 0

        while t < tf:
            if h < 16.0 * _EPS * max(1.0, abs(t)):
                raise StepSizeUnderflowError(f"Step size {h:.3e} underflows at t={t}")
            t1 = t + h
            if t + 1.1 * h >= tf:
                h, t1 = tf - t, tf

            record = self._attempt(
                t, y, h, t1, k0=k_fsal, err_prev=err_prev,
                h_ratio=None if h_prev is None else h / h_prev,
            )
            stats.newton_iterations += record.newton_iterations

            if record.accepted:
                stats.accepted += 1
                rejects = 0
                self._publish(record)
                t, y = record.final_time, record.final_values
                err_prev = record.error_norm
                h_prev = h
                if self.scheme.fsal:
                    k_fsal = record.stage_values.k[-1]
            else:
                stats.rejected += 1
                rejects += 1
                if self.scheme.fsal and record.stage_values is not None:
                    # retry starts from the same (t, y)
                    k_fsal = record.stage_values.k[0]
                if record.failure is StepFailure.CONVERGENCE:
                    stats.convergence_failures += 1
                elif record.failure is StepFailure.NON_FINITE:
                    stats.non_finite += 1
                logger.debug(
                    "Rejected step at t=%g, h=%.3e (%s); retrying with h=%.3e",
                    t, h,
                    record.failure.name.lower() if record.failure else f"error {record.error_norm:.3e}",
                    record.next_step_size,
                )
                if cfg.notify_rejected and record.stage_values is not None:
                    self._publish(record)
                if rejects > cfg.max_reject:
                    raise RetryBudgetExceededError(
                        f"Step at t={t} rejected {rejects} times in a row"
                    )

            h = record.next_step_size

        return IntegrationResult(t=t, y=y, stats=stats)

    def _attempt(
        self,
        t: float,
        y: NDArray,
        h: float,
        t1: float,
        k0: Optional[NDArray] = None,
        err_prev: Optional[float] = None,
        h_ratio: Optional[float] = None,
    ) -> StepRecord:
        """Solve, estimate and decide one step; never raises on retryable failures."""
        ctl = self.config.control

        try:
            sol = self.stage_solver.solve_stages(t, y, h, self.rhs, k0)
        except ConvergenceError as exc:
            logger.debug("Implicit stage failed at t=%g, h=%.3e: %s", t, h, exc)
            return StepRecord(
                initial_time=t, final_time=t1, initial_values=y, accepted=False,
                next_step_size=h * ctl.fac_min, failure=StepFailure.CONVERGENCE,
                newton_iterations=exc.iterations,
            )

        err = None
        if sol.y1_embedded is not None:
            err = error_norm(y, sol.y1, sol.y1_embedded, self.config.rtol, self._atol, ctl.norm)

        record = StepRecord(
            initial_time=t, final_time=t1, initial_values=y, accepted=True,
            next_step_size=self._fixed_step or h, final_values=sol.y1,
            stage_values=sol.stage_values, error_norm=err,
            newton_iterations=sol.newton_iterations,
        )

        if not np.all(np.isfinite(sol.y1)):
            record.accepted = False
            record.failure = StepFailure.NON_FINITE
            record.next_step_size = h * ctl.fac_min
        elif self.adaptive:
            record.accepted = err <= 1.0
            if not np.isfinite(err):
                record.failure = StepFailure.NON_FINITE
            record.next_step_size = h * step_size_factor(
                err, self.scheme.error_order, ctl, record.accepted,
                err_prev, h_ratio,
            )
        return record

    def _initial_step(self, t0: float, y0: NDArray, tf: float, h0: Optional[float]) -> float:
        h = h0 if h0 is not None else self.config.initial_step
        if self.adaptive:
            self._fixed_step = None
            if h is None:
                h = initial_step_size(
                    self.rhs, t0, y0, tf, self.scheme.order, self.config.rtol,
                    self._atol, safety=self.config.control.initial_safety,
                )
        else:
            if h is None:
                h = DEFAULT_FIXED_STEP
            self._fixed_step = h
        if h <= 0.0:
            raise ConfigurationError(f"Initial step must be positive, got {h}")
        return h

    def _constant_properties(self, t0: float, tf: float) -> PropertyHolder:
        props = PropertyHolder()
        props.set_opaque(P.SCHEME, self.scheme)
        props.set_opaque(P.RHS_PROPERTY, self.rhs)
        props.set_real(P.START_TIME, t0)
        props.set_real(P.END_TIME, tf)
        props.set_real(P.RTOL, self.config.rtol)
        props.set_vector(P.ATOL, self._atol)
        return props

    def _publish(self, record: StepRecord) -> None:
        props = PropertyHolder()
        props.set_real(P.INITIAL_TIME, record.initial_time)
        props.set_vector(P.INITIAL_VALUES, record.initial_values)
        props.set_real(P.FINAL_TIME, record.final_time)
        props.set_vector(P.FINAL_VALUES, record.final_values)
        props.set_stage_values(P.STAGE_VALUES, record.stage_values)
        props.set_bool(P.STEP_ACCEPTED, record.accepted)
        props.set_opaque(P.SCHEME, self.scheme)
        props.set_real(P.STEP_SIZE, record.step_size)
        props.set_real(P.NEXT_STEP_SIZE, record.next_step_size)
        if record.error_norm is not None:
            props.set_real(P.ERROR_NORM, record.error_norm)

        for module in self._modules:
            module.step(props)

    def _begin_modules(self, t0: float, tf: float, y0: NDArray) -> None:
        constant = self._constant_properties(t0, tf)
        for i, module in enumerate(self._modules):
            module.begin_stepping(t0, y0.copy(), constant)
            self._states[i] = ModuleState.STEPPING

    def _end_modules(self) -> None:
        for i, module in enumerate(self._modules):
            if self._states[i] is ModuleState.STEPPING:
                self._states[i] = ModuleState.FINISHED
                module.end_stepping()


def integrate(
    rhs: RHS,
    scheme: Scheme,
    t_span: tuple[float, float],
    y0: NDArray,
    modules: Optional[list[SolverModule]] = None,
    h0: Optional[float] = None,
    **config_kwargs,
) -> IntegrationResult:
    """
    One-shot convenience wrapper around Integrator.

    Args:
        rhs: Right-hand side
        scheme: Single or additive tableau
        t_span: Time interval (t0, tf)
        y0: Initial state
        modules: Observers to register, in order
        h0: Initial step size
        **config_kwargs: Fields of IntegratorConfig

    Returns:
        Final time, state and step statistics
    """
    integrator = Integrator(rhs, scheme, IntegratorConfig(**config_kwargs))
    for module in modules or []:
        integrator.add_module(module)
    return integrator.solve(t_span[0], y0, t_span[1], h0=h0)
