"""Empirical convergence orders on the explicit, DIRK and additive paths."""

import numpy as np
import pytest

from rkimex.core.config import IntegratorConfig
from rkimex.core.rhs import AdditiveFunctionRHS, FunctionRHS
from rkimex.methods import imex, runge_kutta
from rkimex.modules.collector import SolutionCollectorModule
from rkimex.stepping.integrator import Integrator


T_END = 2.0


def exp_sin_rhs():
    """y' = y cos t, y = exp(sin t)"""
    return FunctionRHS(
        lambda t, y: y * np.cos(t),
        size=1,
        jac=lambda t, y: np.array([[np.cos(t)]]),
    )


def forced_decay_rhs():
    """y' = cos t - 2y, f1 = cos t explicit, f2 = -2y implicit"""
    return AdditiveFunctionRHS(
        lambda t, y: np.cos(t) * np.ones_like(y),
        lambda t, y: -2.0 * y,
        size=1,
        jac2=lambda t, y: np.array([[-2.0]]),
    )


def exp_sin_exact(t):
    return np.exp(np.sin(t))


def forced_decay_exact(t):
    return 0.6 * np.exp(-2.0 * t) + (2.0 * np.cos(t) + np.sin(t)) / 5.0


def fixed_step_error(rhs, scheme, exact, N):
    """Largest error over the N + 1 grid points."""
    collector = SolutionCollectorModule()
    integrator = Integrator(rhs, scheme, IntegratorConfig(adaptive=False))
    integrator.add_module(collector)
    result = integrator.solve(0.0, np.ones(1), T_END, h0=T_END / N)
    assert result.stats.accepted == N
    return np.max(np.abs(collector.values[:, 0] - exact(collector.times)))


def observed_order(rhs, scheme, exact, N):
    e1 = fixed_step_error(rhs, scheme, exact, N)
    e2 = fixed_step_error(rhs, scheme, exact, 2 * N)
    return np.log2(e1 / e2)


@pytest.mark.parametrize("make, N", [
    (runge_kutta.explicit_euler, 40),
    (runge_kutta.heun, 20),
    (runge_kutta.ssp33, 20),
    (runge_kutta.rk4, 20),
    (runge_kutta.three_eighths, 20),
    (runge_kutta.dormand_prince54, 20),
])
def test_explicit_order(make, N):
    scheme = make()
    p = observed_order(exp_sin_rhs(), scheme, exp_sin_exact, N)
    assert abs(p - scheme.order) < 0.4


@pytest.mark.parametrize("make, N", [
    (runge_kutta.implicit_euler, 40),
    (runge_kutta.implicit_midpoint, 20),
    (runge_kutta.sdirk2, 20),
])
def test_dirk_order(make, N):
    scheme = make()
    p = observed_order(exp_sin_rhs(), scheme, exp_sin_exact, N)
    assert abs(p - scheme.order) < 0.4


@pytest.mark.parametrize("make, N", [
    (imex.ars121, 40),
    (imex.ars222, 20),
    (imex.ars233, 20),
    (imex.ars443, 20),
    (imex.kc32, 20),
    (imex.kc43, 20),
    (imex.kc54, 20),
])
def test_additive_order(make, N):
    scheme = make()
    p = observed_order(forced_decay_rhs(), scheme, forced_decay_exact, N)
    assert abs(p - scheme.order) < 0.5


def test_tolerance_proportionality():
    """Tightening rtol reduces the global error."""
    errors = []
    for rtol in [1e-4, 1e-6, 1e-8]:
        integrator = Integrator(exp_sin_rhs(), runge_kutta.dormand_prince54(),
                                IntegratorConfig(rtol=rtol, atol=rtol * 1e-2))
        result = integrator.solve(0.0, np.ones(1), T_END)
        errors.append(abs(result.y[0] - np.exp(np.sin(T_END))))
    assert errors[0] > errors[1] > errors[2]
    assert errors[2] < 1e-7
