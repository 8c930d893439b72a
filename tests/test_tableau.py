"""Tests for Butcher and additive tableau validation and classification."""

import numpy as np
import pytest

from rkimex.core.errors import ConfigurationError
from rkimex.core.tableau import AdditiveTableau, ButcherTableau, StageType
from rkimex.methods.imex import ars222, kc43
from rkimex.methods.runge_kutta import dormand_prince54, fehlberg45, rk4, sdirk2
from rkimex.solvers.factory import create_stage_solver
from rkimex.solvers.additive import AdditiveStageSolver
from rkimex.solvers.dirk import DIRKStageSolver
from rkimex.solvers.explicit import ExplicitStageSolver


def gauss2() -> ButcherTableau:
    """2-stage Gauss-Legendre: fully implicit."""
    r = np.sqrt(3.0) / 6.0
    A = np.array([[0.25, 0.25 - r], [0.25 + r, 0.25]])
    return ButcherTableau(A=A, b=np.array([0.5, 0.5]), order=4, name="Gauss2")


def test_abscissae_are_row_sums():
    """Omitted c is filled from the row sums of A."""
    tab = rk4()
    assert np.allclose(tab.c, [0.0, 0.5, 0.5, 1.0])
    assert np.allclose(tab.c, tab.A.sum(axis=1))


def test_stage_classification():
    """Stage structure is read from the sparsity and diagonal of A."""
    assert rk4().stage_type == StageType.EXPLICIT
    assert sdirk2().stage_type == StageType.SDIRK
    assert kc43().implicit.stage_type == StageType.ESDIRK
    assert gauss2().stage_type == StageType.IMPLICIT

    dirk = ButcherTableau(A=np.array([[0.5, 0.0], [0.5, 0.25]]), b=np.array([0.5, 0.5]))
    assert dirk.stage_type == StageType.DIRK


def test_explicit_stage_flags():
    tab = kc43()
    assert tab.explicit_stages == (True, False, False, False, False, False)
    assert sdirk2().explicit_stages == (False, False)


def test_error_order():
    """Error estimates are one order above the lower of the two orders."""
    assert dormand_prince54().error_order == 5
    assert fehlberg45().error_order == 5
    assert kc43().error_order == 4
    assert rk4().error_order is None
    assert not ars222().has_embedded


def test_dormand_prince_is_fsal():
    tab = dormand_prince54()
    assert tab.fsal
    assert np.allclose(tab.A[-1], tab.b)


@pytest.mark.parametrize("A, b", [
    (np.zeros((2, 3)), np.zeros(2)),
    (np.zeros((2, 2)), np.zeros(3)),
])
def test_bad_shapes_rejected(A, b):
    with pytest.raises(ConfigurationError):
        ButcherTableau(A=A, b=b)


def test_embedded_weights_need_order():
    with pytest.raises(ConfigurationError):
        ButcherTableau(A=np.zeros((1, 1)), b=np.ones(1), b_embedded=np.ones(1))


def test_fsal_flag_checked():
    with pytest.raises(ConfigurationError):
        ButcherTableau(A=rk4().A, b=rk4().b, fsal=True)


def test_additive_stage_count_mismatch():
    E = ButcherTableau(A=np.zeros((2, 2)), b=np.array([0.5, 0.5]))
    I = ButcherTableau(A=np.array([[0.0, 0.0, 0.0], [0.0, 0.5, 0.0], [0.0, 0.5, 0.5]]),
                       b=np.array([0.0, 0.5, 0.5]))
    with pytest.raises(ConfigurationError, match="stage counts"):
        AdditiveTableau(explicit=E, implicit=I)


def test_additive_abscissae_must_match():
    E = ButcherTableau(A=np.array([[0.0, 0.0], [1.0, 0.0]]), b=np.array([0.5, 0.5]))
    I = ButcherTableau(A=np.array([[0.0, 0.0], [0.0, 0.5]]), b=np.array([0.0, 1.0]))
    with pytest.raises(ConfigurationError, match="abscissae"):
        AdditiveTableau(explicit=E, implicit=I)


def test_additive_explicit_table_must_be_explicit():
    tab = sdirk2()
    with pytest.raises(ConfigurationError):
        AdditiveTableau(explicit=tab, implicit=tab)


def test_additive_embedded_on_both_tables():
    tab = kc43()
    plain = ButcherTableau(A=tab.implicit.A, b=tab.implicit.b)
    with pytest.raises(ConfigurationError):
        AdditiveTableau(explicit=tab.explicit, implicit=plain, order=4, embedded_order=3)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        ButcherTableau(A=np.zeros((2, 3)), b=np.zeros(2))


def test_solver_dispatch():
    """The factory picks a stage solver from the stage structure."""
    assert isinstance(create_stage_solver(rk4()), ExplicitStageSolver)
    assert isinstance(create_stage_solver(sdirk2()), DIRKStageSolver)
    assert isinstance(create_stage_solver(kc43()), AdditiveStageSolver)

    with pytest.raises(ConfigurationError, match="Fully implicit"):
        create_stage_solver(gauss2())
