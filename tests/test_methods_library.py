"""Consistency checks for the tableau library."""

import numpy as np
import pytest

from rkimex.methods import imex, runge_kutta


SINGLE = [
    runge_kutta.explicit_euler,
    runge_kutta.midpoint,
    runge_kutta.heun,
    runge_kutta.heun3,
    runge_kutta.ssp33,
    runge_kutta.rk4,
    runge_kutta.three_eighths,
    runge_kutta.merson43,
    runge_kutta.zonneveld43,
    runge_kutta.fehlberg45,
    runge_kutta.dormand_prince54,
    runge_kutta.implicit_euler,
    runge_kutta.implicit_midpoint,
    runge_kutta.sdirk2,
]

ADDITIVE = [
    imex.ars121,
    imex.ars122,
    imex.ars222,
    imex.ars233,
    imex.ars343,
    imex.ars443,
    imex.kc32,
    imex.kc43,
    imex.kc54,
]


def order_conditions(A, b, c, order):
    """Residuals of the single-table order conditions up to order 4."""
    res = [b.sum() - 1.0]
    if order >= 2:
        res.append(b @ c - 1.0/2.0)
    if order >= 3:
        res.append(b @ c**2 - 1.0/3.0)
        res.append(b @ A @ c - 1.0/6.0)
    if order >= 4:
        res.append(b @ c**3 - 1.0/4.0)
        res.append(b @ (c * (A @ c)) - 1.0/8.0)
        res.append(b @ A @ c**2 - 1.0/12.0)
        res.append(b @ A @ A @ c - 1.0/24.0)
    return np.array(res)


@pytest.mark.parametrize("make", SINGLE)
def test_single_table_consistency(make):
    """Weights sum to one and the abscissae match the row sums."""
    tab = make()
    assert np.isclose(tab.b.sum(), 1.0)
    assert np.allclose(tab.c, tab.A.sum(axis=1))
    if tab.has_embedded:
        assert np.isclose(tab.b_embedded.sum(), 1.0)


@pytest.mark.parametrize("make", SINGLE)
def test_single_table_order_conditions(make):
    tab = make()
    assert np.allclose(order_conditions(tab.A, tab.b, tab.c, min(tab.order, 4)), 0.0, atol=1e-10)


@pytest.mark.parametrize("make", [runge_kutta.merson43, runge_kutta.zonneveld43,
                                  runge_kutta.dormand_prince54])
def test_embedded_weights_order(make):
    tab = make()
    assert np.allclose(
        order_conditions(tab.A, tab.b_embedded, tab.c, tab.embedded_order), 0.0, atol=1e-10
    )


@pytest.mark.parametrize("make", ADDITIVE)
def test_additive_table_consistency(make):
    """Both tables are consistent and share their abscissae."""
    tab = make()
    E, I = tab.explicit, tab.implicit
    assert np.isclose(E.b.sum(), 1.0)
    assert np.isclose(I.b.sum(), 1.0)
    assert np.allclose(E.A.sum(axis=1), I.A.sum(axis=1), atol=1e-8)
    assert E.is_explicit
    assert E.s == I.s


@pytest.mark.parametrize("make", ADDITIVE)
def test_additive_coupling_conditions(make):
    """Second-order coupling: b̂·c = b·c = 1/2."""
    tab = make()
    if tab.order < 2:
        pytest.skip("first-order pair")
    E, I = tab.explicit, tab.implicit
    assert np.isclose(E.b @ E.c, 0.5, atol=1e-8)
    assert np.isclose(I.b @ I.c, 0.5, atol=1e-8)
    assert np.isclose(E.b @ I.c, 0.5, atol=1e-8)
    assert np.isclose(I.b @ E.c, 0.5, atol=1e-8)


def test_ars343_explicit_first_column():
    """Third explicit row is consistent with c_3 from the implicit table."""
    tab = imex.ars343()
    assert np.isclose(tab.explicit.A[2, 0], 0.3212788860)
    assert np.isclose(tab.explicit.c[2], tab.implicit.c[2], atol=1e-8)


@pytest.mark.parametrize("make", [imex.kc43, imex.kc54])
def test_kennedy_carpenter_interpolant_reproduces_weights(make):
    """At θ = 1 the dense-output weights equal b."""
    tab = make()
    w = tab.interpolant.explicit.weights(1.0)
    assert np.allclose(w, tab.explicit.b, atol=1e-10)
