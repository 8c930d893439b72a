"""Standard Runge-Kutta method tableaux."""

import numpy as np
from rkimex.core.tableau import ButcherTableau
from rkimex.core.interpolant import dormand_prince_interpolant


def explicit_euler() -> ButcherTableau:
    """Forward Euler method (1st order)."""
    A = np.array([[0.0]])
    b = np.array([1.0])
    return ButcherTableau(A=A, b=b, order=1, name="Forward Euler")


def midpoint() -> ButcherTableau:
    """Runge's explicit midpoint method (2nd order)."""
    A = np.array([
        [0.0, 0.0],
        [0.5, 0.0],
    ])
    b = np.array([0.0, 1.0])
    return ButcherTableau(A=A, b=b, order=2, name="Runge, order 2")


def heun() -> ButcherTableau:
    """Heun's method (2nd order)."""
    A = np.array([
        [0.0, 0.0],
        [1.0, 0.0],
    ])
    b = np.array([0.5, 0.5])
    return ButcherTableau(A=A, b=b, order=2, name="Heun, order 2")


def heun3() -> ButcherTableau:
    """Heun's third-order method."""
    A = np.array([
        [0.0, 0.0, 0.0],
        [1.0/3.0, 0.0, 0.0],
        [0.0, 2.0/3.0, 0.0],
    ])
    b = np.array([0.25, 0.0, 0.75])
    return ButcherTableau(A=A, b=b, order=3, name="Heun, order 3")


def ssp33() -> ButcherTableau:
    """Shu-Osher strong-stability-preserving method (3 stages, 3rd order)."""
    A = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.25, 0.25, 0.0],
    ])
    b = np.array([1.0/6.0, 1.0/6.0, 2.0/3.0])
    return ButcherTableau(A=A, b=b, order=3, name="SSP, order 3")


def rk4() -> ButcherTableau:
    """Classic 4th-order Runge-Kutta method."""
    A = np.array([
        [0.0, 0.0, 0.0, 0.0],
        [0.5, 0.0, 0.0, 0.0],
        [0.0, 0.5, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
    ])
    b = np.array([1.0/6.0, 1.0/3.0, 1.0/3.0, 1.0/6.0])
    return ButcherTableau(A=A, b=b, order=4, name="Classic RK4")


def three_eighths() -> ButcherTableau:
    """Kutta's 3/8 rule (4th order)."""
    A = np.array([
        [0.0, 0.0, 0.0, 0.0],
        [1.0/3.0, 0.0, 0.0, 0.0],
        [-1.0/3.0, 1.0, 0.0, 0.0],
        [1.0, -1.0, 1.0, 0.0],
    ])
    b = np.array([1.0/8.0, 3.0/8.0, 3.0/8.0, 1.0/8.0])
    return ButcherTableau(A=A, b=b, order=4, name="Three-eighths rule")


def merson43() -> ButcherTableau:
    """Merson's method, order 4 with an embedded order-3 estimate."""
    A = np.array([
        [0.0, 0.0, 0.0, 0.0, 0.0],
        [1.0/3.0, 0.0, 0.0, 0.0, 0.0],
        [1.0/6.0, 1.0/6.0, 0.0, 0.0, 0.0],
        [1.0/8.0, 0.0, 3.0/8.0, 0.0, 0.0],
        [0.5, 0.0, -1.5, 2.0, 0.0],
    ])
    b = np.array([1.0/6.0, 0.0, 0.0, 2.0/3.0, 1.0/6.0])
    b_emb = np.array([0.1, 0.0, 0.3, 0.4, 0.2])
    return ButcherTableau(
        A=A, b=b, b_embedded=b_emb, order=4, embedded_order=3,
        name="Merson 4(3)",
    )


def zonneveld43() -> ButcherTableau:
    """Zonneveld's method, order 4 with an embedded order-3 estimate."""
    A = np.array([
        [0.0, 0.0, 0.0, 0.0, 0.0],
        [0.5, 0.0, 0.0, 0.0, 0.0],
        [0.0, 0.5, 0.0, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0, 0.0],
        [5.0/32.0, 7.0/32.0, 13.0/32.0, -1.0/32.0, 0.0],
    ])
    b = np.array([1.0/6.0, 1.0/3.0, 1.0/3.0, 1.0/6.0, 0.0])
    b_emb = np.array([-0.5, 7.0/3.0, 7.0/3.0, 13.0/6.0, -16.0/3.0])
    return ButcherTableau(
        A=A, b=b, b_embedded=b_emb, order=4, embedded_order=3,
        name="Zonneveld 4(3)",
    )


def fehlberg45() -> ButcherTableau:
    """Runge-Kutta-Fehlberg 4(5), propagating the 4th-order solution."""
    A = np.array([
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [1.0/4.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [3.0/32.0, 9.0/32.0, 0.0, 0.0, 0.0, 0.0],
        [1932.0/2197.0, -7200.0/2197.0, 7296.0/2197.0, 0.0, 0.0, 0.0],
        [439.0/216.0, -8.0, 3680.0/513.0, -845.0/4104.0, 0.0, 0.0],
        [-8.0/27.0, 2.0, -3544.0/2565.0, 1859.0/4104.0, -11.0/40.0, 0.0],
    ])
    b = np.array([25.0/216.0, 0.0, 1408.0/2565.0, 2197.0/4104.0, -1.0/5.0, 0.0])
    b_emb = np.array([
        16.0/135.0, 0.0, 6656.0/12825.0, 28561.0/56430.0, -9.0/50.0, 2.0/55.0,
    ])
    return ButcherTableau(
        A=A, b=b, b_embedded=b_emb, order=4, embedded_order=5,
        name="Fehlberg 4(5)",
    )


def dormand_prince54() -> ButcherTableau:
    """Dormand-Prince 5(4) pair (FSAL) with its 4th-order continuous extension."""
    A = np.array([
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [1.0/5.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [3.0/40.0, 9.0/40.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [44.0/45.0, -56.0/15.0, 32.0/9.0, 0.0, 0.0, 0.0, 0.0],
        [19372.0/6561.0, -25360.0/2187.0, 64448.0/6561.0, -212.0/729.0, 0.0, 0.0, 0.0],
        [9017.0/3168.0, -355.0/33.0, 46732.0/5247.0, 49.0/176.0, -5103.0/18656.0, 0.0, 0.0],
        [35.0/384.0, 0.0, 500.0/1113.0, 125.0/192.0, -2187.0/6784.0, 11.0/84.0, 0.0],
    ])
    b = np.array([
        35.0/384.0, 0.0, 500.0/1113.0, 125.0/192.0, -2187.0/6784.0, 11.0/84.0, 0.0,
    ])
    b_emb = np.array([
        5179.0/57600.0, 0.0, 7571.0/16695.0, 393.0/640.0,
        -92097.0/339200.0, 187.0/2100.0, 1.0/40.0,
    ])
    c = np.array([0.0, 1.0/5.0, 3.0/10.0, 4.0/5.0, 8.0/9.0, 1.0, 1.0])
    return ButcherTableau(
        A=A, b=b, c=c, b_embedded=b_emb, order=5, embedded_order=4, fsal=True,
        interpolant=dormand_prince_interpolant(), name="Dormand-Prince 5(4)",
    )


def implicit_euler() -> ButcherTableau:
    """Backward Euler method (1st order, L-stable)."""
    A = np.array([[1.0]])
    b = np.array([1.0])
    return ButcherTableau(A=A, b=b, order=1, name="Backward Euler")


def implicit_midpoint() -> ButcherTableau:
    """Implicit midpoint rule (2nd order, symplectic)."""
    A = np.array([[0.5]])
    b = np.array([1.0])
    return ButcherTableau(A=A, b=b, order=2, name="Implicit midpoint")


def sdirk2() -> ButcherTableau:
    """2-stage SDIRK method (2nd order, L-stable)."""
    gamma = (2.0 - np.sqrt(2.0)) / 2.0
    A = np.array([
        [gamma, 0.0],
        [1.0 - gamma, gamma],
    ])
    b = np.array([1.0 - gamma, gamma])
    return ButcherTableau(A=A, b=b, order=2, name="SDIRK2")
