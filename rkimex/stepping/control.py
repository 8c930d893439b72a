"""Embedded error norm and step-size control."""

import logging
from typing import Optional
import numpy as np
from numpy.typing import NDArray

from rkimex.core.config import ControllerKind, ErrorNorm, StepControlConfig
from rkimex.core.rhs import RHS

logger = logging.getLogger(__name__)

_EPS = np.finfo(float).eps


def error_norm(
    y0: NDArray,
    y1: NDArray,
    y1_embedded: NDArray,
    rtol: float,
    atol,
    norm: ErrorNorm = ErrorNorm.RMS,
) -> float:
    """
    Scaled norm of y1 - ŷ1.

    Component i is divided by atol_i + rtol·max(|y0_i|, |y1_i|). Returns inf
    when the result is not finite.
    """
    scale = atol + rtol * np.maximum(np.abs(y0), np.abs(y1))
    ratio = (y1 - y1_embedded) / scale
    if norm is ErrorNorm.MAX:
        v = float(np.max(np.abs(ratio)))
    else:
        v = float(np.sqrt(np.mean(ratio * ratio)))
    if not np.isfinite(v):
        return float("inf")
    return v


def step_size_factor(
    err: float,
    error_order: int,
    cfg: StepControlConfig,
    accepted: bool,
    err_prev: Optional[float] = None,
    h_ratio: Optional[float] = None,
) -> float:
    """
    Ratio h_new / h from the current error norm.

    Elementary controller: safety·err^(-1/q), clipped to [fac_min, fac_max]
    with q the local order of the error estimate. With beta > 0 accepted
    steps use the PI form safety·err^(-(1/q - 0.75·beta))·err_prev^beta.

    ControllerKind.PREDICTIVE replaces the PI form on accepted steps by
    Gustafsson's predictive controller
    safety·(h/h_prev)·(err_prev/err²)^(1/q), taking the smaller of it and
    the elementary factor. Rejected steps never grow: the factor is capped
    at 1.

    Args:
        err: Current error norm
        error_order: Local order q of the error estimate
        cfg: Controller settings
        accepted: Whether the current step was accepted
        err_prev: Error norm of the previous accepted step
        h_ratio: h / h_prev, with h_prev the previous accepted step size

    Returns:
        Step-size ratio
    """
    if not np.isfinite(err):
        return cfg.fac_min

    fac_max = cfg.fac_max if accepted else 1.0
    if err <= 0.0:
        return fac_max

    alpha = 1.0 / error_order
    fac = cfg.safety * err ** (-alpha)
    if accepted and err_prev is not None:
        err_prev = max(err_prev, 1e-4)
        if cfg.kind is ControllerKind.PREDICTIVE:
            if h_ratio is not None:
                fac = min(fac, cfg.safety * h_ratio * (err_prev / err / err) ** alpha)
        elif cfg.beta > 0.0:
            alpha -= 0.75 * cfg.beta
            fac = cfg.safety * err ** (-alpha) * err_prev ** cfg.beta

    return min(fac_max, max(cfg.fac_min, fac))


def initial_step_size(
    rhs: RHS,
    t0: float,
    y0: NDArray,
    tf: float,
    order: int,
    rtol: float,
    atol,
    safety: float = 0.8,
    f0: Optional[NDArray] = None,
) -> float:
    """
    Starting step from the size of f(t0, y0).

    h = safety·rtol^(1/order) / ||f0 / max(|y0|, atol/rtol)||_rms, limited
    to the integration interval and floored at 16 eps.
    """
    if f0 is None:
        f0 = rhs.f(t0, y0)
    span = abs(tf - t0)
    scale = np.maximum(np.abs(y0), np.asarray(atol) / rtol)
    ratio = np.abs(f0 / scale)
    h_min = 16.0 * _EPS * max(1.0, abs(t0))

    # rms relative to the largest entry so squaring cannot overflow
    peak = float(np.max(ratio))
    if peak == 0.0:
        h = span
    elif not np.isfinite(peak):
        h = h_min
    else:
        d = peak * float(np.sqrt(np.mean((ratio / peak) ** 2)))
        h = min(span, safety * rtol ** (1.0 / order) / d)

    h = max(h, h_min)
    logger.debug("Selected initial step %.3e", h)
    return h
