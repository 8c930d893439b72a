"""Literature tableaux."""

from rkimex.methods import runge_kutta, imex

__all__ = ["runge_kutta", "imex"]
