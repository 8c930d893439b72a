"""Reference right-hand sides."""

from rkimex.problems.orbit import ArenstorfOrbit
from rkimex.problems.decay import DecayChain
from rkimex.problems.burgers import BurgersMOL
from rkimex.problems.prothero_robinson import ProtheroRobinson

__all__ = [
    "ArenstorfOrbit",
    "DecayChain",
    "BurgersMOL",
    "ProtheroRobinson",
]
