"""
=====================================
Solvers (:mod:`mproot.solve`)
=====================================

.. currentmodule:: mproot.solve

Iterative solvers for a root of a scalar function.  A solver is bound to
one algorithm when it is created, configured with a function and a
starting bracket or estimate, and then iterated by the caller until a
test from :mod:`mproot.convergence` is satisfied.  Solvers own their
state and release it when used as a context manager.

Solvers
-------

.. autosummary::
    :toctree:

    BracketingSolver
    PolishingSolver

Functions
---------

.. autosummary::
    :toctree:

    solve_bracketing
    solve_polishing

Algorithms
----------

.. autosummary::
    :toctree:

    Bisection
    FalsePosition
    Brent
    Newton
    Secant
    Steffensen
"""

from .bisection import Bisection
from .brent import Brent
from .driver import solve_bracketing, solve_polishing
from .falsepos import FalsePosition
from .newton import Newton
from .secant import Secant
from .solver import (BracketingSolver, PolishingSolver, BRACKETING_METHODS,
                     POLISHING_METHODS)
from .steffensen import Steffensen
