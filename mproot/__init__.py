"""
.. This module acts as the top-level API documentation.

.. module: mproot

One dimensional root finding at arbitrary precision.  A function of a
single real variable is solved either by shrinking a bracket known to
contain a root (bisection, false position, Brent) or by polishing a
single estimate using the derivative (Newton, secant, Steffensen).

.. autosummary::
    :toctree: generated/

    arith
    compare
    convergence
    exception
    function
    solve
"""

__version__ = "0.1.0"

from .arith import (Arithmetic, DoubleArithmetic, MPArithmetic, Rounding,
                    DEFAULT_PREC)
from .compare import (scaled_compare, absolute_difference_equal,
                      relative_difference_equal)
from .convergence import Status, interval_test, delta_test, residual_test
from .exception import (ErrorKind, ErrorDescriptor, SolverError,
                        InvalidInputError, InvalidStateError, strerror)
from .solve import (BracketingSolver, PolishingSolver, solve_bracketing,
                    solve_polishing)
