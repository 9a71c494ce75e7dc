"""
Secant polishing algorithm.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mproot.arith import Arithmetic
from mproot.exception import ErrorKind, SolverError
from mproot.function import FunctionFdF
from mproot.solve.strategy import (PolishingStrategy, PolishState,
                                   require_finite)


# ======================================================================

@dataclass
class _SecantScratch:
    f: Any
    slope: Any


# ----------------------------------------------------------------------

class Secant(PolishingStrategy):
    r"""
    Secant method.  The derivative is only evaluated at the initial
    guess; afterwards it is replaced by the slope of the line through the
    last two points:

    .. math::
        x_{i+1} = x_i - \frac{f(x_i)}{f'_{est}}, \quad
        f'_{est} = \frac{f(x_i) - f(x_{i-1})}{x_i - x_{i-1}}

    Each iteration therefore needs one function evaluation only.
    """
    name = 'secant'

    def set(self, func: FunctionFdF, state: PolishState, arith: Arithmetic):
        f, df = func.fdf(state.root, arith)
        require_finite(arith, f, df,
                       flag=ErrorKind.FUNCTION_VALUE_NOT_FINITE)
        state.scratch = _SecantScratch(f, df)

    def iterate(self, func: FunctionFdF, state: PolishState,
                arith: Arithmetic):
        s = state.scratch
        if s.slope == 0:
            raise SolverError(flag=ErrorKind.DERIVATIVE_IS_ZERO,
                              details=f"x = {state.root}")

        x_new = state.root - s.f / s.slope
        f_new = func.f(x_new, arith)

        # A zero step leaves the slope undefined.
        dx = x_new - state.root
        if dx == 0:
            raise SolverError(flag=ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID,
                              details=f"zero step at x = {x_new}")
        slope_new = (f_new - s.f) / dx

        state.root, s.f, s.slope = x_new, f_new, slope_new
        require_finite(arith, f_new, slope_new,
                       flag=ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

    def at_exact_root(self, state: PolishState) -> bool:
        return state.scratch.f == 0
