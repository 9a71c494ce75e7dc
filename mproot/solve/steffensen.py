"""
Steffensen polishing algorithm (Newton with Aitken acceleration).
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
class _SteffensenScratch:
    f: Any
    df: Any
    x: Any
    x_1: Any
    x_2: Any
    count: int = 1


# ----------------------------------------------------------------------

class Steffensen(PolishingStrategy):
    r"""
    Newton's method accelerated by Aitken's :math:`\delta^2` process.

    The underlying Newton sequence :math:`x_i` is kept internally.  For
    the first two iterations the Newton iterate is reported unchanged.
    From then on the reported root is the accelerated value

    .. math:: x_{i-1} - \frac{(x_i - x_{i-1})^2}{x_{i+1} - 2 x_i + x_{i-1}}

    which falls back to the Newton iterate :math:`x_{i+1}` when the
    denominator is exactly zero.
    """
    name = 'steffensen'

    def set(self, func: FunctionFdF, state: PolishState, arith: Arithmetic):
        f = func.f(state.root, arith)
        df = func.df(state.root, arith)
        require_finite(arith, f, df,
                       flag=ErrorKind.FUNCTION_VALUE_NOT_FINITE)
        zero = arith.convert(0)
        state.scratch = _SteffensenScratch(f=f, df=df, x=state.root,
                                           x_1=zero, x_2=zero)

    def iterate(self, func: FunctionFdF, state: PolishState,
                arith: Arithmetic):
        s = state.scratch
        if s.df == 0:
            raise SolverError(flag=ErrorKind.DERIVATIVE_IS_ZERO,
                              details=f"x = {s.x}")

        x, x_1 = s.x, s.x_1
        x_new = x - s.f / s.df
        f_new, df_new = func.fdf(x_new, arith)

        s.x_2, s.x_1, s.x = x_1, x, x_new
        s.f, s.df = f_new, df_new
        require_finite(arith, f_new,
                       flag=ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

        if s.count < 3:
            state.root = x_new
            s.count += 1
        else:
            u = x - x_1
            v = x_new - 2 * x + x_1
            if v == 0:
                state.root = x_new  # Avoid division by zero.
            else:
                state.root = x_1 - u * u / v

        require_finite(arith, df_new,
                       flag=ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

    def at_exact_root(self, state: PolishState) -> bool:
        # Only the Newton iterate has a known function value.
        s = state.scratch
        return s.f == 0 and state.root == s.x
