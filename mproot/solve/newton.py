"""
Newton-Raphson polishing algorithm.
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
class _NewtonScratch:
    f: Any
    df: Any


# ----------------------------------------------------------------------

class Newton(PolishingStrategy):
    r"""
    Newton-Raphson method.  Each iteration takes the step

    .. math:: x_{i+1} = x_i - \frac{f(x_i)}{f'(x_i)}

    and evaluates the function and derivative at the new point with a
    single call of ``fdf``.  Convergence is quadratic near a simple root.
    """
    name = 'newton'

    def set(self, func: FunctionFdF, state: PolishState, arith: Arithmetic):
        f, df = func.fdf(state.root, arith)
        require_finite(arith, f, df,
                       flag=ErrorKind.FUNCTION_VALUE_NOT_FINITE)
        state.scratch = _NewtonScratch(f, df)

    def iterate(self, func: FunctionFdF, state: PolishState,
                arith: Arithmetic):
        s = state.scratch
        if s.df == 0:
            raise SolverError(flag=ErrorKind.DERIVATIVE_IS_ZERO,
                              details=f"x = {state.root}")

        state.root = state.root - s.f / s.df
        s.f, s.df = func.fdf(state.root, arith)
        require_finite(arith, s.f, s.df,
                       flag=ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

    def at_exact_root(self, state: PolishState) -> bool:
        return state.scratch.f == 0
