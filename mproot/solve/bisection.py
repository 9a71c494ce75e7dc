"""
Bisection bracketing algorithm.
"""
from __future__ import annotations

from mproot.arith import Arithmetic
from mproot.function import Function
from mproot.solve.strategy import (BracketingStrategy, BracketState,
                                   collapse, evaluate_endpoints,
                                   opposite_sign)


# ======================================================================

class Bisection(BracketingStrategy):
    r"""
    Bisection method.  Each iteration evaluates the function at the
    midpoint of the bracket and keeps the half over which the function
    changes sign, so the width of the bracket is halved every step until
    an exact zero is found.

    The root estimate is the midpoint of the current bracket.
    """
    name = 'bisection'

    def set(self, func: Function, state: BracketState, arith: Arithmetic):
        state.scratch = evaluate_endpoints(func, state, arith)

    def iterate(self, func: Function, state: BracketState,
                arith: Arithmetic):
        s = state.scratch

        # A zero at either end finishes the search.
        if s.f_lower == 0:
            state.root = state.upper = state.lower
            return
        if s.f_upper == 0:
            state.root = state.lower = state.upper
            return

        x_bisect = arith.midpoint(state.lower, state.upper)
        f_bisect = func.f_finite(x_bisect, arith)
        if f_bisect == 0:
            collapse(state, x_bisect)
            return

        # Discard the half of the interval which doesn't contain the root.
        if opposite_sign(s.f_lower, f_bisect):
            state.root = arith.midpoint(state.lower, x_bisect)
            state.upper, s.f_upper = x_bisect, f_bisect
        else:
            state.root = arith.midpoint(x_bisect, state.upper)
            state.lower, s.f_lower = x_bisect, f_bisect
