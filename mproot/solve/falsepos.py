"""
False position bracketing algorithm.
"""
from __future__ import annotations

from mproot.arith import Arithmetic
from mproot.function import Function
from mproot.solve.strategy import (BracketingStrategy, BracketState,
                                   collapse, evaluate_endpoints,
                                   opposite_sign)


# ======================================================================

class FalsePosition(BracketingStrategy):
    r"""
    False position (*regula falsi*) method with a bisection safeguard.

    The bracket is split where the straight line through
    :math:`(x_{lo}, f_{lo})` and :math:`(x_{hi}, f_{hi})` crosses zero:

    .. math:: x_{lin} = x_{hi} - f_{hi} \frac{x_{lo} - x_{hi}}{f_{lo} - f_{hi}}

    Plain false position can converge very slowly when one end of the
    bracket never moves.  If the side retained after the linear step is
    not less than half of the previous width, the new bracket is also
    bisected.  The root estimate is then moved to the middle of the
    remaining bracket only if the bisection left it outside.
    """
    name = 'falsepos'

    def set(self, func: Function, state: BracketState, arith: Arithmetic):
        state.scratch = evaluate_endpoints(func, state, arith)

    def iterate(self, func: Function, state: BracketState,
                arith: Arithmetic):
        s = state.scratch
        if s.f_lower == 0:
            state.root = state.upper = state.lower
            return
        if s.f_upper == 0:
            state.root = state.lower = state.upper
            return

        x_left, x_right = state.lower, state.upper

        # -- Linear Step -----------------------------------------------

        x_linear = x_right - s.f_upper * ((x_left - x_right) /
                                          (s.f_lower - s.f_upper))
        f_linear = func.f_finite(x_linear, arith)
        if f_linear == 0:
            collapse(state, x_linear)
            return

        state.root = x_linear
        if opposite_sign(s.f_lower, f_linear):
            state.upper, s.f_upper = x_linear, f_linear
            w = x_linear - x_left
        else:
            state.lower, s.f_lower = x_linear, f_linear
            w = x_right - x_linear

        if w < (x_right - x_left) * 0.5:
            return

        # -- Bisection Step --------------------------------------------

        x_bisect = arith.midpoint(state.lower, state.upper)
        f_bisect = func.f_finite(x_bisect, arith)
        if opposite_sign(s.f_lower, f_bisect):
            state.upper, s.f_upper = x_bisect, f_bisect
            if state.root > x_bisect:
                state.root = arith.midpoint(state.lower, x_bisect)
        else:
            state.lower, s.f_lower = x_bisect, f_bisect
            if state.root < x_bisect:
                state.root = arith.midpoint(x_bisect, state.upper)
