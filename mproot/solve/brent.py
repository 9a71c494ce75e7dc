"""
Brent-Dekker bracketing algorithm.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mproot.arith import Arithmetic
from mproot.function import Function
from mproot.solve.strategy import (BracketingStrategy, BracketState,
                                   collapse, evaluate_endpoints, same_sign)


# ======================================================================

@dataclass
class _BrentScratch:
    a: Any
    b: Any
    c: Any
    d: Any
    e: Any
    fa: Any
    fb: Any
    fc: Any


# ----------------------------------------------------------------------

class Brent(BracketingStrategy):
    r"""
    Brent-Dekker method.  Combines bisection with secant and inverse
    quadratic interpolation steps, falling back to bisection whenever the
    interpolated step would leave the bracket or would not reduce it fast
    enough.

    Three points are tracked: `b` is the current best estimate, `a` the
    previous value of `b` and `c` the contrapoint, so that ``f(b)`` and
    ``f(c)`` always have opposite signs.  The step tolerance is
    :math:`\frac{1}{2} \epsilon |b|` where :math:`\epsilon` is the
    machine epsilon of the working precision.

    Notes
    -----
    Reference: R. P. Brent, "An algorithm with guaranteed convergence for
    finding a zero of a function", *Computer Journal* 14 (1971) 422-425.
    """
    name = 'brent'

    def set(self, func: Function, state: BracketState, arith: Arithmetic):
        ends = evaluate_endpoints(func, state, arith)
        width = state.upper - state.lower
        state.scratch = _BrentScratch(
            a=state.lower, b=state.upper, c=state.upper, d=width, e=width,
            fa=ends.f_lower, fb=ends.f_upper, fc=ends.f_upper)

    def iterate(self, func: Function, state: BracketState,
                arith: Arithmetic):
        s = state.scratch
        ac_equal = False

        if same_sign(s.fb, s.fc):
            ac_equal = True
            s.c, s.fc = s.a, s.fa
            s.d = s.e = s.b - s.a

        if abs(s.fc) < abs(s.fb):
            ac_equal = True
            s.a, s.b, s.c = s.b, s.c, s.b
            s.fa, s.fb, s.fc = s.fb, s.fc, s.fb

        if s.fb == 0:
            collapse(state, s.b)
            return

        tol = arith.eps * abs(s.b) * 0.5
        m = (s.c - s.b) * 0.5

        if abs(m) <= tol:
            state.root = s.b
            state.lower, state.upper = sorted((s.b, s.c))
            return

        if abs(s.e) < tol or abs(s.fa) <= abs(s.fb):
            # Bisection.
            s.d = s.e = m
        else:
            # Interpolation: secant if only two distinct points are
            # available, otherwise inverse quadratic.
            ss = s.fb / s.fa
            if ac_equal:
                p = m * ss * 2
                q = 1 - ss
            else:
                q = s.fa / s.fc
                r = s.fb / s.fc
                p = ss * (m * q * (q - r) * 2 - (s.b - s.a) * (r - 1))
                q = (q - 1) * (r - 1) * (ss - 1)

            if p > 0:
                q = -q
            else:
                p = -p

            if p * 2 < min(m * q * 3 - abs(tol * q), abs(s.e * q)):
                s.e = s.d
                s.d = p / q
            else:
                # Interpolation failed.
                s.d = s.e = m

        s.a, s.fa = s.b, s.fb
        if abs(s.d) > tol:
            s.b = s.b + s.d
        else:
            s.b = s.b + (tol if m > 0 else -tol)

        s.fb = func.f_finite(s.b, arith)

        # Update the best estimate of the root and the bounds.
        state.root = s.b
        if same_sign(s.fb, s.fc):
            s.c = s.a
        state.lower, state.upper = sorted((s.b, s.c))
