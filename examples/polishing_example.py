#!/usr/bin/env python3

# Examples of root polishing: the secant and Steffensen methods applied
# to sin(x) starting from x = -1, printing each estimate.  The function
# is evaluated using the solver's own mpmath context so that it is
# computed at the solver's precision.

from mproot import MPArithmetic
from mproot.solve import solve_polishing


def f(x, ctx):
    return ctx.sin(x)


def df(x, ctx):
    return ctx.cos(x)


def fdf(x, ctx):
    return ctx.sin(x), ctx.cos(x)


ar = MPArithmetic(prec=128)
for method in ('secant', 'steffensen'):
    root = solve_polishing(f, -1.0, df, fdf=fdf, args=(ar.ctx,),
                           method=method, epsabs=1e-30, ftol=1e-30,
                           arith=ar, verbose=True)
    print(f"Result = {root}\n")
