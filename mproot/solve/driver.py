"""
Complete solution loops for the common case of iterating a solver until
a convergence test is satisfied.
"""
from __future__ import annotations

import warnings
from collections.abc import Callable

import mpmath

from mproot.arith import Arithmetic
from mproot.convergence import Status, delta_test, interval_test, \
    residual_test
from mproot.exception import ErrorKind, SolverError
from mproot.solve.solver import BracketingSolver, PolishingSolver


# ======================================================================

def solve_bracketing(func: Callable, x_a, x_b, *, method: str = 'brent',
                     args: tuple = (), epsabs=1e-6, epsrel=0.0,
                     maxits: int = 100, prec: int = None,
                     arith: Arithmetic = None, disp: bool = True,
                     verbose: bool = False):
    """
    Find a root of `func` within the bracket given by `x_a` and `x_b`
    using a `BracketingSolver`.  Iteration stops when the bracket
    satisfies `interval_test`.

    Parameters
    ----------
    func : Callable[[x, ...], y]
        Function whose root is sought.
    x_a, x_b :
        Ends of the initial bracket, in either order.  The function must
        change sign between them (or be zero at one of them).
    method : str, default = 'brent'
        One of ``'bisection'``, ``'falsepos'`` or ``'brent'``.
    args : tuple, default = ()
        Extra arguments passed to `func`.
    epsabs, epsrel : default = 1e-6, 0.0
        Absolute and relative tolerance on the width of the bracket.
    maxits : int, default = 100
        Maximum number of iterations.
    prec : int, optional
        Working precision in bits when `arith` is not given.
    arith : Arithmetic, optional
        Arithmetic to use.  Defaults to `MPArithmetic` at `prec` bits.
    disp : bool, default = True
        If ``True`` raise `SolverError` when `maxits` is reached,
        otherwise issue a `RuntimeWarning` and return the current
        estimate.
    verbose : bool, default = False
        If ``True``, print the bracket after each iteration.

    Returns
    -------
    root :
        Root estimate, as a value of the solver's arithmetic.

    Raises
    ------
    SolverError
        If the solver fails or (with ``disp=True``) does not converge.
        In the latter case ``flag = ErrorKind.MAXIMUM_ITERATIONS`` and
        the exception also carries `root`, `lower` and `upper`.

    Examples
    --------
    >>> x = solve_bracketing(lambda x: x ** 2 - 2, 0, 2, prec=200,
    ...                      epsabs=1e-50)
    >>> abs(x ** 2 - 2) < 1e-49
    True
    """
    def verbose_print(info):
        if verbose:
            print(info)

    with BracketingSolver(method, prec=prec, arith=arith) as solver:
        ar = solver.arith
        if ar.convert(x_a) > ar.convert(x_b):
            x_a, x_b = x_b, x_a

        solver.configure(func, x_a, x_b, args)
        verbose_print(f"Bracketing Solver - {solver.name} - {ar.prec} "
                      f"bits:")

        for it in range(1, maxits + 1):
            solver.iterate()
            lower, upper, root = solver.lower, solver.upper, solver.root
            verbose_print(f"... Iteration {it}: [{_fmt(lower)}, "
                          f"{_fmt(upper)}], root = {_fmt(root)}, "
                          f"width = {_fmt(upper - lower, 5)}")

            if interval_test(lower, upper, epsabs, epsrel,
                             arith=ar) == Status.CONVERGED:
                verbose_print(f"... Converged.")
                return root

        _not_converged(maxits, disp, solver.root, lower=solver.lower,
                       upper=solver.upper,
                       function_calls=solver.function_calls)
        return solver.root


# ----------------------------------------------------------------------

def solve_polishing(func: Callable, x0, fprime: Callable, *,
                    method: str = 'newton', fdf: Callable = None,
                    args: tuple = (), epsabs=1e-6, epsrel=0.0,
                    ftol=None, maxits: int = 50, prec: int = None,
                    arith: Arithmetic = None, disp: bool = True,
                    verbose: bool = False):
    """
    Refine the estimate `x0` of a root of `func` using a
    `PolishingSolver`.  Iteration stops when successive estimates
    satisfy `delta_test` and, if `ftol` is given, the function value at
    the estimate satisfies `residual_test`.  It also stops as soon as
    the function is found to be exactly zero at the estimate.

    Parameters
    ----------
    func : Callable[[x, ...], y]
        Function whose root is sought.
    x0 :
        Initial estimate.
    fprime : Callable[[x, ...], dy]
        First derivative of `func`.
    method : str, default = 'newton'
        One of ``'newton'``, ``'secant'`` or ``'steffensen'``.
    fdf : Callable[[x, ...], (y, dy)], optional
        Function and derivative computed together.
    args : tuple, default = ()
        Extra arguments passed to `func`, `fprime` and `fdf`.
    epsabs, epsrel : default = 1e-6, 0.0
        Absolute and relative tolerance on the change in the estimate.
    ftol : optional
        When present we also require ``|func(root)| < ftol`` before
        stopping.
    maxits : int, default = 50
        Maximum number of iterations.
    prec, arith, disp, verbose :
        As for `solve_bracketing`.

    Returns
    -------
    root :
        Root estimate, as a value of the solver's arithmetic.

    Raises
    ------
    SolverError
        If the solver fails (e.g. a zero derivative) or (with
        ``disp=True``) does not converge within `maxits` iterations.
    """
    def verbose_print(info):
        if verbose:
            print(info)

    with PolishingSolver(method, prec=prec, arith=arith) as solver:
        ar = solver.arith
        solver.configure(func, x0, fprime=fprime, fdf=fdf, args=args)
        verbose_print(f"Polishing Solver - {solver.name} - {ar.prec} bits:")

        x_prev = solver.root
        if solver.exact_root:
            verbose_print(f"... Converged (exact root).")
            return x_prev

        for it in range(1, maxits + 1):
            solver.iterate()
            x = solver.root
            verbose_print(f"... Iteration {it}: root = {_fmt(x)}, "
                          f"step = {_fmt(x - x_prev, 5)}")

            if solver.exact_root:
                verbose_print(f"... Converged (exact root).")
                return x

            converged = delta_test(x, x_prev, epsabs, epsrel,
                                   arith=ar) == Status.CONVERGED
            if converged and ftol is not None:
                fx = ar.convert(func(x, *args))
                verbose_print(f"... |f(root)| = {_fmt(abs(fx), 5)}")
                converged = residual_test(fx, ftol,
                                          arith=ar) == Status.CONVERGED

            if converged:
                verbose_print(f"... Converged.")
                return x

            x_prev = x

        _not_converged(maxits, disp, solver.root,
                       function_calls=solver.function_calls)
        return solver.root


# ----------------------------------------------------------------------

def _fmt(x, digits: int = 12) -> str:
    return mpmath.nstr(x, digits)


def _not_converged(maxits: int, disp: bool, root, **kwargs):
    msg = f"Failed to converge after {maxits} iterations, value is {root}."
    if disp:
        raise SolverError(msg, flag=ErrorKind.MAXIMUM_ITERATIONS,
                          root=root, **kwargs)
    warnings.warn(msg, RuntimeWarning)
