"""
===================================
Functions (:mod:`mproot.function`)
===================================

.. currentmodule:: mproot.function

Wrappers binding the user's math function (and derivative) to the
extra arguments it needs.  Results are converted to the solver's
arithmetic and each evaluation is counted.
"""
from __future__ import annotations

from collections.abc import Callable

from mproot.arith import Arithmetic
from mproot.exception import ErrorKind, SolverError


# ======================================================================

class Function:
    """
    Scalar function ``f(x, *args)`` whose root is sought.

    Parameters
    ----------
    f : Callable[[x, ...], y]
        The function.  It receives `x` as a value of the solver's
        arithmetic and may return any number convertible by it.
        Exceptions raised by `f` propagate to the caller unchanged.
    args : tuple, default = ()
        Extra positional arguments passed to `f` after `x`.
    """

    def __init__(self, f: Callable, args: tuple = ()):
        if not callable(f):
            raise TypeError("Function 'f' must be callable.")
        self._f, self.args = f, tuple(args)
        self.calls = 0

    def f(self, x, arith: Arithmetic):
        """Evaluate ``f(x)``, converted to `arith`."""
        self.calls += 1
        return arith.convert(self._f(x, *self.args))

    def f_finite(self, x, arith: Arithmetic):
        """
        Evaluate ``f(x)`` as for `f`, additionally requiring a finite
        result.

        Raises
        ------
        SolverError
            ``ErrorKind.FUNCTION_VALUE_NOT_FINITE`` if the result is
            infinite or NaN.
        """
        y = self.f(x, arith)
        if not arith.isfinite(y):
            raise SolverError(flag=ErrorKind.FUNCTION_VALUE_NOT_FINITE,
                              details=f"f({x}) = {y}")
        return y


# ----------------------------------------------------------------------

class FunctionFdF(Function):
    """
    Scalar function together with its first derivative, as required by
    the polishing solvers.

    Parameters
    ----------
    f : Callable[[x, ...], y]
        The function.
    df : Callable[[x, ...], dy]
        First derivative of `f`.
    fdf : Callable[[x, ...], (y, dy)], optional
        Computes both the function and its derivative in a single call,
        where this is cheaper than two separate calls.  It must use the
        same formulae as `f` and `df`.  If omitted, `f` and `df` are
        called in turn.
    args : tuple, default = ()
        Extra positional arguments passed to all of the above.
    """

    def __init__(self, f: Callable, df: Callable, fdf: Callable = None,
                 args: tuple = ()):
        super().__init__(f, args)
        if not callable(df):
            raise TypeError("Derivative 'df' must be callable.")
        if fdf is not None and not callable(fdf):
            raise TypeError("Combined function 'fdf' must be callable.")
        self._df, self._fdf = df, fdf

    def df(self, x, arith: Arithmetic):
        """Evaluate ``df(x)``, converted to `arith`."""
        self.calls += 1
        return arith.convert(self._df(x, *self.args))

    def fdf(self, x, arith: Arithmetic) -> tuple:
        """Evaluate ``(f(x), df(x))``, converted to `arith`."""
        if self._fdf is None:
            return self.f(x, arith), self.df(x, arith)

        self.calls += 1
        y, dy = self._fdf(x, *self.args)
        return arith.convert(y), arith.convert(dy)
