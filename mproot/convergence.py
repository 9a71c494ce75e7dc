"""
=======================================
Convergence (:mod:`mproot.convergence`)
=======================================

.. currentmodule:: mproot.convergence

Stopping criteria for use between solver iterations.  The solvers never
decide for themselves when to stop, so the caller combines these tests
as required, e.g.::

    while interval_test(s.lower, s.upper, 0, 1e-20) == Status.CONTINUE:
        s.iterate()

All tests validate their tolerances before anything else and raise
`InvalidInputError` if either is negative.  Unless an `Arithmetic` is
given, the operands are compared at their own precision.

.. autosummary::
    :toctree:

    Status
    interval_test
    delta_test
    residual_test
"""
from __future__ import annotations

import enum

from mproot.arith import Arithmetic, operand_arithmetic
from mproot.exception import ErrorKind, InvalidInputError


# ======================================================================

class Status(enum.IntEnum):
    """Result of a convergence test."""
    CONVERGED = 0
    CONTINUE = 1


# ----------------------------------------------------------------------

def _check_tolerances(epsabs, epsrel):
    if epsrel < 0:
        raise InvalidInputError(
            flag=ErrorKind.RELATIVE_TOLERANCE_IS_NEGATIVE,
            details=f"epsrel = {epsrel}")
    if epsabs < 0:
        raise InvalidInputError(
            flag=ErrorKind.ABSOLUTE_TOLERANCE_IS_NEGATIVE,
            details=f"epsabs = {epsabs}")


def _status(converged: bool) -> Status:
    return Status.CONVERGED if converged else Status.CONTINUE


# ======================================================================

def interval_test(lower, upper, epsabs, epsrel,
                  arith: Arithmetic = None) -> Status:
    r"""
    Test a bracket for convergence.  The bracket ``[lower, upper]`` has
    converged when

    .. math:: |upper - lower| < \epsilon_{abs} + \epsilon_{rel} \min(|lower|, |upper|)

    where the minimum is replaced by zero if the bracket contains the
    origin (i.e. the ends are not strictly of the same sign).  With
    ``epsabs = 0`` this gives a purely relative test wherever the root
    is not zero.

    Parameters
    ----------
    lower, upper :
        Current bracket.
    epsabs, epsrel :
        Absolute and relative tolerances (>= 0).
    arith : Arithmetic, optional
        Arithmetic used to convert the arguments.  If omitted, the
        precision is taken from the operands so that `mpmath` values are
        never rounded (see `operand_arithmetic`).

    Returns
    -------
    Status

    Raises
    ------
    InvalidInputError
        If a tolerance is negative or ``lower > upper``.
    """
    ar = operand_arithmetic(arith, lower, upper, epsabs, epsrel)
    epsabs, epsrel = ar.convert(epsabs), ar.convert(epsrel)
    _check_tolerances(epsabs, epsrel)
    lower, upper = ar.convert(lower), ar.convert(upper)

    if lower > upper:
        raise InvalidInputError(
            flag=ErrorKind.LOWER_BOUND_LARGER_THAN_UPPER_BOUND,
            details=f"lower = {lower}, upper = {upper}")

    if (lower > 0 and upper > 0) or (lower < 0 and upper < 0):
        min_abs = min(abs(lower), abs(upper))
    else:
        min_abs = ar.convert(0)

    tolerance = epsabs + epsrel * min_abs
    return _status(abs(upper - lower) < tolerance)


def delta_test(x1, x0, epsabs, epsrel, arith: Arithmetic = None) -> Status:
    r"""
    Test successive estimates `x0`, `x1` for convergence.  Converged if
    they are identical, otherwise when

    .. math:: |x_1 - x_0| < \epsilon_{abs} + \epsilon_{rel} |x_1|

    Raises
    ------
    InvalidInputError
        If a tolerance is negative.
    """
    ar = operand_arithmetic(arith, x1, x0, epsabs, epsrel)
    epsabs, epsrel = ar.convert(epsabs), ar.convert(epsrel)
    _check_tolerances(epsabs, epsrel)
    x1, x0 = ar.convert(x1), ar.convert(x0)
    if x1 == x0:
        return Status.CONVERGED

    tolerance = epsabs + epsrel * abs(x1)
    return _status(abs(x1 - x0) < tolerance)


def residual_test(f, epsabs, arith: Arithmetic = None) -> Status:
    """
    Converged if the residual satisfies ``|f| < epsabs``.

    Raises
    ------
    InvalidInputError
        If `epsabs` is negative.
    """
    ar = operand_arithmetic(arith, f, epsabs)
    epsabs = ar.convert(epsabs)
    if epsabs < 0:
        raise InvalidInputError(
            flag=ErrorKind.ABSOLUTE_TOLERANCE_IS_NEGATIVE,
            details=f"epsabs = {epsabs}")
    return _status(abs(ar.convert(f)) < epsabs)
