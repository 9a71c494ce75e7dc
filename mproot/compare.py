"""
==================================
Comparison (:mod:`mproot.compare`)
==================================

.. currentmodule:: mproot.compare

Approximate equality of two floating point values, with the tolerance
either scaled to the magnitude of the operands or given directly.

.. autosummary::
    :toctree:

    scaled_compare
    absolute_difference_equal
    relative_difference_equal
"""
from __future__ import annotations

from mproot.arith import Arithmetic, Rounding, operand_arithmetic


# ======================================================================

def scaled_compare(a, b, epsilon, arith: Arithmetic = None) -> int:
    r"""
    Compare `a` and `b` using a tolerance scaled to the binary exponent
    of the larger operand (Knuth's "essentially equal" test).

    With `e` the exponent of whichever of `a`, `b` has the larger
    magnitude, the tolerance is :math:`\delta = \epsilon 2^e` and the
    result is:

    - +1 if :math:`a - b > \delta`,
    - -1 if :math:`a - b < -\delta`,
    - 0 otherwise, i.e. `a` and `b` are equal to within :math:`\delta`.

    The difference ``a - b`` is rounded away from zero so that the
    test is never more lenient than exact arithmetic and
    ``scaled_compare(a, b, eps) == -scaled_compare(b, a, eps)``.

    Parameters
    ----------
    a, b :
        Values to compare.
    epsilon :
        Relative tolerance (normally non-negative).
    arith : Arithmetic, optional
        Arithmetic used to convert the arguments.  Defaults to
        `MPArithmetic` at the precision of the operands (see
        `operand_arithmetic`).

    Returns
    -------
    int
        -1, 0 or +1 as above.

    Raises
    ------
    ValueError
        If `a` or `b` is infinite or NaN.

    Examples
    --------
    >>> scaled_compare(1.0, 1.0 + 1e-12, 1e-9)
    0
    >>> scaled_compare(2.0, 1.0, 1e-9)
    1
    """
    ar = operand_arithmetic(arith, a, b, epsilon)
    a, b, epsilon = ar.convert(a), ar.convert(b), ar.convert(epsilon)
    if not (ar.isfinite(a) and ar.isfinite(b)):
        raise ValueError(f"Cannot compare non-finite values {a} and {b}.")

    x_max = a if abs(a) > abs(b) else b
    if x_max == 0:
        return 0

    # Scaling by a power of two is exact.
    delta = ar.ldexp(epsilon, ar.exponent(x_max))
    difference = ar.sub_away(a, b)

    if difference > delta:
        return 1
    if difference < -delta:
        return -1
    return 0


# ----------------------------------------------------------------------

def absolute_difference_equal(a, b, epsilon,
                              arith: Arithmetic = None) -> bool:
    """
    Returns ``True`` if ``|a - b| < |epsilon|``, with the difference
    rounded away from zero.

    Examples
    --------
    >>> absolute_difference_equal(1.0, 1.0005, 1e-3)
    True
    """
    ar = operand_arithmetic(arith, a, b, epsilon)
    a, b, epsilon = ar.convert(a), ar.convert(b), ar.convert(epsilon)
    return abs(ar.sub_away(a, b)) < abs(epsilon)


def relative_difference_equal(a, b, epsilon,
                              arith: Arithmetic = None) -> bool:
    """
    Returns ``True`` if the difference relative to `a` satisfies
    ``|(a - b) / a| < |epsilon|``.

    Identical operands are always equal (including both zero).  If `a`
    is zero and `b` is not, the relative difference is unbounded and the
    result is ``False``.
    """
    ar = operand_arithmetic(arith, a, b, epsilon)
    a, b, epsilon = ar.convert(a), ar.convert(b), ar.convert(epsilon)
    if a == b:
        return True
    if a == 0:
        return False

    # Round the magnitude of the quotient up so the test is never looser
    # than exact arithmetic.
    reldiff = ar.div(abs(ar.sub_away(a, b)), abs(a), Rounding.UP)
    return reldiff < abs(epsilon)
