"""
=================================
Arithmetic (:mod:`mproot.arith`)
=================================

.. currentmodule:: mproot.arith

Numeric backends used by the solvers.  All algorithms are written
against the abstract `Arithmetic` interface so that they do not depend
on a specific number type:

- Values support the ordinary Python operators, giving results rounded
  to nearest at the precision of the arithmetic.
- Where the rounding direction matters (e.g. when narrowing a bracket or
  comparing with a tolerance) the explicit methods `convert`, `add`,
  `sub`, `mul` and `div` take a `Rounding` argument.

Two implementations are provided:

.. autosummary::
    :toctree:

    MPArithmetic
    DoubleArithmetic
"""
from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Any

import mpmath
import numpy as np
from mpmath import libmp


# Default working precision in bits.  Equal to IEEE double precision.
DEFAULT_PREC = 53


# ======================================================================

class Rounding(enum.Enum):
    """Rounding direction for a single operation."""
    NEAREST = libmp.round_nearest
    DOWN = libmp.round_floor  # Towards -inf.
    UP = libmp.round_ceiling  # Towards +inf.


# ----------------------------------------------------------------------

class Arithmetic(ABC):
    """
    Abstract numeric interface.  Derived classes fix the value type and
    precision; all values passed to the methods should have been
    produced by `convert` (or by operators on such values).
    """

    # -- Properties ----------------------------------------------------

    @property
    @abstractmethod
    def prec(self) -> int:
        """Working precision in bits."""
        raise NotImplementedError

    @property
    def eps(self):
        """Distance from 1.0 to the next larger value, ``2**(1 - prec)``."""
        return self.ldexp(self.convert(1), 1 - self.prec)

    # -- Public Methods ------------------------------------------------

    @abstractmethod
    def convert(self, x, rounding: Rounding = Rounding.NEAREST):
        """
        Return `x` as a value of this arithmetic, rounded in direction
        `rounding`.  Accepts ``int``, ``float``, ``str``, ``Fraction``
        and values of any `Arithmetic`.
        """
        raise NotImplementedError

    @abstractmethod
    def add(self, a, b, rounding: Rounding = Rounding.NEAREST):
        raise NotImplementedError

    @abstractmethod
    def sub(self, a, b, rounding: Rounding = Rounding.NEAREST):
        raise NotImplementedError

    @abstractmethod
    def mul(self, a, b, rounding: Rounding = Rounding.NEAREST):
        raise NotImplementedError

    @abstractmethod
    def div(self, a, b, rounding: Rounding = Rounding.NEAREST):
        raise NotImplementedError

    @abstractmethod
    def isfinite(self, x) -> bool:
        """Returns ``True`` if `x` is neither infinite nor NaN."""
        raise NotImplementedError

    @abstractmethod
    def exponent(self, x) -> int:
        """
        Binary exponent `e` of a finite nonzero `x`, such that ``x = m *
        2**e`` with ``0.5 <= |m| < 1``.
        """
        raise NotImplementedError

    @abstractmethod
    def ldexp(self, x, n: int):
        """Returns ``x * 2**n``."""
        raise NotImplementedError

    def midpoint(self, a, b):
        """Returns ``(a + b) / 2`` rounded to nearest."""
        return (a + b) * 0.5

    @staticmethod
    def sign(x) -> int:
        """Returns -1, 0 or +1 according to the sign of `x`."""
        return (x > 0) - (x < 0)

    def sub_away(self, a, b):
        """Returns ``a - b`` rounded away from zero."""
        return self.sub(a, b, Rounding.UP if a > b else Rounding.DOWN)


# ======================================================================

class MPArithmetic(Arithmetic):
    """
    Arbitrary precision arithmetic using `mpmath`.  Each instance owns a
    private `mpmath.MPContext`, so values created here carry the chosen
    precision through ordinary operators without touching the global
    ``mpmath.mp`` settings.

    Parameters
    ----------
    prec : int, default = DEFAULT_PREC
        Working precision in bits (>= 2).

    Examples
    --------
    >>> ar = MPArithmetic(prec=100)
    >>> ar.div(1, 3, Rounding.DOWN) < ar.div(1, 3, Rounding.UP)
    True
    >>> ar.convert(0.1, Rounding.DOWN) == ar.convert(0.1, Rounding.UP)
    True
    """

    def __init__(self, prec: int = None):
        if prec is None:
            prec = DEFAULT_PREC
        if prec < 2:
            raise ValueError(f"Precision must be at least 2 bits, got "
                             f"{prec}.")

        self._ctx = mpmath.MPContext()
        self._ctx.prec = prec

    def __repr__(self):
        return f"MPArithmetic(prec={self.prec})"

    # -- Properties ----------------------------------------------------

    @property
    def ctx(self) -> mpmath.MPContext:
        """
        The `mpmath` context of this arithmetic.  User functions should
        use its elementary functions (``ctx.sin``, ``ctx.exp``, ...) so
        that they are evaluated at the same precision.
        """
        return self._ctx

    @property
    def prec(self) -> int:
        return self._ctx.prec

    # -- Public Methods ------------------------------------------------

    def convert(self, x, rounding: Rounding = Rounding.NEAREST):
        prec, rnd = self.prec, rounding.value

        if hasattr(x, '_mpf_'):
            raw = libmp.mpf_pos(x._mpf_, prec, rnd)
        elif isinstance(x, (int, np.integer)):
            raw = libmp.from_int(int(x), prec, rnd)
        elif isinstance(x, float):
            raw = libmp.from_float(x, prec, rnd)
        elif isinstance(x, Fraction):
            raw = libmp.from_rational(x.numerator, x.denominator, prec,
                                      rnd)
        elif isinstance(x, str):
            raw = libmp.from_str(x, prec, rnd)
        else:
            # Other types (e.g. Decimal, numpy floats) are converted by
            # mpmath itself, rounded to nearest.
            y = self._ctx.convert(x)
            if not hasattr(y, '_mpf_'):
                raise TypeError(f"Cannot convert {type(x).__name__} to a "
                                f"real value.")
            raw = libmp.mpf_pos(y._mpf_, prec, rnd)

        return self._ctx.make_mpf(raw)

    def add(self, a, b, rounding: Rounding = Rounding.NEAREST):
        return self._binary(libmp.mpf_add, a, b, rounding)

    def sub(self, a, b, rounding: Rounding = Rounding.NEAREST):
        return self._binary(libmp.mpf_sub, a, b, rounding)

    def mul(self, a, b, rounding: Rounding = Rounding.NEAREST):
        return self._binary(libmp.mpf_mul, a, b, rounding)

    def div(self, a, b, rounding: Rounding = Rounding.NEAREST):
        if self._raw(b) == libmp.fzero:
            raise ZeroDivisionError("Division by zero.")
        return self._binary(libmp.mpf_div, a, b, rounding)

    def isfinite(self, x) -> bool:
        return self._raw(x) not in (libmp.finf, libmp.fninf, libmp.fnan)

    def exponent(self, x) -> int:
        raw = self._raw(x)
        if raw == libmp.fzero or not self.isfinite(x):
            raise ValueError("Exponent requires a finite nonzero value.")
        _, _, exp, bc = raw
        return int(exp + bc)

    def ldexp(self, x, n: int):
        return self._ctx.make_mpf(libmp.mpf_shift(self._raw(x), int(n)))

    # -- Private Methods -----------------------------------------------

    def _raw(self, x) -> tuple:
        if hasattr(x, '_mpf_'):
            return x._mpf_
        return self.convert(x)._mpf_

    def _binary(self, op, a, b, rounding: Rounding):
        return self._ctx.make_mpf(op(self._raw(a), self._raw(b), self.prec,
                                     rounding.value))


# ======================================================================

class DoubleArithmetic(Arithmetic):
    """
    IEEE double precision arithmetic using Python ``float``.  Directed
    rounding is obtained by comparing the nearest result with the exact
    rational result and stepping one unit in the last place with
    `numpy.nextafter` where required.

    This is mainly useful for checking results against other double
    precision solvers.
    """

    def __repr__(self):
        return "DoubleArithmetic()"

    # -- Properties ----------------------------------------------------

    @property
    def prec(self) -> int:
        return 53

    @property
    def eps(self):
        return float(np.finfo(float).eps)

    # -- Public Methods ------------------------------------------------

    def convert(self, x, rounding: Rounding = Rounding.NEAREST):
        if isinstance(x, str):
            y = float(Fraction(x))
        else:
            y = float(x)

        if rounding is Rounding.NEAREST or not math.isfinite(y):
            return y
        return _round_directed(y, _exact(x), rounding)

    def add(self, a, b, rounding: Rounding = Rounding.NEAREST):
        y = float(a) + float(b)
        if rounding is Rounding.NEAREST or not math.isfinite(y):
            return y
        return _round_directed(y, _exact(a) + _exact(b), rounding)

    def sub(self, a, b, rounding: Rounding = Rounding.NEAREST):
        y = float(a) - float(b)
        if rounding is Rounding.NEAREST or not math.isfinite(y):
            return y
        return _round_directed(y, _exact(a) - _exact(b), rounding)

    def mul(self, a, b, rounding: Rounding = Rounding.NEAREST):
        y = float(a) * float(b)
        if rounding is Rounding.NEAREST or not math.isfinite(y):
            return y
        return _round_directed(y, _exact(a) * _exact(b), rounding)

    def div(self, a, b, rounding: Rounding = Rounding.NEAREST):
        y = float(a) / float(b)
        if rounding is Rounding.NEAREST or not math.isfinite(y):
            return y
        return _round_directed(y, _exact(a) / _exact(b), rounding)

    def isfinite(self, x) -> bool:
        return math.isfinite(x)

    def exponent(self, x) -> int:
        if x == 0 or not math.isfinite(x):
            raise ValueError("Exponent requires a finite nonzero value.")
        return int(np.frexp(x)[1])

    def ldexp(self, x, n: int):
        return float(np.ldexp(x, n))


# ----------------------------------------------------------------------

def _exact(x: Any) -> Fraction:
    """Exact rational value of a finite number."""
    if hasattr(x, '_mpf_'):
        sign, man, exp, _ = x._mpf_
        q = Fraction(int(man)) * Fraction(2) ** int(exp)
        return -q if sign else q
    return Fraction(x)


def _round_directed(y: float, exact: Fraction, rounding: Rounding) -> float:
    """Step nearest result `y` one ulp if it lies on the wrong side."""
    if rounding is Rounding.DOWN and Fraction(y) > exact:
        return float(np.nextafter(y, -np.inf))
    if rounding is Rounding.UP and Fraction(y) < exact:
        return float(np.nextafter(y, np.inf))
    return y


# ----------------------------------------------------------------------

def get_arithmetic(arith: Arithmetic = None,
                   prec: int = None) -> Arithmetic:
    """
    Returns `arith` if given, otherwise a new `MPArithmetic` at `prec`
    bits (default `DEFAULT_PREC`).
    """
    if arith is not None:
        if prec is not None and prec != arith.prec:
            raise ValueError(f"Precision {prec} conflicts with supplied "
                             f"arithmetic ({arith.prec} bits).")
        return arith
    return MPArithmetic(prec)


def operand_arithmetic(arith: Arithmetic = None, *values) -> Arithmetic:
    """
    Returns `arith` if given, otherwise a new `MPArithmetic` precise
    enough to hold each of `values` without rounding.  The precision is
    the largest of `DEFAULT_PREC`, the precision of any `mpmath` value's
    context and the bit length of any integer.

    Parameters
    ----------
    arith : Arithmetic, optional
        Arithmetic to use as-is.
    values :
        Operands to be converted by the returned arithmetic.

    Examples
    --------
    >>> x = MPArithmetic(prec=200).convert(1)
    >>> operand_arithmetic(None, x, 1e-6).prec
    200
    """
    if arith is not None:
        return arith

    prec = DEFAULT_PREC
    for x in values:
        if hasattr(x, '_mpf_'):
            ctx_prec = getattr(getattr(x, 'context', None), 'prec', 0)
            prec = max(prec, ctx_prec, int(x._mpf_[3]))
        elif isinstance(x, (int, np.integer)):
            prec = max(prec, abs(int(x)).bit_length())
    return MPArithmetic(prec)
