from fractions import Fraction
from unittest import TestCase

import mpmath
import numpy as np

from mproot.arith import (DEFAULT_PREC, DoubleArithmetic, MPArithmetic,
                          Rounding, get_arithmetic)


# ======================================================================

class TestMPArithmetic(TestCase):
    def test_precision(self):
        self.assertEqual(MPArithmetic().prec, DEFAULT_PREC)
        self.assertEqual(MPArithmetic(prec=300).prec, 300)
        with self.assertRaises(ValueError):
            MPArithmetic(prec=1)

    def test_private_context(self):
        mp_prec = mpmath.mp.prec
        ar = MPArithmetic(prec=200)
        x = ar.convert(2)
        self.assertEqual(mpmath.mp.prec, mp_prec)

        # Operators on converted values work at the arithmetic's precision.
        third = x / 6
        self.assertEqual(third._mpf_, ar.div(1, 3)._mpf_)
        self.assertEqual(ar.ctx.prec, 200)

    def test_convert_rounding(self):
        ar = MPArithmetic(prec=53)
        for x in (Fraction(1, 3), "0.1", "-2.7182818284590452353602874"):
            with self.subTest(x=x):
                lo = ar.convert(x, Rounding.DOWN)
                hi = ar.convert(x, Rounding.UP)
                near = ar.convert(x)
                self.assertLess(lo, hi)
                self.assertIn(near, (lo, hi))
                self.assertEqual(ar.sub(hi, lo), ar.ldexp(
                    ar.convert(1), ar.exponent(near) - 53))

    def test_convert_exact(self):
        ar = MPArithmetic()
        for x in (0.1, -3, 2 ** 60, np.int64(7), Fraction(3, 4)):
            with self.subTest(x=x):
                self.assertEqual(ar.convert(x, Rounding.DOWN),
                                 ar.convert(x, Rounding.UP))

        # Values from another precision are rounded.
        ar_hi = MPArithmetic(prec=200)
        third = ar_hi.div(1, 3)
        self.assertLess(ar.convert(third, Rounding.DOWN), third)
        self.assertGreater(ar.convert(third, Rounding.UP), third)

    def test_directed_operations(self):
        ar = MPArithmetic()
        ulp = ar.ldexp(ar.convert(1), -54)  # ulp of 1/3.
        self.assertEqual(ar.div(1, 3, Rounding.UP) -
                         ar.div(1, 3, Rounding.DOWN), ulp)

        tiny = ar.ldexp(ar.convert(1), -60)
        self.assertEqual(ar.add(1, tiny, Rounding.DOWN), 1)
        self.assertGreater(ar.add(1, tiny, Rounding.UP), 1)
        self.assertLess(ar.sub(1, tiny, Rounding.DOWN), 1)
        self.assertEqual(ar.sub(1, tiny, Rounding.UP), 1)
        self.assertEqual(ar.mul(3, 5, Rounding.DOWN), 15)

        with self.assertRaises(ZeroDivisionError):
            ar.div(1, 0)

    def test_sub_away(self):
        ar = MPArithmetic()
        tiny = ar.ldexp(ar.convert(1), -60)
        self.assertEqual(ar.sub_away(1, tiny), 1)
        self.assertEqual(ar.sub_away(tiny, 1), -1)
        self.assertEqual(ar.sub_away(1, tiny), -ar.sub_away(tiny, 1))

    def test_eps_exponent_ldexp(self):
        ar = MPArithmetic()
        self.assertEqual(float(ar.eps), np.finfo(float).eps)
        self.assertEqual(MPArithmetic(prec=100).eps, mpmath.mpf(2) ** -99)

        self.assertEqual(ar.exponent(1), 1)
        self.assertEqual(ar.exponent(0.75), 0)
        self.assertEqual(ar.exponent(-8), 4)
        with self.assertRaises(ValueError):
            ar.exponent(0)
        with self.assertRaises(ValueError):
            ar.exponent(mpmath.inf)

        self.assertEqual(ar.ldexp(3, 2), 12)
        self.assertEqual(ar.ldexp(3, -1), 1.5)

    def test_misc(self):
        ar = MPArithmetic()
        self.assertTrue(ar.isfinite(ar.convert(1e300)))
        self.assertFalse(ar.isfinite(ar.convert(float('inf'))))
        self.assertFalse(ar.isfinite(ar.convert(float('nan'))))
        self.assertEqual(ar.midpoint(ar.convert(-1), ar.convert(2)), 0.5)
        self.assertEqual([ar.sign(ar.convert(x)) for x in (-2, 0, 3)],
                         [-1, 0, 1])


# ----------------------------------------------------------------------

class TestDoubleArithmetic(TestCase):
    def test_properties(self):
        ar = DoubleArithmetic()
        self.assertEqual(ar.prec, 53)
        self.assertEqual(ar.eps, np.finfo(float).eps)

    def test_directed_rounding(self):
        ar = DoubleArithmetic()
        lo, hi = ar.div(1.0, 3.0, Rounding.DOWN), ar.div(1.0, 3.0,
                                                         Rounding.UP)
        self.assertLess(lo, hi)
        self.assertEqual(np.nextafter(lo, np.inf), hi)
        self.assertLessEqual(Fraction(lo), Fraction(1, 3))
        self.assertGreaterEqual(Fraction(hi), Fraction(1, 3))

        lo, hi = ar.convert("0.1", Rounding.DOWN), ar.convert("0.1",
                                                              Rounding.UP)
        self.assertLess(lo, hi)
        self.assertIn(0.1, (lo, hi))

        # Exact results are unchanged.
        self.assertEqual(ar.add(0.5, 0.25, Rounding.UP), 0.75)
        self.assertEqual(ar.mul(3.0, 5.0, Rounding.DOWN), 15.0)
        self.assertEqual(ar.sub(1.0, 2.0 ** -60, Rounding.UP), 1.0)
        self.assertLess(ar.sub(1.0, 2.0 ** -60, Rounding.DOWN), 1.0)

    def test_convert_from_mp(self):
        ar = DoubleArithmetic()
        third = MPArithmetic(prec=200).div(1, 3)
        lo, hi = (ar.convert(third, Rounding.DOWN),
                  ar.convert(third, Rounding.UP))
        self.assertIsInstance(lo, float)
        self.assertLess(Fraction(lo), Fraction(1, 3))
        self.assertGreater(Fraction(hi), Fraction(1, 3))

    def test_exponent_ldexp(self):
        ar = DoubleArithmetic()
        self.assertEqual(ar.exponent(1.0), 1)
        self.assertEqual(ar.exponent(-0.375), -1)
        with self.assertRaises(ValueError):
            ar.exponent(0.0)
        self.assertEqual(ar.ldexp(0.75, 3), 6.0)
        self.assertFalse(ar.isfinite(float('inf')))


# ----------------------------------------------------------------------

class TestGetArithmetic(TestCase):
    def test_get_arithmetic(self):
        self.assertIsInstance(get_arithmetic(), MPArithmetic)
        self.assertEqual(get_arithmetic(prec=90).prec, 90)

        ar = DoubleArithmetic()
        self.assertIs(get_arithmetic(ar), ar)
        self.assertIs(get_arithmetic(ar, prec=53), ar)
        with self.assertRaises(ValueError):
            get_arithmetic(ar, prec=64)
