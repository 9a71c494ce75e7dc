from unittest import TestCase

import mpmath

from mproot.arith import DoubleArithmetic
from mproot.convergence import Status, delta_test
from mproot.exception import ErrorKind, InvalidStateError, SolverError
from mproot.solve.solver import PolishingSolver
from .scalar_tst_functions import (CountCalls, cosine, cubic, d_cubic,
                                   sine, sine_cosine, sqrt2_df, sqrt2_f)

METHODS = ('newton', 'secant', 'steffensen')


# ======================================================================

def _polish(s: PolishingSolver, maxits: int = 50, epsabs=1e-6) -> int:
    """Iterate until successive roots agree, returning the iterations."""
    for it in range(1, maxits + 1):
        x0 = s.root
        s.iterate()
        if delta_test(s.root, x0, epsabs, 0,
                      arith=s.arith) == Status.CONVERGED:
            return it
    raise AssertionError(f"{s.name} did not converge.")


# ----------------------------------------------------------------------

class TestNewton(TestCase):
    def test_sine_scenario(self):
        with PolishingSolver('newton') as s:
            s.configure(sine, -1.0, fprime=cosine)
            its = _polish(s)
            self.assertLessEqual(its, 6)
            self.assertLess(abs(s.root), 1e-10)

    def test_first_step(self):
        s = PolishingSolver('newton')
        s.configure(sqrt2_f, 1, fprime=sqrt2_df)
        s.iterate()
        self.assertEqual(s.root, 1.5)
        s.iterate()
        self.assertAlmostEqual(float(s.root), 17 / 12, places=14)

    def test_sqrt2_200_bits(self):
        with PolishingSolver('newton', prec=200) as s:
            s.configure(sqrt2_f, 1, fprime=sqrt2_df)
            for _ in range(10):
                s.iterate()
            exact = s.arith.ctx.sqrt(2)
            self.assertLess(abs(s.root - exact), 2.0 ** -190)
            self.assertEqual(s.arith.prec, 200)

    def test_against_scipy_newton(self):
        from scipy.optimize import newton

        expected = newton(cubic, 2.0, fprime=d_cubic, tol=1e-14)
        with PolishingSolver('newton', arith=DoubleArithmetic()) as s:
            s.configure(cubic, 2.0, fprime=d_cubic)
            _polish(s, epsabs=1e-13)
            self.assertIsInstance(s.root, float)
            self.assertAlmostEqual(s.root, expected, places=12)


# ----------------------------------------------------------------------

class TestSecant(TestCase):
    def test_sine(self):
        with PolishingSolver('secant') as s:
            s.configure(sine, -1.0, fprime=cosine)
            its = _polish(s)
            self.assertLessEqual(its, 10)
            self.assertLess(abs(s.root), 1e-6)

    def test_first_step_is_newton(self):
        s_newton, s_secant = (PolishingSolver('newton'),
                              PolishingSolver('secant'))
        for s in (s_newton, s_secant):
            s.configure(sqrt2_f, 1, fprime=sqrt2_df)
            s.iterate()
        self.assertEqual(s_newton.root, s_secant.root)

    def test_derivative_not_called_after_configure(self):
        f, df = CountCalls(sqrt2_f), CountCalls(sqrt2_df)
        s = PolishingSolver('secant')
        s.configure(f, 1, fprime=df)
        for _ in range(4):
            s.iterate()
        self.assertEqual(df.calls, 1)
        self.assertEqual(f.calls, 5)
        self.assertEqual(s.function_calls, 6)

    def test_zero_step(self):
        s = PolishingSolver('secant')
        s.configure(lambda x: x - 1, 1, fprime=lambda x: 1)
        with self.assertRaises(SolverError) as cm:
            s.iterate()
        self.assertEqual(cm.exception.flag,
                         ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

    def test_exact_root(self):
        s = PolishingSolver('secant')
        s.configure(lambda x: x - 1, 3, fprime=lambda x: 1)
        self.assertFalse(s.exact_root)
        s.iterate()
        self.assertTrue(s.exact_root)
        self.assertEqual(s.root, 1)

        # Iterating past the root is still an error.
        with self.assertRaises(SolverError) as cm:
            s.iterate()
        self.assertEqual(cm.exception.flag,
                         ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

        s.configure(sqrt2_f, 1, fprime=sqrt2_df)
        s.iterate()
        self.assertFalse(s.exact_root)


# ----------------------------------------------------------------------

class TestSteffensen(TestCase):
    def test_sine_scenario(self):
        with PolishingSolver('newton') as s:
            s.configure(sine, -1.0, fprime=cosine)
            _polish(s)
            newton_root = s.root

        with PolishingSolver('steffensen') as s:
            s.configure(sine, -1.0, fprime=cosine)
            its = _polish(s)
            self.assertLessEqual(its, 6)
            self.assertAlmostEqual(float(s.root), float(newton_root),
                                   places=6)

    def test_newton_iterates_reported_first(self):
        s_newton, s_steff = (PolishingSolver('newton'),
                             PolishingSolver('steffensen'))
        for s in (s_newton, s_steff):
            s.configure(sine, -1.0, fprime=cosine)

        for _ in range(2):
            s_newton.iterate()
            s_steff.iterate()
            self.assertEqual(s_newton.root, s_steff.root)

    def test_aitken_acceleration(self):
        # Reproduce the third iteration from the Newton sequence.
        s = PolishingSolver('newton')
        s.configure(sine, -1.0, fprime=cosine)
        xs = [s.root]
        for _ in range(3):
            s.iterate()
            xs.append(s.root)

        s_steff = PolishingSolver('steffensen')
        s_steff.configure(sine, -1.0, fprime=cosine)
        for _ in range(3):
            s_steff.iterate()

        x_1, x, x_new = xs[1], xs[2], xs[3]
        u, v = x - x_1, x_new - 2 * x + x_1
        self.assertEqual(s_steff.root, x_1 - u * u / v)
        self.assertLess(abs(s_steff.root), abs(xs[2]))

    def test_configure_calls_f_then_df(self):
        order = []

        def f(x):
            order.append('f')
            return sqrt2_f(x)

        def df(x):
            order.append('df')
            return sqrt2_df(x)

        s = PolishingSolver('steffensen')
        s.configure(f, 1, fprime=df)
        self.assertEqual(order, ['f', 'df'])

    def test_derivative_invalid_after_step(self):
        def df(x):
            return 2 * x if x == 1 else mpmath.nan

        s = PolishingSolver('steffensen')
        s.configure(sqrt2_f, 1, fprime=df)
        with self.assertRaises(SolverError) as cm:
            s.iterate()
        self.assertEqual(cm.exception.flag,
                         ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)

        # The step was taken before the derivative was checked.
        self.assertEqual(s.root, 1.5)


# ----------------------------------------------------------------------

class TestPolishingErrors(TestCase):
    def test_derivative_zero(self):
        for method in METHODS:
            with self.subTest(method=method):
                s = PolishingSolver(method)
                s.configure(sqrt2_f, 0, fprime=sqrt2_df)
                with self.assertRaises(SolverError) as cm:
                    s.iterate()
                self.assertEqual(cm.exception.flag,
                                 ErrorKind.DERIVATIVE_IS_ZERO)
                self.assertEqual(str(cm.exception).splitlines()[0],
                                 "derivative is zero")

                # No further iterations until configured again.
                with self.assertRaises(InvalidStateError):
                    s.iterate()
                s.configure(sqrt2_f, 1, fprime=sqrt2_df)
                s.iterate()
                s.release()

    def test_configure_not_finite(self):
        for method in METHODS:
            with self.subTest(method=method):
                s = PolishingSolver(method)
                with self.assertRaises(SolverError) as cm:
                    s.configure(lambda x: mpmath.inf, 0,
                                fprime=lambda x: 1)
                self.assertEqual(cm.exception.flag,
                                 ErrorKind.FUNCTION_VALUE_NOT_FINITE)

                with self.assertRaises(SolverError) as cm:
                    s.configure(sqrt2_f, 1, fprime=lambda x: mpmath.nan)
                self.assertEqual(cm.exception.flag,
                                 ErrorKind.FUNCTION_VALUE_NOT_FINITE)

                with self.assertRaises(InvalidStateError):
                    s.iterate()

    def test_newton_function_invalid(self):
        s = PolishingSolver('newton')
        s.configure(lambda x: x - 1 if x == 0 else mpmath.nan, 0,
                    fprime=lambda x: 1)
        with self.assertRaises(SolverError) as cm:
            s.iterate()
        self.assertEqual(cm.exception.flag,
                         ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID)


# ----------------------------------------------------------------------

class TestFunctionCalls(TestCase):
    def test_with_fdf(self):
        fdf = CountCalls(sine_cosine)
        s = PolishingSolver('newton')
        s.configure(sine, -1.0, fprime=cosine, fdf=fdf)
        for _ in range(3):
            s.iterate()
        self.assertEqual(fdf.calls, 4)
        self.assertEqual(s.function_calls, 4)
        self.assertEqual(s.iterations, 3)

    def test_without_fdf(self):
        expected = {'newton': 2 + 2 * 3, 'secant': 2 + 3,
                    'steffensen': 2 + 2 * 3}
        for method in METHODS:
            with self.subTest(method=method):
                with PolishingSolver(method) as s:
                    s.configure(sqrt2_f, 1, fprime=sqrt2_df)
                    for _ in range(3):
                        s.iterate()
                    self.assertEqual(s.function_calls, expected[method])

    def test_extra_args(self):
        def f(x, a):
            return x * x - a

        def df(x, a):
            return 2 * x

        with PolishingSolver('newton') as s:
            s.configure(f, 1, fprime=df, args=(9,))
            _polish(s, epsabs=1e-12)
            self.assertAlmostEqual(float(s.root), 3.0, places=12)
