"""
Generic solvers binding one algorithm to its problem state.
"""
from __future__ import annotations

from collections.abc import Callable

from mproot.arith import Arithmetic, Rounding, get_arithmetic
from mproot.exception import (ErrorKind, InvalidInputError,
                              InvalidStateError, SolverError)
from mproot.function import Function, FunctionFdF
from mproot.solve.bisection import Bisection
from mproot.solve.brent import Brent
from mproot.solve.falsepos import FalsePosition
from mproot.solve.newton import Newton
from mproot.solve.secant import Secant
from mproot.solve.steffensen import Steffensen
from mproot.solve.strategy import (BracketingStrategy, BracketState,
                                   PolishingStrategy, PolishState)

# Available algorithms for each type of solver.
BRACKETING_METHODS = {s.name: s for s in (Bisection, FalsePosition, Brent)}
POLISHING_METHODS = {s.name: s for s in (Newton, Secant, Steffensen)}


# ======================================================================

class _Solver:
    """
    Lifecycle shared by both kinds of solver: configure, iterate,
    failure tracking and release.
    """
    _methods: dict = {}

    def __init__(self, method: str, *, prec: int = None,
                 arith: Arithmetic = None):
        try:
            strategy_cls = self._methods[method]
        except KeyError:
            raise ValueError(
                f"Unknown method '{method}', expected one of: "
                f"{', '.join(self._methods)}.") from None

        self._strategy = strategy_cls()
        self._arith = get_arithmetic(arith, prec)
        self._func, self._state = None, None
        self._iterations = 0
        self._failed, self._released = False, False

    def __repr__(self):
        return (f"{type(self).__name__}('{self.name}', "
                f"arith={self._arith!r})")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    # -- Properties ----------------------------------------------------

    @property
    def arith(self) -> Arithmetic:
        """Arithmetic used for all values held by the solver."""
        return self._arith

    @property
    def function_calls(self) -> int:
        """Calls made to the user function(s) since `configure`."""
        return self._func.calls if self._func is not None else 0

    @property
    def iterations(self) -> int:
        """Successful calls to `iterate` since `configure`."""
        return self._iterations

    @property
    def name(self) -> str:
        """Name of the algorithm, e.g. ``'brent'``."""
        return self._strategy.name

    @property
    def root(self):
        """Current estimate of the root."""
        return self._configured_state().root

    # -- Public Methods ------------------------------------------------

    def iterate(self):
        """
        Perform a single iteration of the algorithm.  Convergence is not
        checked; see :mod:`mproot.convergence`.

        Raises
        ------
        SolverError
            If the step fails.  The solver then refuses further
            iterations until it is configured again.
        InvalidStateError
            If the solver is not configured, has failed or has been
            released.
        """
        state = self._configured_state()
        if self._failed:
            raise InvalidStateError(
                f"{type(self).__name__} failed on a previous step and "
                f"must be configured again.")

        try:
            self._strategy.iterate(self._func, state, self._arith)
        except Exception:
            self._failed = True
            raise

        self._iterations += 1

    def release(self):
        """
        Drop the function and all state held by the solver.  Calling
        this more than once has no effect.
        """
        self._func, self._state = None, None
        self._released = True

    # -- Private Methods -----------------------------------------------

    def _check_released(self):
        if self._released:
            raise InvalidStateError(
                f"{type(self).__name__} has been released.")

    def _configured_state(self):
        self._check_released()
        if self._state is None:
            raise InvalidStateError(
                f"{type(self).__name__} has not been configured.")
        return self._state

    def _setup(self, func: Function, state):
        # Any previous problem is discarded before the new one is checked
        # so that a failed configure leaves the solver unconfigured.
        self._func, self._state = None, None
        self._iterations, self._failed = 0, False
        try:
            self._strategy.set(func, state, self._arith)
        except MemoryError as e:
            raise SolverError(flag=ErrorKind.ALLOCATION_FAILURE,
                              details=str(e) or None) from e

        self._func, self._state = func, state


# ======================================================================

class BracketingSolver(_Solver):
    """
    Root solver maintaining a bracket ``[lower, upper]`` over which the
    function changes sign.  Each iteration shrinks the bracket while
    keeping the root inside it.

    Parameters
    ----------
    method : str
        Algorithm to use:

        - ``'bisection'``: Interval halving.
        - ``'falsepos'``: False position with bisection safeguard.
        - ``'brent'``: Brent-Dekker interpolation / bisection.
    prec : int, optional
        Working precision in bits when `arith` is not given.
    arith : Arithmetic, optional
        Arithmetic to use.  Defaults to `MPArithmetic` at `prec` bits.

    Raises
    ------
    ValueError
        Unknown `method` or invalid `prec`.

    Examples
    --------
    >>> import mpmath
    >>> with BracketingSolver('brent', prec=100) as s:
    ...     s.configure(lambda x: x * x - 2, 0, 2)
    ...     while s.upper - s.lower > mpmath.mpf(2) ** -90:
    ...         s.iterate()
    """
    _methods = BRACKETING_METHODS
    _strategy: BracketingStrategy

    # -- Properties ----------------------------------------------------

    @property
    def lower(self):
        """Current lower end of the bracket."""
        return self._configured_state().lower

    @property
    def upper(self):
        """Current upper end of the bracket."""
        return self._configured_state().upper

    # -- Public Methods ------------------------------------------------

    def configure(self, func: Callable, lower, upper, args: tuple = ()):
        """
        Set (or reset) the problem.  The function is evaluated once at
        each end of the bracket and the root estimate set to its
        midpoint.

        Parameters
        ----------
        func : Callable[[x, ...], y]
            Function whose root is sought.
        lower, upper :
            Initial bracket.  `lower` is rounded down and `upper` rounded
            up when converted, so the bracket is never narrowed.
        args : tuple, default = ()
            Extra arguments passed to `func`.

        Raises
        ------
        InvalidInputError
            If ``lower > upper`` (the function is not evaluated) or the
            function values at the ends do not straddle zero.
        SolverError
            If the function is not finite at either end.
        """
        self._check_released()
        ar = self._arith
        lower = ar.convert(lower, Rounding.DOWN)
        upper = ar.convert(upper, Rounding.UP)
        if lower > upper:
            self._func, self._state = None, None
            raise InvalidInputError(
                flag=ErrorKind.INVALID_BRACKET_INTERVAL,
                details=f"lower = {lower}, upper = {upper}")

        state = BracketState(lower=lower, upper=upper,
                             root=ar.midpoint(lower, upper))
        self._setup(Function(func, args), state)


# ----------------------------------------------------------------------

class PolishingSolver(_Solver):
    """
    Root solver refining a single estimate using the derivative (or an
    approximation of it).  Convergence is fast near a simple root but is
    not guaranteed from a poor starting point.

    Parameters
    ----------
    method : str
        Algorithm to use:

        - ``'newton'``: Newton-Raphson.
        - ``'secant'``: Secant, using the derivative at the start only.
        - ``'steffensen'``: Newton with Aitken acceleration.
    prec : int, optional
        Working precision in bits when `arith` is not given.
    arith : Arithmetic, optional
        Arithmetic to use.  Defaults to `MPArithmetic` at `prec` bits.

    Raises
    ------
    ValueError
        Unknown `method` or invalid `prec`.
    """
    _methods = POLISHING_METHODS
    _strategy: PolishingStrategy

    # -- Properties ----------------------------------------------------

    @property
    def exact_root(self) -> bool:
        """
        ``True`` if the function value at `root` is known to be exactly
        zero.  Iterating further is then unnecessary and, for the secant
        method, fails because the next step is zero.
        """
        return self._strategy.at_exact_root(self._configured_state())

    # -- Public Methods ------------------------------------------------

    def configure(self, func: Callable, x0, *, fprime: Callable,
                  fdf: Callable = None, args: tuple = ()):
        """
        Set (or reset) the problem.  The function and its derivative are
        evaluated at the initial guess.

        Parameters
        ----------
        func : Callable[[x, ...], y]
            Function whose root is sought.
        x0 :
            Initial guess, rounded to nearest.
        fprime : Callable[[x, ...], dy]
            First derivative of `func`.
        fdf : Callable[[x, ...], (y, dy)], optional
            Function and derivative computed together.
        args : tuple, default = ()
            Extra arguments passed to `func`, `fprime` and `fdf`.

        Raises
        ------
        SolverError
            If the function or derivative is not finite at `x0`.
        """
        self._check_released()
        state = PolishState(root=self._arith.convert(x0))
        self._setup(FunctionFdF(func, fprime, fdf, args), state)
