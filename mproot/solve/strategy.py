"""
Solver state and the interfaces implemented by each algorithm.

Strategies hold no per-problem data.  Everything an algorithm needs
between iterations lives in the `scratch` attribute of the state object
owned by the solver.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from mproot.arith import Arithmetic
from mproot.exception import ErrorKind, InvalidInputError, SolverError
from mproot.function import Function, FunctionFdF


# ======================================================================

@dataclass
class BracketState:
    """
    Current bracket ``[lower, upper]``, root estimate and algorithm
    scratch data for a bracketing solver.
    """
    lower: Any
    upper: Any
    root: Any
    scratch: Any = None


@dataclass
class PolishState:
    """Current root estimate and algorithm scratch data."""
    root: Any
    scratch: Any = None


@dataclass
class EndpointValues:
    """Function values at each end of the bracket."""
    f_lower: Any
    f_upper: Any


# ----------------------------------------------------------------------

def opposite_sign(a, b) -> bool:
    """True if `a` and `b` are both nonzero and have opposite sign."""
    return (a > 0 and b < 0) or (a < 0 and b > 0)


def same_sign(a, b) -> bool:
    """True if `a` and `b` are both nonzero and have the same sign."""
    return (a > 0 and b > 0) or (a < 0 and b < 0)


def check_straddle(f_lower, f_upper):
    """
    Raises `InvalidInputError` if the function values at the ends of the
    bracket have the same strict sign.  A zero at either end is allowed.
    """
    if same_sign(f_lower, f_upper):
        raise InvalidInputError(flag=ErrorKind.ENDPOINTS_DO_NOT_STRADDLE,
                                details=f"f(lower) = {f_lower}, "
                                        f"f(upper) = {f_upper}")


def evaluate_endpoints(func: Function, state: BracketState,
                       arith: Arithmetic) -> EndpointValues:
    """
    Evaluate the function once at each end of the bracket (lower first),
    requiring finite values that straddle zero.
    """
    f_lower = func.f_finite(state.lower, arith)
    f_upper = func.f_finite(state.upper, arith)
    check_straddle(f_lower, f_upper)
    return EndpointValues(f_lower, f_upper)


def collapse(state: BracketState, x):
    """Set the root and both ends of the bracket to `x`."""
    state.root = state.lower = state.upper = x


def require_finite(arith: Arithmetic, *values, flag: ErrorKind):
    """Raise `SolverError` with `flag` unless all `values` are finite."""
    for v in values:
        if not arith.isfinite(v):
            raise SolverError(flag=flag, details=f"value = {v}")


# ======================================================================

class BracketingStrategy(ABC):
    """
    Base class for algorithms that maintain a bracket around the root.
    """
    name: str = None

    @abstractmethod
    def set(self, func: Function, state: BracketState,
            arith: Arithmetic) -> None:
        """
        Initialise ``state.scratch`` for a new problem.  On entry the
        bracket has been validated (``lower <= upper``) and ``state.root``
        holds its midpoint.

        Raises
        ------
        SolverError
            If the function cannot be evaluated at the ends of the
            bracket or they do not straddle zero.
        """
        raise NotImplementedError

    @abstractmethod
    def iterate(self, func: Function, state: BracketState,
                arith: Arithmetic) -> None:
        """
        Perform one step of the algorithm, updating `state` in place.
        """
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


# ----------------------------------------------------------------------

class PolishingStrategy(ABC):
    """
    Base class for algorithms that refine a single estimate of the root
    using derivative information.
    """
    name: str = None

    @abstractmethod
    def set(self, func: FunctionFdF, state: PolishState,
            arith: Arithmetic) -> None:
        """
        Initialise ``state.scratch`` from the initial guess ``state.root``.
        """
        raise NotImplementedError

    def at_exact_root(self, state: PolishState) -> bool:
        """
        Returns ``True`` if the function was last evaluated at
        ``state.root`` and found to be exactly zero.  The base
        implementation never claims an exact root.
        """
        return False

    @abstractmethod
    def iterate(self, func: FunctionFdF, state: PolishState,
                arith: Arithmetic) -> None:
        """
        Perform one step of the algorithm, updating `state` in place.
        """
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"

