"""
=======================================
Exceptions (:mod:`mproot.exception`)
=======================================

.. currentmodule:: mproot.exception

Error kinds, their fixed descriptions and the exceptions raised by the
solvers, convergence tests and comparison functions.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass


# ======================================================================

class ErrorKind(enum.IntEnum):
    """
    Stable numeric codes identifying each kind of failure.  Values are
    negative so they never collide with the `Status` codes returned by
    the convergence tests.
    """
    ALLOCATION_FAILURE = -2
    INVALID_BRACKET_INTERVAL = -3
    RELATIVE_TOLERANCE_IS_NEGATIVE = -4
    ABSOLUTE_TOLERANCE_IS_NEGATIVE = -5
    LOWER_BOUND_LARGER_THAN_UPPER_BOUND = -6
    ENDPOINTS_DO_NOT_STRADDLE = -7
    FUNCTION_VALUE_NOT_FINITE = -8
    DERIVATIVE_IS_ZERO = -9
    FUNCTION_OR_DERIVATIVE_INVALID = -10
    MAXIMUM_ITERATIONS = -11


@dataclass(frozen=True)
class ErrorDescriptor:
    """Pairs an `ErrorKind` with its human-readable description."""
    kind: ErrorKind
    description: str


ERRORS: dict[ErrorKind, ErrorDescriptor] = {d.kind: d for d in (
    ErrorDescriptor(ErrorKind.ALLOCATION_FAILURE,
                    "failed to allocate space for root solver state"),
    ErrorDescriptor(ErrorKind.INVALID_BRACKET_INTERVAL,
                    "invalid bracket interval (lower > upper)"),
    ErrorDescriptor(ErrorKind.RELATIVE_TOLERANCE_IS_NEGATIVE,
                    "relative tolerance is negative"),
    ErrorDescriptor(ErrorKind.ABSOLUTE_TOLERANCE_IS_NEGATIVE,
                    "absolute tolerance is negative"),
    ErrorDescriptor(ErrorKind.LOWER_BOUND_LARGER_THAN_UPPER_BOUND,
                    "lower bound larger than upper bound"),
    ErrorDescriptor(ErrorKind.ENDPOINTS_DO_NOT_STRADDLE,
                    "endpoints do not straddle y=0"),
    ErrorDescriptor(ErrorKind.FUNCTION_VALUE_NOT_FINITE,
                    "function value is not finite"),
    ErrorDescriptor(ErrorKind.DERIVATIVE_IS_ZERO,
                    "derivative is zero"),
    ErrorDescriptor(ErrorKind.FUNCTION_OR_DERIVATIVE_INVALID,
                    "function or derivative value is not finite or not "
                    "a number"),
    ErrorDescriptor(ErrorKind.MAXIMUM_ITERATIONS,
                    "maximum number of iterations reached"),
)}


def strerror(code: int) -> str:
    """
    Return the fixed description for an error or status code.

    Parameters
    ----------
    code : int
        An `ErrorKind`, a `Status` from :mod:`mproot.convergence` or
        the equivalent plain integer.

    Returns
    -------
    str
        Description of `code`.  Unrecognised codes give ``"unknown or
        invalid error code"``.

    Examples
    --------
    >>> strerror(ErrorKind.DERIVATIVE_IS_ZERO)
    'derivative is zero'
    >>> strerror(0)
    'no error'
    """
    if code == 0:
        return "no error"
    if code == 1:
        return "iteration has not converged"
    try:
        return ERRORS[ErrorKind(code)].description
    except ValueError:
        return "unknown or invalid error code"


# ======================================================================

class SolverError(RuntimeError):
    """
    This exception is raised when a solver, convergence test or
    comparison cannot complete.  The kind of failure is given by `flag`
    and additional information (optional) is included to allow the
    reason for the failure to be determined.

    Notes
    -----
    `SolverError` may also have additional attributes not listed here
    depending on where it was raised, e.g. `root` giving the last
    estimate reached.
    """

    def __init__(self, *args, flag: ErrorKind = None, details: str = None,
                 **kwargs):
        """
        Parameters
        ----------
        args :
            Passed to `RuntimeError`.  If omitted, the description of
            `flag` is used as the message.
        flag : ErrorKind, default = None
            Kind of failure.
        details : str, default = None
            Additional text can be included relating to the specific
            failure.
        kwargs :
            Additional attributes can be added to the object using
            keyword arguments.
        """
        if not args and flag is not None:
            args = (ERRORS[flag].description,)
        super().__init__(*args)
        self.flag, self.details = flag, details
        for k, v in kwargs.items():
            setattr(self, k, v)

    @property
    def descriptor(self) -> ErrorDescriptor | None:
        """Fixed descriptor for `flag`, or `None` if no flag was given."""
        if self.flag is None:
            return None
        return ERRORS[self.flag]

    def __str__(self):
        """Add additional details below the main failure notice."""
        error_str = super().__str__()
        for k, v in self.__dict__.items():
            if v is not None:
                if isinstance(v, ErrorKind):
                    v = v.name
                error_str += f"\n{k} -> {v}"
        return error_str


class InvalidInputError(SolverError, ValueError):
    """
    Raised when the arguments themselves are unacceptable (bracket
    ordering, negative tolerances, endpoints that do not straddle zero).
    Can be caught as either `SolverError` or `ValueError`.
    """
    pass


class InvalidStateError(ValueError):
    """
    Raised when a solver is used out of sequence: iterated before being
    configured, after it has reported an error, or after `release()`.
    """
    pass
