# finrate/errors.py
"""
Typed errors raised by the rate solvers.

Exports
-------
- RateSolverError, InvalidInputError, ConvergenceFailureError
- SOLVER_ERRORS
"""

from __future__ import annotations


class RateSolverError(Exception):
    """Base class for IRR/XIRR solver failures."""


class InvalidInputError(RateSolverError, ValueError):
    """Cash flows lack a sign change, or amounts and dates do not line up."""


class ConvergenceFailureError(RateSolverError, RuntimeError):
    """The IRR bracket search ran out of attempts without bracketing a root."""

    def __init__(self, message: str, *, evaluations: int = 0) -> None:
        super().__init__(message)
        self.evaluations = evaluations


# Selector tuple for grouped exception handling
SOLVER_ERRORS = (InvalidInputError, ConvergenceFailureError)

__all__ = [
    "RateSolverError",
    "InvalidInputError",
    "ConvergenceFailureError",
    "SOLVER_ERRORS",
]
