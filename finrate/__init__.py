"""Rate-of-return solvers: IRR over periodic and XIRR over dated cash flows."""

from .errors import ConvergenceFailureError, InvalidInputError, RateSolverError
from .finance.dates import year_fraction
from .finance.irr import IrrOutcome, irr, npv, solve_irr, xirr

__version__ = "0.1.0"

__all__ = [
    "irr",
    "xirr",
    "npv",
    "solve_irr",
    "IrrOutcome",
    "year_fraction",
    "RateSolverError",
    "InvalidInputError",
    "ConvergenceFailureError",
]
