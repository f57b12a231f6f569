from .irr import IrrOutcome, npv, solve_irr, xirr, xnpv, xnpv_derivative

__all__ = ["IrrOutcome", "npv", "solve_irr", "xirr", "xnpv", "xnpv_derivative"]
