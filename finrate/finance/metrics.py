"""
Rate metrics façade.

Design:
- IRR/NPV implementations live only in finrate.finance.irr (singleton).
- This module must not *define* irr/npv (no 'def irr' / 'def npv' here).
- It can re-export helper(s) used by tests/pipelines.
"""
from .irr import npv as npv, irr as irr, xirr as xirr, solve_irr as solve_irr  # re-exports only

__all__ = ["npv", "irr", "xirr", "solve_irr"]
