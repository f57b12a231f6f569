#!/usr/bin/env python3
"""
Seed sweep for the rate solvers.

XIRR has no bracketing fallback and IRR stops at its attempt cap, so a
caller who wants a second opinion re-runs them with other seeds/caps.
This module does that over a grid and tabulates the outcomes.
"""
from typing import Optional, Sequence
import warnings

import numpy as np
import pandas as pd

from .finance.dates import DateValue
from .finance.irr import xirr


def seed_grid(
    n_seeds: int,
    low: float = -0.9,
    high: float = 1.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """
    Build XIRR starting guesses (decimal rates).

    Args:
        n_seeds: Number of guesses
        low, high: Range of guesses
        seed: If given, draw uniformly at random (reproducible);
              otherwise space the guesses evenly

    Returns:
        1-D array of guesses
    """
    if n_seeds < 1:
        raise ValueError("n_seeds must be >= 1")
    if seed is None:
        return np.linspace(low, high, n_seeds)
    rng = np.random.default_rng(seed)
    return rng.uniform(low, high, n_seeds)


def sweep_xirr(
    cashflows: Sequence[float],
    dates: Sequence[DateValue],
    guesses: Sequence[float],
    max_iterations: int = 100,
) -> pd.DataFrame:
    """
    Run XIRR once per guess.

    Returns:
        DataFrame with columns guess, xirr_pct, converged; attrs carry
        converged_share and distinct_roots (sorted unique xirr_pct values)
    """
    rows = []
    for g in guesses:
        value = xirr(cashflows, dates, float(g), max_iterations=max_iterations)
        rows.append({
            'guess': float(g),
            'xirr_pct': value,
            'converged': value is not None,
        })

    df = pd.DataFrame(rows, columns=['guess', 'xirr_pct', 'converged'])

    roots = sorted(set(df.loc[df['converged'], 'xirr_pct'].tolist()))
    df.attrs['converged_share'] = float(df['converged'].mean()) if len(df) else 0.0
    df.attrs['distinct_roots'] = roots

    if len(df) and not roots:
        warnings.warn(f"XIRR sweep: none of {len(df)} guesses converged")
    elif len(roots) > 1:
        warnings.warn(f"XIRR sweep: guesses converged to {len(roots)} different rates {roots}")

    return df

