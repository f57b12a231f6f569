# finrate/finance/irr.py
"""Rate-of-return solvers for periodic (IRR) and dated (XIRR) cash flows.

All NPV/IRR definitions live in this module; other modules import or
re-export them (see finance/metrics.py).

Public rates are in percent: 5 means 5%.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from finrate.errors import ConvergenceFailureError, InvalidInputError, RateSolverError
from finrate.finance.dates import DateValue, durations as year_durations
from finrate.finance.utils import has_sign_change, round_half_up

logger = logging.getLogger(__name__)

IRR_COARSE_STEP = 1.0
IRR_FINE_STEP = 0.01
XIRR_MAX_ITERATIONS = 100
XIRR_DECIMALS = 5


# ============================================================================
# PERIODIC NPV/IRR
# ============================================================================


def npv(rate: float, cashflows: Sequence[float]) -> float:
    """Periodic Net Present Value.

    NPV(r) = CF[0] + sum_{t=1..N} CF[t] / (1+r)^t

    Parameters
    ----------
    rate : float
        Discount rate (decimal, e.g. 0.12 for 12%)
    cashflows : Sequence[float]
        Cashflow series starting at t=0

    Returns
    -------
    float
        Net Present Value

    Notes
    -----
    - CF[0] is never discounted
    - Undefined at rate = -1; callers keep the rate above it
    - A term whose discount factor overflows contributes 0

    Examples
    --------
    >>> round(npv(0.10, [-1000, 500, 500, 500]), 3)
    243.426
    """
    base = 1.0 + float(rate)
    total = 0.0
    for t, cf in enumerate(cashflows):
        cf = float(cf)
        if t == 0:
            total += cf
            continue
        try:
            factor = base ** t
        except OverflowError:
            # factor past float range: the term discounts to 0
            continue
        if factor == 0.0:
            # factor underflowed: the term is +/-inf
            if cf != 0.0:
                total += math.copysign(math.inf, cf)
            continue
        total += cf / factor
    return total


def _percent_npv(cashflows: Sequence[float], max_tries: int) -> Callable[[float], float]:
    """NPV at a percent rate, counting calls and failing past `max_tries`."""
    evaluations = 0

    def evaluate(rate_pct: float) -> float:
        nonlocal evaluations
        evaluations += 1
        if evaluations > max_tries:
            raise ConvergenceFailureError(
                f"IRR can't find a result within {max_tries} evaluations",
                evaluations=evaluations - 1,
            )
        if 1.0 + rate_pct / 100.0 <= 0.0:
            raise ConvergenceFailureError(
                f"IRR search left the domain (rate {rate_pct:.2f}% <= -100%)",
                evaluations=evaluations,
            )
        value = npv(rate_pct / 100.0, cashflows)
        if math.isnan(value):
            raise ConvergenceFailureError(
                f"IRR search hit an undefined NPV at {rate_pct:.2f}%",
                evaluations=evaluations,
            )
        return value

    return evaluate


def _seek_zero(fn: Callable[[float], float]) -> float:
    """
    Seek the zero of a decreasing fn(x) to within +/-0.01.

    Climbs in whole steps from x=1 until fn(x) <= 0, then backs off in
    0.01 steps until fn(x) >= 0, and reports the last negative point.
    """
    x = 1.0
    while fn(x) > 0:
        x += IRR_COARSE_STEP
    logger.debug("IRR bracket: npv(%.0f%%) <= 0", x)
    while fn(x) < 0:
        x -= IRR_FINE_STEP
    return x + IRR_FINE_STEP


def irr(max_tries: int, cashflows: Sequence[float]) -> float:
    """Periodic Internal Rate of Return, in percent.

    Finds the rate at which npv() crosses zero with a linear bracket
    search: +1% steps up from 1%, then -0.01% steps back.

    Parameters
    ----------
    max_tries : int
        Cap on NPV evaluations across both search phases
    cashflows : Sequence[float]
        Cashflow series starting at t=0

    Returns
    -------
    float
        IRR in percent, rounded to 2 decimals (e.g. 13.07)

    Raises
    ------
    InvalidInputError
        Series lacks a positive or a negative value
    ConvergenceFailureError
        More than `max_tries` evaluations, or the search fell to -100%

    Examples
    --------
    >>> irr(1000, [-100, 60, 60])
    13.07
    """
    cfs = [float(x) for x in cashflows]
    if not has_sign_change(cfs):
        raise InvalidInputError("IRR requires at least one positive value and one negative value")

    root = _seek_zero(_percent_npv(cfs, int(max_tries)))
    return round_half_up(root, 2)


@dataclass(frozen=True)
class IrrOutcome:
    """Tagged IRR result: either `value` is set, or `error` explains why not."""

    value: Optional[float] = None
    error: Optional[RateSolverError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        if self.error is None:
            return "ok"
        if isinstance(self.error, InvalidInputError):
            return "invalid_input"
        return "no_convergence"

    @classmethod
    def success(cls, value: float) -> "IrrOutcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RateSolverError) -> "IrrOutcome":
        return cls(error=error)


def solve_irr(max_tries: int, cashflows: Sequence[float]) -> IrrOutcome:
    """irr() with its two failure kinds folded into an IrrOutcome."""
    try:
        return IrrOutcome.success(irr(max_tries, cashflows))
    except (InvalidInputError, ConvergenceFailureError) as exc:
        return IrrOutcome.failure(exc)


# ============================================================================
# DATE-AWARE XNPV/XIRR
# ============================================================================


def xnpv(rate: float, cashflows: Sequence[float], durations: Sequence[float]) -> float:
    """Date-adjusted NPV: sum CF[i] / (1+r)^durations[i].

    `durations` are year offsets from the first cash flow (see
    finance.dates.durations); `rate` is a decimal.
    """
    base = 1.0 + rate
    return sum(cf / base ** d for cf, d in zip(cashflows, durations))


def xnpv_derivative(rate: float, cashflows: Sequence[float], durations: Sequence[float]) -> float:
    """d/dr of xnpv(): sum -CF[i] * durations[i] * (1+r)^(-1-durations[i])."""
    base = 1.0 + rate
    return sum(-cf * d * base ** (-1.0 - d) for cf, d in zip(cashflows, durations))


def _newton_step(rate: float, cashflows: Sequence[float], durs: Sequence[float]) -> Optional[float]:
    """One Newton-Raphson step, or None when it cannot be taken on the reals."""
    if 1.0 + rate <= 0.0:
        return None
    try:
        slope = xnpv_derivative(rate, cashflows, durs)
        if slope == 0.0:
            return None
        nxt = rate - xnpv(rate, cashflows, durs) / slope
    except (OverflowError, ZeroDivisionError):
        return None
    return nxt if math.isfinite(nxt) else None


def _same(a: float, b: float, decimals: int) -> bool:
    return f"{a:.{decimals}f}" == f"{b:.{decimals}f}"


def xirr(
    cashflows: Sequence[float],
    dates: Sequence[DateValue],
    guess: Optional[float] = 0.0,
    *,
    max_iterations: int = XIRR_MAX_ITERATIONS,
) -> Optional[float]:
    """Extended Internal Rate of Return for dated cash flows, in percent.

    Newton-Raphson on xnpv() seeded at `guess` (a decimal; falsy means 0).
    Stops once two successive guesses agree to 5 decimals.

    Parameters
    ----------
    cashflows : Sequence[float]
        Cashflow amounts
    dates : Sequence[date | datetime | str]
        One date per cashflow; dates[0] is the t=0 reference
    guess : float, optional
        Starting rate as a decimal (0.1 = 10%)
    max_iterations : int
        Newton steps allowed before giving up

    Returns
    -------
    Optional[float]
        Annual rate in percent rounded to 2 decimals, or None if the
        iteration did not settle

    Raises
    ------
    InvalidInputError
        Lengths differ, or no sign change in the cashflows

    Notes
    -----
    - 365-day year, no leap-year adjustment
    - No bracketing fallback: a poor seed can yield None where a root exists

    Examples
    --------
    >>> from datetime import date
    >>> xirr([-1000, -100, 1200],
    ...      [date(2015, 12, 1), date(2016, 8, 1), date(2016, 8, 19)], 0)
    14.11
    """
    if len(cashflows) != len(dates):
        raise InvalidInputError("Number of cash flows and dates should match")
    cfs = [float(x) for x in cashflows]
    if not has_sign_change(cfs):
        raise InvalidInputError("XIRR requires at least one positive value and one negative value")

    durs = year_durations(dates)
    current = float(guess or 0.0)
    previous = current

    for step in range(1, int(max_iterations) + 1):
        previous = current
        nxt = _newton_step(previous, cfs, durs)
        if nxt is None:
            logger.debug("XIRR: Newton step undefined at rate %r (iteration %d)", previous, step)
            return None
        current = nxt
        if _same(previous, current, XIRR_DECIMALS):
            logger.debug("XIRR converged to %.8f after %d iterations", current, step)
            return round_half_up(current * 100.0, 2)

    logger.debug("XIRR: no convergence after %d iterations (last %r -> %r)", max_iterations, previous, current)
    return None


__all__ = [
    "npv",
    "irr",
    "IrrOutcome",
    "solve_irr",
    "xnpv",
    "xnpv_derivative",
    "xirr",
]
