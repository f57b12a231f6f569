# finrate/adapters.py
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

import numpy_financial as npf

from finrate.config import SolverSettings
from finrate.errors import InvalidInputError
from finrate.finance.cashflow import DatedCashFlows, build_dated, build_series
from finrate.finance.dates import durations
from finrate.finance.irr import solve_irr, xirr, xnpv
from finrate.finance.utils import as_float, round_half_up

logger = logging.getLogger(__name__)


# ------------------------------
# Small helpers (no policy here)
# ------------------------------
def _discount_rate(scenario: Dict[str, Any], settings: SolverSettings) -> float:
    return float(as_float(scenario.get("discount_rate"), settings.discount_rate))


def _reference_irr_pct(amounts) -> Optional[float]:
    """numpy-financial IRR in percent (4 dp), None when it finds no root."""
    val = float(npf.irr(list(amounts)))
    if not math.isfinite(val):
        return None
    return round(val * 100.0, 4)


def _xnpv_at(rate: float, dated: Optional[DatedCashFlows]) -> Optional[float]:
    """XNPV at a percent rate, None when the flows never parsed."""
    if dated is None:
        return None
    return round_half_up(xnpv(rate / 100.0, dated.amounts, durations(dated.dates)), 2)


# ------------------------------
# Public adapter(s)
# ------------------------------
def run_irr(name: str, scenario: Dict[str, Any], settings: SolverSettings) -> Dict[str, Any]:
    """
    Periodic scenario -> summary row:
      {
        'name': str,
        'status': 'ok' | 'invalid_input' | 'no_convergence',
        'irr_pct': float | None,
        'error': str | None,
        'max_tries': int,
        'periods': int,
        'npv_at_discount': float,      # numpy-financial npv at discount_rate (percent)
        'discount_rate': float,
        'reference_irr_pct': float | None,   # numpy-financial irr, for comparison
      }
    """
    series = build_series(scenario.get("cashflows"))
    max_tries = int(as_float(scenario.get("max_tries"), settings.irr_max_tries))
    rate = _discount_rate(scenario, settings)

    outcome = solve_irr(max_tries, series.amounts)
    if not outcome.ok:
        logger.warning("Scenario %s: IRR %s (%s)", name, outcome.status, outcome.error)

    return {
        "name": name,
        "status": outcome.status,
        "irr_pct": outcome.value,
        "error": None if outcome.ok else str(outcome.error),
        "max_tries": max_tries,
        "periods": len(series),
        "npv_at_discount": round_half_up(float(npf.npv(rate / 100.0, list(series.amounts))), 2),
        "discount_rate": rate,
        "reference_irr_pct": _reference_irr_pct(series.amounts) if series.has_sign_change else None,
    }


def run_xirr(name: str, scenario: Dict[str, Any], settings: SolverSettings) -> Dict[str, Any]:
    """
    Dated scenario -> summary row. A None `xirr_pct` with status
    'no_result' means Newton-Raphson did not settle from the seed.
    """
    guess = as_float(scenario.get("guess"), settings.default_guess)
    rate = _discount_rate(scenario, settings)

    dated = None
    try:
        dated = build_dated(scenario.get("cashflows"), scenario.get("dates"))
        value = xirr(dated.amounts, dated.dates, guess, max_iterations=settings.xirr_max_iterations)
        status = "ok" if value is not None else "no_result"
        error = None
    except InvalidInputError as e:
        value, status, error = None, "invalid_input", str(e)

    if status != "ok":
        logger.warning("Scenario %s: XIRR %s", name, status)

    return {
        "name": name,
        "status": status,
        "xirr_pct": value,
        "error": error,
        "guess": guess,
        "first_date": min(dated.dates).date().isoformat() if dated is not None and dated.dates else None,
        "last_date": max(dated.dates).date().isoformat() if dated is not None and dated.dates else None,
        "npv_at_discount": _xnpv_at(rate, dated),
        "discount_rate": rate,
    }


RUNNERS = {
    "irr": run_irr,
    "xirr": run_xirr,
}
