import math

import pytest

from finrate.errors import ConvergenceFailureError, InvalidInputError
from finrate.finance.irr import IrrOutcome, irr, npv, solve_irr


def test_npv_zero_rate():
    cf = [-100.0, 30.0, 40.0, 50.0]
    assert abs(npv(0.0, cf) - sum(cf)) < 1e-9


def test_npv_first_flow_is_undiscounted():
    assert npv(0.5, [-42.0]) == -42.0
    assert npv(0.10, [-1000.0, 500.0, 500.0, 500.0]) == pytest.approx(243.425995, abs=1e-6)


def test_irr_simple():
    # root of -100 + 60/x + 60/x^2 is 13.066%; the 0.01 descent reports 13.07
    assert irr(1000, [-100.0, 60.0, 60.0]) == pytest.approx(13.07)


def test_irr_large_rate_scenario():
    r = irr(10000, [-6, 297, 307])
    assert 4951 <= r <= 4952
    assert r == pytest.approx(4951.3)


def test_irr_is_a_root_within_step_tolerance():
    cfs = [-1000.0, 300.0, 400.0, 500.0, 200.0]
    r = irr(10000, cfs)
    scale = max(abs(c) for c in cfs)
    # NPV moves by well under 1% of scale across one 0.01 step
    assert abs(npv(r / 100.0, cfs)) < 0.01 * scale
    # and the sign flips across the reported rate
    assert npv((r + 0.01) / 100.0, cfs) < 0 < npv((r - 0.02) / 100.0, cfs)


def test_irr_is_deterministic():
    cfs = [-500.0, 120.0, 180.0, 260.0]
    assert irr(5000, cfs) == irr(5000, cfs)


@pytest.mark.parametrize("cfs", [[100, 200], [-100, -200], [0, 0, 0], []])
def test_irr_requires_sign_change(cfs):
    with pytest.raises(InvalidInputError):
        irr(100, cfs)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        irr(100, [1.0, 2.0])


def test_irr_attempt_cap_covers_ascent():
    # [-6, 297, 307] needs ~4952 evaluations just to climb to the bracket
    with pytest.raises(ConvergenceFailureError) as ei:
        irr(5000 - 100, [-6, 297, 307])
    assert ei.value.evaluations == 4900


def test_irr_attempt_cap_covers_descent():
    # 4952 climbing + 72 descending evaluations are needed; the descent is capped too
    assert irr(5024, [-6, 297, 307]) == pytest.approx(4951.3)
    with pytest.raises(ConvergenceFailureError):
        irr(5023, [-6, 297, 307])


def test_irr_never_bracketing_fails_instead_of_looping():
    # NPV tends to +100 as the rate grows; it never crosses zero going up
    with pytest.raises(ConvergenceFailureError):
        irr(200, [100.0, -1.0])


def test_irr_descent_below_minus_100_percent_fails():
    # NPV < 0 for every rate above -100%: the descent runs off the domain
    with pytest.raises(ConvergenceFailureError):
        irr(10_000_000, [-100.0, 10.0, -5.0])


def test_irr_negative_rate_root():
    # -100 + 50/(1+r) = 0 at r = -50%
    r = irr(100_000, [-100.0, 50.0])
    assert r == pytest.approx(-50.0, abs=0.02)


def test_solve_irr_tags_outcomes():
    ok = solve_irr(1000, [-100.0, 60.0, 60.0])
    assert isinstance(ok, IrrOutcome)
    assert ok.ok and ok.status == "ok" and ok.value == pytest.approx(13.07)

    bad = solve_irr(1000, [1.0, 2.0])
    assert not bad.ok and bad.status == "invalid_input" and bad.value is None

    stuck = solve_irr(10, [-6, 297, 307])
    assert not stuck.ok and stuck.status == "no_convergence"
    assert isinstance(stuck.error, ConvergenceFailureError)


def test_irr_accepts_any_numeric_sequence():
    r = irr(1000, (x for x in [-100, 60, 60]))
    assert math.isclose(r, 13.07)


def test_npv_overflowing_discount_terms_vanish():
    # (1 + 9.99)^t leaves float range near t=296; those terms count as 0
    assert npv(9.99, [5.0] + [1.0] * 400) == pytest.approx(5.0 + 1.0 / 9.99, rel=1e-9)


def test_irr_long_series_fails_cleanly_when_climb_overflows():
    # NPV stays near +100 while the climb pushes (1+r)^300 past float range
    cfs = [100.0] + [-1.0] * 300
    with pytest.raises(ConvergenceFailureError):
        irr(10000, cfs)
    stuck = solve_irr(10000, cfs)
    assert stuck.status == "no_convergence" and stuck.value is None
