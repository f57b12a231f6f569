from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Sequence, Tuple

from finrate.errors import InvalidInputError
from finrate.finance.dates import DateValue, to_datetime
from finrate.finance.utils import as_float, has_sign_change


@dataclass(frozen=True)
class CashFlowSeries:
    """Amounts at periods 0..N (index = period)."""

    amounts: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.amounts)

    @property
    def has_sign_change(self) -> bool:
        return has_sign_change(self.amounts)

    def require_sign_change(self, label: str = "cash flows") -> None:
        if not self.has_sign_change:
            raise InvalidInputError(f"{label} need at least one positive value and one negative value")


@dataclass(frozen=True)
class DatedCashFlows(CashFlowSeries):
    """Amounts paired one-to-one with calendar dates; dates[0] is t=0."""

    dates: Tuple[datetime, ...] = ()

    def __post_init__(self) -> None:
        if len(self.amounts) != len(self.dates):
            raise InvalidInputError(
                f"Number of cash flows and dates should match ({len(self.amounts)} != {len(self.dates)})"
            )


def parse_amounts(raw: Any) -> Tuple[float, ...]:
    """Coerce a list of numbers (or numeric strings) into a float tuple."""
    if not isinstance(raw, (list, tuple)):
        raise InvalidInputError(f"cashflows must be a list of numbers, got {type(raw).__name__}")
    out: List[float] = []
    for i, v in enumerate(raw):
        f = as_float(v)
        if f is None or isinstance(v, bool):
            raise InvalidInputError(f"cashflows[{i}] is not a number: {v!r}")
        out.append(f)
    return tuple(out)


def build_series(raw: Any) -> CashFlowSeries:
    return CashFlowSeries(amounts=parse_amounts(raw))


def build_dated(raw_amounts: Any, raw_dates: Sequence[DateValue] | None) -> DatedCashFlows:
    """
    Pair amounts with dates from a scenario mapping.
    Accepts YAML dates, datetimes, or ISO strings ("2016-08-19").
    """
    if not isinstance(raw_dates, (list, tuple)):
        raise InvalidInputError("dates must be a list of dates")
    amounts = parse_amounts(raw_amounts)
    dates = tuple(to_datetime(d) for d in raw_dates)
    return DatedCashFlows(amounts=amounts, dates=dates)
