from datetime import date, datetime, timedelta, timezone

import pytest

from finrate.errors import InvalidInputError
from finrate.finance.cashflow import build_dated, build_series, parse_amounts
from finrate.finance.dates import durations, to_datetime, year_fraction
from finrate.finance.utils import has_sign_change, round_half_up


def test_year_fraction_uses_365_day_year():
    assert year_fraction(date(2021, 1, 1), date(2022, 1, 1)) == 1.0
    # leap years are not special-cased
    assert year_fraction(date(2016, 1, 1), date(2017, 1, 1)) == pytest.approx(366 / 365)


def test_year_fraction_is_absolute():
    a, b = date(2020, 3, 1), date(2020, 9, 1)
    assert year_fraction(a, b) == year_fraction(b, a) > 0


def test_year_fraction_counts_hours():
    start = datetime(2020, 1, 1, 0, 0)
    assert year_fraction(start, datetime(2020, 1, 1, 12, 0)) == pytest.approx(0.5 / 365)


def test_year_fraction_respects_utc_offsets():
    # midnight at UTC-12 is noon UTC, half a day after midnight UTC
    utc_midnight = datetime(2020, 1, 1, tzinfo=timezone.utc)
    west_midnight = datetime(2020, 1, 1, tzinfo=timezone(timedelta(hours=-12)))
    assert year_fraction(utc_midnight, west_midnight) == pytest.approx(0.5 / 365)
    assert durations([utc_midnight, "2020-01-01T12:00:00+00:00"])[1] == pytest.approx(0.5 / 365)


def test_durations_start_at_zero():
    ds = durations([date(2015, 12, 1), date(2016, 8, 1), date(2016, 8, 19)])
    assert ds[0] == 0.0
    assert ds[1] == pytest.approx(244 / 365)
    assert ds[2] == pytest.approx(262 / 365)
    assert durations([]) == ()


def test_to_datetime_variants():
    assert to_datetime("2016-08-19") == datetime(2016, 8, 19)
    assert to_datetime(date(2016, 8, 19)) == datetime(2016, 8, 19)
    aware = datetime(2016, 8, 19, 6, tzinfo=timezone.utc)
    assert to_datetime(aware) == datetime(2016, 8, 19, 6)
    assert to_datetime("2016-08-19T08:00:00+02:00") == datetime(2016, 8, 19, 6)
    with pytest.raises(InvalidInputError):
        to_datetime("19/08/2016")
    with pytest.raises(InvalidInputError):
        to_datetime(20160819)


@pytest.mark.parametrize(
    "x, expected",
    [(14.105399, 14.11), (4951.300000000001, 4951.3), (0.125, 0.13), (-0.125, -0.12), (2.0, 2.0)],
)
def test_round_half_up(x, expected):
    assert round_half_up(x, 2) == expected


def test_has_sign_change():
    assert has_sign_change([-1, 0, 2])
    assert not has_sign_change([0, 1, 2])
    assert not has_sign_change([])


def test_parse_amounts_rejects_junk():
    assert parse_amounts(["-6", 297, 307.0]) == (-6.0, 297.0, 307.0)
    with pytest.raises(InvalidInputError):
        parse_amounts([1, "x"])
    with pytest.raises(InvalidInputError):
        parse_amounts([True, -1])
    with pytest.raises(InvalidInputError):
        parse_amounts("1,2,3")


def test_series_sign_check():
    s = build_series([-100, 60, 60])
    assert len(s) == 3 and s.has_sign_change
    with pytest.raises(InvalidInputError):
        build_series([1, 2]).require_sign_change()


def test_build_dated_pairs_amounts_with_dates():
    d = build_dated([-1000, 1100], ["2020-01-01", date(2021, 1, 1)])
    assert d.dates == (datetime(2020, 1, 1), datetime(2021, 1, 1))
    assert d.amounts == (-1000.0, 1100.0)
    d.require_sign_change()


def test_build_dated_length_mismatch():
    with pytest.raises(InvalidInputError):
        build_dated([-1000, 1100], ["2020-01-01"])
    with pytest.raises(InvalidInputError):
        build_dated([-1000, 1100], None)
