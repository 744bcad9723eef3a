"""Date Utilities: strict ISO parsing, Sunday-zero weekdays and month periods."""

from datetime import date

import pytest

from rollcall.core.dates import (
    Period, is_weekend, iter_dates, month_period, next_month_period,
    parse_iso_date, validate_range, validate_weekdays, weekday_of,
)
from rollcall.core.errors import InputValidationError, InvalidDateError, InvalidWeekdayError


def test_parse_iso_date_accepts_calendar_date():
    assert parse_iso_date("2024-02-29") == date(2024, 2, 29)


def test_parse_iso_date_passes_date_through():
    d = date(2024, 6, 1)
    assert parse_iso_date(d) is d


@pytest.mark.parametrize("value", [
    "2023-02-29", "2024-13-01", "2024-6-1", "20240601", "2024-W22-1",
    "2024-06-01T00:00", "", None, 20240601,
])
def test_parse_iso_date_rejects_everything_else(value):
    with pytest.raises(InvalidDateError):
        parse_iso_date(value)


def test_parse_iso_date_reports_field():
    with pytest.raises(InvalidDateError) as exc_info:
        parse_iso_date("nope", field="end_date")
    assert exc_info.value.field == "end_date"


def test_weekday_of_counts_from_sunday():
    assert weekday_of(date(2024, 6, 2)) == 0  # Sunday
    assert weekday_of(date(2024, 6, 3)) == 1  # Monday
    assert weekday_of(date(2024, 6, 1)) == 6  # Saturday


def test_is_weekend():
    assert is_weekend(date(2024, 6, 1))
    assert is_weekend(date(2024, 6, 2))
    assert not is_weekend(date(2024, 6, 5))


def test_validate_weekdays_normalizes():
    assert validate_weekdays([1, 1, 3]) == frozenset({1, 3})
    assert validate_weekdays(None) is None
    assert validate_weekdays([]) is None


@pytest.mark.parametrize("bad", [-1, 7, True, "1", 1.0])
def test_validate_weekdays_rejects(bad):
    with pytest.raises(InvalidWeekdayError):
        validate_weekdays([bad])


def test_validate_range_allows_single_day():
    validate_range(date(2024, 6, 1), date(2024, 6, 1))


def test_validate_range_rejects_inverted():
    with pytest.raises(InputValidationError):
        validate_range(date(2024, 6, 2), date(2024, 6, 1))


def test_iter_dates_is_inclusive():
    days = list(iter_dates(date(2024, 2, 28), date(2024, 3, 1)))
    assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_period_bounds():
    p = Period(2024, 2)
    assert p.first_day == date(2024, 2, 1)
    assert p.last_day == date(2024, 2, 29)
    assert p.days_in_month == 29
    assert p.key == "2024-02"
    assert p.contains(date(2024, 2, 15))
    assert not p.contains(date(2024, 3, 1))


def test_month_period_rejects_month_13():
    with pytest.raises(InputValidationError) as exc_info:
        month_period(2024, 13)
    assert exc_info.value.code == "INVALID_PERIOD"


def test_next_month_period():
    assert next_month_period(date(2024, 6, 15)) == Period(2024, 7)


def test_next_month_period_rolls_over_december():
    assert next_month_period(date(2024, 12, 31)) == Period(2025, 1)
