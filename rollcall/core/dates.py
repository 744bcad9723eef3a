"""Date Utilities: calendar parsing, weekday numbering and scheduling periods.

Invariants:
    - Dates are naive calendar dates (datetime.date), never converted across timezones
    - Weekdays use 0=Sunday .. 6=Saturday (chat-platform convention), not Python's Monday=0
    - parse_iso_date accepts exactly YYYY-MM-DD; anything else raises InvalidDateError
    - A Period is always one whole calendar month

Design Decisions:
    - Strict regex before date.fromisoformat: fromisoformat also accepts compact and
      week-date forms on Python 3.11+, which the wire format does not allow
    - "today" is always a parameter: keeps this module pure and testable
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from collections.abc import Iterable, Iterator

from rollcall.core.domain_types import Weekday, WEEKEND
from rollcall.core.errors import InputValidationError, InvalidDateError, InvalidWeekdayError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str | date, field: str = "date") -> date:
    """Parse YYYY-MM-DD into a date. date instances pass through unchanged."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise InvalidDateError(value, field)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDateError(value, field)


def weekday_of(day: date) -> Weekday:
    """Weekday of a date, 0=Sunday .. 6=Saturday."""
    return Weekday(day.isoweekday() % 7)


def is_weekend(day: date) -> bool:
    return weekday_of(day) in WEEKEND


def validate_weekdays(values: Iterable[int] | None) -> frozenset[Weekday] | None:
    """Validate a day-of-week filter. None or empty means "no filter"."""
    if values is None:
        return None
    result = set()
    for v in values:
        # bool is an int subclass; True/False are never weekdays
        if isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 6:
            raise InvalidWeekdayError(v)
        result.add(Weekday(v))
    return frozenset(result) or None


def validate_range(start: date, end: date) -> None:
    if start > end:
        raise InputValidationError(
            f"start date {start.isoformat()} is after end date {end.isoformat()}",
            "start_date", "INVALID_DATE_RANGE",
        )


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date from start to end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


# ─── Periods ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Period:
    """One calendar month: the unit availability is submitted and replaced in."""
    year: int
    month: int

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def month_period(year: int, month: int) -> Period:
    """Validated Period constructor for boundary input."""
    if not 1 <= month <= 12:
        raise InputValidationError(
            f"month {month} out of range (1-12)", "month", "INVALID_PERIOD",
        )
    if not date.min.year <= year <= date.max.year:
        raise InputValidationError(
            f"year {year} out of range", "year", "INVALID_PERIOD",
        )
    return Period(year, month)


def next_month_period(today: date) -> Period:
    """The calendar month after today's (December rolls over to January)."""
    if today.month == 12:
        return Period(today.year + 1, 1)
    return Period(today.year, today.month + 1)
