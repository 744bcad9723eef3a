"""Availability Rules: validation and summaries for per-period submissions.

Invariants:
    - A submission covers exactly one Period; every date must fall inside it
    - A date is either AVAILABLE or UNAVAILABLE in one submission, never both
    - A submission replaces the member's whole period (no incremental patch)
    - Overview dates ascend, members within a date ascend

Design Decisions:
    - Pending, half-finished selections are presentation state; this module only
      ever sees the complete submission for a period
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from rollcall.core.candidate_finder import AvailabilityFact
from rollcall.core.dates import Period, weekday_of
from rollcall.core.domain_types import AvailabilityState, MemberId, WEEKEND
from rollcall.core.errors import InputValidationError


def validate_submission(
    period: Period,
    available: Iterable[date],
    unavailable: Iterable[date] = (),
) -> list[tuple[date, AvailabilityState]]:
    """Normalize a submission into (date, state) pairs sorted by date."""
    available_set = set(available)
    unavailable_set = set(unavailable)

    outside = sorted(
        d for d in available_set | unavailable_set if not period.contains(d)
    )
    if outside:
        raise InputValidationError(
            f"{len(outside)} date(s) outside {period.key}: "
            f"{', '.join(d.isoformat() for d in outside[:5])}",
            "dates", "DATE_OUTSIDE_PERIOD",
        )

    both = sorted(available_set & unavailable_set)
    if both:
        raise InputValidationError(
            f"date(s) marked both available and unavailable: "
            f"{', '.join(d.isoformat() for d in both[:5])}",
            "dates", "CONFLICTING_STATES",
        )

    pairs = [(d, AvailabilityState.AVAILABLE) for d in available_set]
    pairs += [(d, AvailabilityState.UNAVAILABLE) for d in unavailable_set]
    return sorted(pairs)


@dataclass(frozen=True)
class DateAvailability:
    date: date
    member_ids: tuple[MemberId, ...]

    @property
    def count(self) -> int:
        return len(self.member_ids)

    @property
    def weekend(self) -> bool:
        return weekday_of(self.date) in WEEKEND


@dataclass(frozen=True)
class PeriodOverview:
    """Who is available on which date of a period, plus who has not answered."""
    period: Period
    dates: list[DateAvailability] = field(default_factory=list)
    registered_members: list[MemberId] = field(default_factory=list)
    unregistered_members: list[MemberId] = field(default_factory=list)


def summarize_availability(
    period: Period,
    facts: Iterable[AvailabilityFact],
    registered_members: Iterable[str],
) -> PeriodOverview:
    """Group a period's AVAILABLE facts by date.

    unregistered_members are the scope's registered members with no AVAILABLE
    date inside the period.
    """
    by_date: dict[date, set[MemberId]] = defaultdict(set)
    for fact in facts:
        if fact.state == AvailabilityState.AVAILABLE and period.contains(fact.date):
            by_date[fact.date].add(fact.member_id)

    answered = set().union(*by_date.values()) if by_date else set()
    registered = sorted(set(registered_members))
    return PeriodOverview(
        period=period,
        dates=[
            DateAvailability(day, tuple(sorted(by_date[day])))
            for day in sorted(by_date)
        ],
        registered_members=[MemberId(m) for m in registered],
        unregistered_members=[MemberId(m) for m in registered if m not in answered],
    )
