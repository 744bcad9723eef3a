"""Availability Rules: submission validation and period overview."""

from datetime import date

import pytest

from rollcall.core.availability_rules import summarize_availability, validate_submission
from rollcall.core.candidate_finder import AvailabilityFact
from rollcall.core.dates import Period
from rollcall.core.domain_types import AvailabilityState
from rollcall.core.errors import InputValidationError

JUNE = Period(2024, 6)


def test_submission_sorted_with_states():
    pairs = validate_submission(
        JUNE, [date(2024, 6, 10), date(2024, 6, 3)], [date(2024, 6, 5)],
    )
    assert pairs == [
        (date(2024, 6, 3), AvailabilityState.AVAILABLE),
        (date(2024, 6, 5), AvailabilityState.UNAVAILABLE),
        (date(2024, 6, 10), AvailabilityState.AVAILABLE),
    ]


def test_duplicate_dates_collapse():
    pairs = validate_submission(JUNE, [date(2024, 6, 3), date(2024, 6, 3)])
    assert len(pairs) == 1


def test_date_outside_period_rejected():
    with pytest.raises(InputValidationError) as exc_info:
        validate_submission(JUNE, [date(2024, 7, 1)])
    assert exc_info.value.code == "DATE_OUTSIDE_PERIOD"


def test_same_date_in_both_lists_rejected():
    with pytest.raises(InputValidationError) as exc_info:
        validate_submission(JUNE, [date(2024, 6, 3)], [date(2024, 6, 3)])
    assert exc_info.value.code == "CONFLICTING_STATES"


def test_empty_submission_is_allowed():
    assert validate_submission(JUNE, []) == []


def test_overview_groups_and_lists_unregistered():
    facts = [
        AvailabilityFact("g", "B", date(2024, 6, 1)),
        AvailabilityFact("g", "A", date(2024, 6, 1)),
        AvailabilityFact("g", "A", date(2024, 6, 4)),
        AvailabilityFact("g", "C", date(2024, 6, 4), AvailabilityState.UNAVAILABLE),
    ]

    overview = summarize_availability(JUNE, facts, ["C", "A", "B"])

    assert [d.date for d in overview.dates] == [date(2024, 6, 1), date(2024, 6, 4)]
    assert overview.dates[0].member_ids == ("A", "B")
    assert overview.dates[0].weekend
    assert not overview.dates[1].weekend
    assert overview.registered_members == ["A", "B", "C"]
    assert overview.unregistered_members == ["C"]


def test_overview_of_empty_period():
    overview = summarize_availability(JUNE, [], ["A"])
    assert overview.dates == []
    assert overview.unregistered_members == ["A"]
