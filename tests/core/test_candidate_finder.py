"""Candidate Finder: verifies filtering, tagging and ordering of ranked dates.

Tests:
    - Dates below min_participants are dropped, not scored
    - Required members and weekday filters drop dates before scoring
    - Exactly one of WEEKDAY / WEEKEND on every candidate
    - Ordering is count desc, then date asc; limit truncates after sorting
    - Raising min_participants never grows the result
"""

from datetime import date

import pytest

from rollcall.core.candidate_finder import (
    AvailabilityFact, Candidate, candidate_tags, group_available_by_date,
    rank_candidates, validate_candidate_query,
)
from rollcall.core.domain_types import AvailabilityState, CandidateTag
from rollcall.core.errors import InputValidationError, InvalidDateError, InvalidWeekdayError

JUNE_START = date(2024, 6, 1)
JUNE_END = date(2024, 6, 30)


def _facts(*pairs):
    return [AvailabilityFact.from_pair(d, m, "guild-1") for d, m in pairs]


def _rank(facts, **kwargs):
    kwargs.setdefault("limit", 10)
    kwargs.setdefault("min_participants", 1)
    return rank_candidates(facts, JUNE_START, JUNE_END, **kwargs)


def test_two_member_date_kept_single_member_date_dropped():
    facts = _facts(("2024-06-01", "A"), ("2024-06-01", "B"), ("2024-06-02", "A"))

    result = _rank(facts, min_participants=2, limit=3)

    assert len(result) == 1
    assert result[0].date == date(2024, 6, 1)
    assert result[0].count == 2
    assert result[0].member_ids == ("A", "B")
    assert result[0].tags == (CandidateTag.FULL_ATTENDANCE, CandidateTag.WEEKEND)


def test_empty_input_returns_empty_list():
    assert _rank([]) == []


def test_facts_outside_range_are_ignored():
    facts = _facts(("2024-05-31", "A"), ("2024-07-01", "B"), ("2024-06-10", "C"))

    result = _rank(facts)

    assert [c.date for c in result] == [date(2024, 6, 10)]


def test_unavailable_facts_are_ignored():
    facts = [
        AvailabilityFact("g", "A", date(2024, 6, 3), AvailabilityState.UNAVAILABLE),
        AvailabilityFact("g", "B", date(2024, 6, 3)),
    ]

    result = _rank(facts)

    assert result[0].member_ids == ("B",)


def test_duplicate_facts_count_once():
    facts = _facts(("2024-06-03", "A"), ("2024-06-03", "A"))

    assert _rank(facts)[0].count == 1


def test_sorted_by_count_then_date():
    facts = _facts(
        ("2024-06-05", "A"),
        ("2024-06-04", "A"), ("2024-06-04", "B"),
        ("2024-06-03", "C"),
        ("2024-06-06", "A"), ("2024-06-06", "B"),
    )

    result = _rank(facts)

    assert [c.date.day for c in result] == [4, 6, 3, 5]


def test_limit_applies_after_sorting():
    facts = _facts(
        ("2024-06-03", "A"),
        ("2024-06-20", "A"), ("2024-06-20", "B"), ("2024-06-20", "C"),
    )

    result = _rank(facts, limit=1)

    assert [c.date for c in result] == [date(2024, 6, 20)]


def test_limit_zero_returns_nothing():
    facts = _facts(("2024-06-03", "A"))
    assert _rank(facts, limit=0) == []


def test_required_members_must_all_be_present():
    facts = _facts(
        ("2024-06-03", "A"), ("2024-06-03", "B"),
        ("2024-06-04", "A"), ("2024-06-04", "C"), ("2024-06-04", "D"),
    )

    result = _rank(facts, required_members=["B"])

    assert [c.date for c in result] == [date(2024, 6, 3)]
    assert result[0].has_tag(CandidateTag.ALL_REQUIRED_PRESENT)


def test_all_required_present_absent_without_requirements():
    facts = _facts(("2024-06-03", "A"))
    assert not _rank(facts)[0].has_tag(CandidateTag.ALL_REQUIRED_PRESENT)


def test_weekday_filter_uses_sunday_zero():
    # 2024-06-02 is a Sunday, 2024-06-03 a Monday
    facts = _facts(("2024-06-02", "A"), ("2024-06-03", "A"))

    result = _rank(facts, weekdays=frozenset({0}))

    assert [c.date for c in result] == [date(2024, 6, 2)]


def test_empty_weekday_filter_means_no_filter():
    facts = _facts(("2024-06-02", "A"), ("2024-06-03", "A"))
    weekdays = validate_candidate_query(JUNE_START, JUNE_END, [], 10)

    assert weekdays is None
    assert len(_rank(facts, weekdays=weekdays)) == 2


def test_every_candidate_has_exactly_one_of_weekday_or_weekend():
    facts = _facts(*[(f"2024-06-{d:02d}", "A") for d in range(1, 31)])

    for c in _rank(facts, limit=31):
        assert c.has_tag(CandidateTag.WEEKDAY) != c.has_tag(CandidateTag.WEEKEND)


def test_raising_min_participants_never_grows_result():
    facts = _facts(
        ("2024-06-03", "A"), ("2024-06-03", "B"), ("2024-06-03", "C"),
        ("2024-06-04", "A"), ("2024-06-04", "B"),
        ("2024-06-05", "A"),
    )

    sizes = [len(_rank(facts, min_participants=m)) for m in range(1, 6)]

    assert sizes == sorted(sizes, reverse=True)
    assert sizes[:4] == [3, 2, 1, 0]


def test_total_registered_drives_full_attendance():
    facts = _facts(("2024-06-03", "A"), ("2024-06-03", "B"))

    with_registry = _rank(facts, total_registered=5)
    without = _rank(facts)

    assert not with_registry[0].has_tag(CandidateTag.FULL_ATTENDANCE)
    assert without[0].has_tag(CandidateTag.FULL_ATTENDANCE)


def test_tags_follow_declaration_order():
    # Saturday, 4 of 4 registered, min 2, with a required member
    tags = candidate_tags(date(2024, 6, 1), 4, 4, 2, required_present=True)
    assert tags == (
        CandidateTag.FULL_ATTENDANCE,
        CandidateTag.HIGH_TURNOUT,
        CandidateTag.ALL_REQUIRED_PRESENT,
        CandidateTag.WEEKEND,
    )


def test_high_turnout_needs_twice_the_minimum():
    assert CandidateTag.HIGH_TURNOUT not in candidate_tags(date(2024, 6, 3), 3, 10, 2, False)
    assert CandidateTag.HIGH_TURNOUT in candidate_tags(date(2024, 6, 3), 4, 10, 2, False)


def test_full_attendance_never_with_zero_registered():
    tags = candidate_tags(date(2024, 6, 3), 0, 0, 1, False)
    assert CandidateTag.FULL_ATTENDANCE not in tags


def test_group_available_by_date_collects_sets():
    facts = _facts(("2024-06-03", "B"), ("2024-06-03", "A"))
    grouped = group_available_by_date(facts, JUNE_START, JUNE_END)
    assert grouped == {date(2024, 6, 3): {"A", "B"}}


def test_candidate_to_dict():
    c = Candidate(
        date=date(2024, 6, 1), member_ids=("A", "B"),
        tags=(CandidateTag.FULL_ATTENDANCE, CandidateTag.WEEKEND),
    )
    assert c.to_dict() == {
        "date": "2024-06-01",
        "count": 2,
        "member_ids": ["A", "B"],
        "tags": ["full_attendance", "weekend"],
    }


def test_from_pair_rejects_bad_date():
    with pytest.raises(InvalidDateError):
        AvailabilityFact.from_pair("2024-02-30", "A")


@pytest.mark.parametrize("min_participants", [0, -1, True])
def test_validate_query_rejects_bad_minimum(min_participants):
    with pytest.raises(InputValidationError) as exc_info:
        validate_candidate_query(JUNE_START, JUNE_END, None, 5, min_participants)
    assert exc_info.value.code == "INVALID_MIN_PARTICIPANTS"


def test_validate_query_rejects_negative_limit():
    with pytest.raises(InputValidationError) as exc_info:
        validate_candidate_query(JUNE_START, JUNE_END, None, -1)
    assert exc_info.value.code == "INVALID_LIMIT"


def test_validate_query_rejects_inverted_range():
    with pytest.raises(InputValidationError) as exc_info:
        validate_candidate_query(JUNE_END, JUNE_START, None, 5)
    assert exc_info.value.code == "INVALID_DATE_RANGE"


def test_validate_query_rejects_weekday_seven():
    with pytest.raises(InvalidWeekdayError):
        validate_candidate_query(JUNE_START, JUNE_END, [1, 7], 5)
