"""Attendance Rules: admission, promotion eligibility and waitlist order."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from rollcall.core.attendance_rules import (
    AttendanceEntry, CancelResult, JoinResult, admission_status,
    existing_join_outcome, frees_slot, is_full, join_outcome_for, split_roster,
)
from rollcall.core.domain_types import AttendanceStatus, CancelOutcome, JoinOutcome

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
EVENT = uuid4()


def _entry(member, status, offset_s=0):
    return AttendanceEntry(EVENT, member, status, T0 + timedelta(seconds=offset_s))


def test_unlimited_event_is_never_full():
    assert not is_full(None, 10_000)
    assert admission_status(None, 10_000) == AttendanceStatus.CONFIRMED


def test_full_at_capacity():
    assert not is_full(2, 1)
    assert is_full(2, 2)
    assert admission_status(2, 2) == AttendanceStatus.WAITLISTED


def test_existing_record_outcomes():
    assert existing_join_outcome(AttendanceStatus.CONFIRMED) == JoinOutcome.ALREADY_CONFIRMED
    assert existing_join_outcome(AttendanceStatus.WAITLISTED) == JoinOutcome.ALREADY_WAITLISTED
    assert existing_join_outcome(None) is None


def test_join_outcome_mirrors_status():
    assert join_outcome_for(AttendanceStatus.CONFIRMED) == JoinOutcome.CONFIRMED
    assert join_outcome_for(AttendanceStatus.WAITLISTED) == JoinOutcome.WAITLISTED


def test_only_confirmed_cancellation_frees_slot():
    assert frees_slot(AttendanceStatus.CONFIRMED)
    assert not frees_slot(AttendanceStatus.WAITLISTED)


def test_split_roster_orders_by_join_time_then_member():
    entries = [
        _entry("c", AttendanceStatus.WAITLISTED, 5),
        _entry("b", AttendanceStatus.WAITLISTED, 1),
        _entry("a", AttendanceStatus.WAITLISTED, 1),
        _entry("z", AttendanceStatus.CONFIRMED, 0),
    ]

    confirmed, waitlisted = split_roster(entries)

    assert [e.member_id for e in confirmed] == ["z"]
    assert [e.member_id for e in waitlisted] == ["a", "b", "c"]


def test_result_dicts_carry_wire_values():
    join = JoinResult(JoinOutcome.WAITLISTED, EVENT, "u-1", 3, 3).to_dict()
    assert join["outcome"] == "waitlisted"
    assert join["event_id"] == str(EVENT)

    cancel = CancelResult(CancelOutcome.PROMOTED, EVENT, "u-1", "u-2").to_dict()
    assert cancel["outcome"] == "promoted"
    assert cancel["promoted_member_id"] == "u-2"
