"""Attendance Rules: the participant ledger's state transitions as pure decisions.

Invariants:
    - Per (event, member): ∅ -> CONFIRMED, ∅ -> WAITLISTED -> CONFIRMED, {CONFIRMED, WAITLISTED} -> ∅
    - CONFIRMED never goes back to WAITLISTED (no demotion)
    - A new record is WAITLISTED iff max_participants is set and confirmed_count >= max_participants
    - Only a cancelled CONFIRMED record frees a slot; cancelling a WAITLISTED record promotes nobody
    - Waitlist order is joined_at ascending, member_id ascending on equal timestamps

Design Decisions:
    - Decisions split from IO: services/participant_ledger.py runs them inside one
      locked transaction, these functions only answer "what happens next"
    - Snapshots (EventSnapshot, AttendanceEntry) instead of ORM rows: core never sees SQLAlchemy
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from rollcall.core.domain_types import (
    AttendanceStatus, CancelOutcome, EventId, EventStatus, JoinOutcome, MemberId, ScopeId,
)


@dataclass(frozen=True)
class EventSnapshot:
    """The slice of an Event the ledger needs."""
    id: EventId
    scope_id: ScopeId
    title: str
    max_participants: int | None
    status: EventStatus


@dataclass(frozen=True)
class AttendanceEntry:
    """One live attendance record."""
    event_id: EventId
    member_id: MemberId
    status: AttendanceStatus
    joined_at: datetime


@dataclass(frozen=True)
class JoinResult:
    outcome: JoinOutcome
    event_id: EventId
    member_id: MemberId
    confirmed_count: int | None = None
    max_participants: int | None = None

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "event_id": str(self.event_id),
            "member_id": self.member_id,
            "confirmed_count": self.confirmed_count,
            "max_participants": self.max_participants,
        }


@dataclass(frozen=True)
class CancelResult:
    outcome: CancelOutcome
    event_id: EventId
    member_id: MemberId
    promoted_member_id: MemberId | None = None

    def to_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "event_id": str(self.event_id),
            "member_id": self.member_id,
            "promoted_member_id": self.promoted_member_id,
        }


def existing_join_outcome(existing: AttendanceStatus | None) -> JoinOutcome | None:
    """Outcome for a member who already holds a record, None if they hold none."""
    if existing == AttendanceStatus.CONFIRMED:
        return JoinOutcome.ALREADY_CONFIRMED
    if existing == AttendanceStatus.WAITLISTED:
        return JoinOutcome.ALREADY_WAITLISTED
    return None


def is_full(max_participants: int | None, confirmed_count: int) -> bool:
    """True when a new joiner must wait. None means unlimited."""
    return max_participants is not None and confirmed_count >= max_participants


def admission_status(
    max_participants: int | None, confirmed_count: int,
) -> AttendanceStatus:
    """Status a fresh joiner is inserted with."""
    if is_full(max_participants, confirmed_count):
        return AttendanceStatus.WAITLISTED
    return AttendanceStatus.CONFIRMED


def join_outcome_for(status: AttendanceStatus) -> JoinOutcome:
    if status == AttendanceStatus.WAITLISTED:
        return JoinOutcome.WAITLISTED
    return JoinOutcome.CONFIRMED


def frees_slot(cancelled: AttendanceStatus) -> bool:
    """Whether cancelling a record in this status triggers a promotion scan."""
    return cancelled == AttendanceStatus.CONFIRMED


def waitlist_order(entry: AttendanceEntry) -> tuple[datetime, str]:
    """Sort key giving the waitlist its total order."""
    return (entry.joined_at, entry.member_id)


def split_roster(
    entries: Iterable[AttendanceEntry],
) -> tuple[list[AttendanceEntry], list[AttendanceEntry]]:
    """(confirmed, waitlisted), each in join order."""
    ordered = sorted(entries, key=waitlist_order)
    confirmed = [e for e in ordered if e.status == AttendanceStatus.CONFIRMED]
    waitlisted = [e for e in ordered if e.status == AttendanceStatus.WAITLISTED]
    return confirmed, waitlisted
