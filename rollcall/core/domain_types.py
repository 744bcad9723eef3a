"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - EventId wraps a UUID; ScopeId and MemberId wrap opaque strings from the chat platform
    - Weekday numbering is 0=Sunday .. 6=Saturday everywhere in the domain
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

EventId = NewType("EventId", UUID)
ScopeId = NewType("ScopeId", str)      # server / group boundary
MemberId = NewType("MemberId", str)    # opaque platform user id


# ─── Value Types ─────────────────────────────────────────────────

Weekday = NewType("Weekday", int)      # 0=Sunday .. 6=Saturday

SUNDAY = Weekday(0)
SATURDAY = Weekday(6)
WEEKDAYS = frozenset(Weekday(d) for d in range(1, 6))
WEEKEND = frozenset({SUNDAY, SATURDAY})


# ─── Enums ───────────────────────────────────────────────────────

class AvailabilityState(str, Enum):
    """Per-date availability a member declares for a period."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class EventStatus(str, Enum):
    """Event lifecycle. ARCHIVED is terminal."""
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    ARCHIVED = "archived"


class AttendanceStatus(str, Enum):
    """Status of a live attendance record. Cancellation deletes the record."""
    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"


class JoinOutcome(str, Enum):
    """Result of ParticipantLedger.join."""
    CONFIRMED = "confirmed"
    WAITLISTED = "waitlisted"
    ALREADY_CONFIRMED = "already_confirmed"
    ALREADY_WAITLISTED = "already_waitlisted"
    EVENT_NOT_FOUND = "event_not_found"


class CancelOutcome(str, Enum):
    """Result of ParticipantLedger.cancel."""
    CANCELLED = "cancelled"
    PROMOTED = "promoted"
    NOT_FOUND = "not_found"


class CandidateTag(str, Enum):
    """Reason tags attached to a candidate date, declared in display order."""
    FULL_ATTENDANCE = "full_attendance"
    HIGH_TURNOUT = "high_turnout"
    ALL_REQUIRED_PRESENT = "all_required_present"
    WEEKDAY = "weekday"
    WEEKEND = "weekend"
