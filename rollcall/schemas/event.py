"""Event Schemas: creation, confirmation, roster and ledger responses.

Invariants:
    - EventCreate.title: 1-200 chars, stripped, non-empty
    - max_participants, when set, is >= 1 and >= min_participants
    - start_date / end_date given together or not at all (default: next calendar month)
    - candidate_limit is required; there is no implicit default
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from rollcall.core.attendance_rules import AttendanceEntry, CancelResult, JoinResult
from rollcall.core.domain_types import CancelOutcome, EventStatus, JoinOutcome
from rollcall.models.event import Event
from rollcall.schemas.candidate import CandidateOut
from rollcall.schemas.types import IsoDate, MemberIdValue, WeekdayValue


class EventCreate(BaseModel):
    """Event creation with the constraints used to rank its candidate dates."""
    scope_id: str = Field(min_length=1, max_length=64)
    title: str = Field(min_length=1, max_length=200)
    created_by: MemberIdValue
    min_participants: int = Field(1, ge=1)
    max_participants: int | None = Field(None, ge=1)
    required_members: list[MemberIdValue] = Field(default_factory=list, max_length=25)
    weekdays: list[WeekdayValue] | None = Field(None, max_length=7)
    start_date: IsoDate | None = None
    end_date: IsoDate | None = None
    candidate_limit: int = Field(ge=1)
    total_registered: int | None = Field(None, ge=0)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v

    @model_validator(mode="after")
    def validate_constraints(self):
        if (
            self.max_participants is not None
            and self.max_participants < self.min_participants
        ):
            raise ValueError("max_participants must be >= min_participants")
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be given together")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class EventOut(BaseModel):
    id: UUID
    scope_id: str
    title: str
    min_participants: int
    max_participants: int | None
    scheduled_date: date | None
    status: EventStatus
    created_by: str
    required_members: list[str]
    confirmed_count: int | None = None
    waitlisted_count: int | None = None

    @classmethod
    def from_event(
        cls,
        event: Event,
        confirmed_count: int | None = None,
        waitlisted_count: int | None = None,
    ) -> "EventOut":
        return cls(
            id=event.id,
            scope_id=event.scope_id,
            title=event.title,
            min_participants=event.min_participants,
            max_participants=event.max_participants,
            scheduled_date=event.scheduled_date,
            status=EventStatus(event.status),
            created_by=event.created_by,
            required_members=event.required_member_ids,
            confirmed_count=confirmed_count,
            waitlisted_count=waitlisted_count,
        )


class EventCreated(BaseModel):
    event: EventOut
    candidates: list[CandidateOut]


class ConfirmDate(BaseModel):
    date: IsoDate


class RosterEntryOut(BaseModel):
    member_id: str
    joined_at: datetime

    @classmethod
    def from_entry(cls, entry: AttendanceEntry) -> "RosterEntryOut":
        return cls(member_id=entry.member_id, joined_at=entry.joined_at)


class RosterOut(BaseModel):
    event_id: UUID
    max_participants: int | None
    confirmed: list[RosterEntryOut]
    waitlisted: list[RosterEntryOut]


class JoinOut(BaseModel):
    outcome: JoinOutcome
    event_id: UUID
    member_id: str
    confirmed_count: int | None = None
    max_participants: int | None = None

    @classmethod
    def from_result(cls, r: JoinResult) -> "JoinOut":
        return cls(**r.to_dict())


class CancelOut(BaseModel):
    outcome: CancelOutcome
    event_id: UUID
    member_id: str
    promoted_member_id: str | None = None

    @classmethod
    def from_result(cls, r: CancelResult) -> "CancelOut":
        return cls(**r.to_dict())


class ArchiveRequest(BaseModel):
    """Archival sweep trigger; today defaults to the server's current date."""
    today: IsoDate | None = None


class ArchiveOut(BaseModel):
    archived: int
