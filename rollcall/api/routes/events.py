"""Event Routes: event lifecycle, roster and the participant ledger.

Invariants:
    - Join/cancel go through ParticipantLedger only (never direct record writes)
    - Retryable ledger errors are retried up to settings.ledger_max_attempts, then surfaced
    - Join/cancel answer 200 with an outcome, including EVENT_NOT_FOUND / NOT_FOUND
    - Confirm is allowed exactly once per event (409 afterwards)

Design Decisions:
    - Default candidate range on create is the next calendar month
    - Listing lives under /scopes/{scope_id}/events; everything else under /events/{id}
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.api.dependencies import MemberIdPath, ScopeIdPath, get_ledger
from rollcall.api.routes.candidates import check_limit
from rollcall.config import Settings, get_settings
from rollcall.core.dates import next_month_period
from rollcall.core.domain_types import EventId, MemberId, ScopeId
from rollcall.infrastructure.database import get_db
from rollcall.schemas.candidate import CandidateOut
from rollcall.schemas.event import (
    CancelOut, ConfirmDate, EventCreate, EventCreated, EventOut,
    JoinOut, RosterEntryOut, RosterOut,
)
from rollcall.services import event_service
from rollcall.services.participant_ledger import ParticipantLedger, run_with_retries

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["events"])


@router.post(
    "/events", response_model=EventCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_event(
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a PLANNING event and return its ranked candidate dates."""
    check_limit(body.candidate_limit, settings)
    if body.start_date is None:
        period = next_month_period(date.today())
        start, end = period.first_day, period.last_day
    else:
        start, end = body.start_date, body.end_date

    event, candidates = await event_service.create_event(
        db,
        scope_id=ScopeId(body.scope_id),
        title=body.title,
        created_by=MemberId(body.created_by),
        min_participants=body.min_participants,
        max_participants=body.max_participants,
        required_members=body.required_members,
        start=start,
        end=end,
        candidate_limit=body.candidate_limit,
        weekdays=body.weekdays,
        total_registered=body.total_registered,
    )
    return EventCreated(
        event=EventOut.from_event(event, 0, 0),
        candidates=[CandidateOut.from_candidate(c) for c in candidates],
    )


@router.get("/scopes/{scope_id}/events", response_model=list[EventOut])
async def list_scope_events(
    scope_id: ScopeIdPath,
    archived: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """Active (planning + confirmed) events by default; archived=true for history."""
    summaries = await event_service.list_events(db, ScopeId(scope_id), archived)
    return [
        EventOut.from_event(s.event, s.confirmed_count, s.waitlisted_count)
        for s in summaries
    ]


@router.get("/events/{event_id}", response_model=EventOut)
async def get_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    roster = await event_service.get_roster(db, event_id)
    return EventOut.from_event(
        roster.event, len(roster.confirmed), len(roster.waitlisted),
    )


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    """Delete the event together with its requirements and attendance."""
    await event_service.delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/events/{event_id}/confirm", response_model=EventOut)
async def confirm_event_date(
    event_id: UUID, body: ConfirmDate, db: AsyncSession = Depends(get_db),
):
    """Fix the event's date (PLANNING -> CONFIRMED)."""
    event = await event_service.confirm_date(db, event_id, body.date)
    return EventOut.from_event(event)


@router.get("/events/{event_id}/roster", response_model=RosterOut)
async def get_event_roster(event_id: UUID, db: AsyncSession = Depends(get_db)):
    """Confirmed and waitlisted members, each in join order."""
    roster = await event_service.get_roster(db, event_id)
    return RosterOut(
        event_id=roster.event.id,
        max_participants=roster.event.max_participants,
        confirmed=[RosterEntryOut.from_entry(e) for e in roster.confirmed],
        waitlisted=[RosterEntryOut.from_entry(e) for e in roster.waitlisted],
    )


@router.post(
    "/events/{event_id}/participants/{member_id}", response_model=JoinOut,
)
async def join_event(
    event_id: UUID,
    member_id: MemberIdPath,
    ledger: ParticipantLedger = Depends(get_ledger),
    settings: Settings = Depends(get_settings),
):
    """Join the event: confirmed while seats remain, waitlisted afterwards."""
    result = await run_with_retries(
        lambda: ledger.join(EventId(event_id), MemberId(member_id)),
        max_attempts=settings.ledger_max_attempts,
    )
    return JoinOut.from_result(result)


@router.delete(
    "/events/{event_id}/participants/{member_id}", response_model=CancelOut,
)
async def cancel_participation(
    event_id: UUID,
    member_id: MemberIdPath,
    ledger: ParticipantLedger = Depends(get_ledger),
    settings: Settings = Depends(get_settings),
):
    """Leave the event; a freed seat goes to the earliest waitlisted member."""
    result = await run_with_retries(
        lambda: ledger.cancel(EventId(event_id), MemberId(member_id)),
        max_attempts=settings.ledger_max_attempts,
    )
    return CancelOut.from_result(result)
