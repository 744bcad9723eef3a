"""Event Service: event creation, date confirmation, listing, roster and archival.

Invariants:
    - create_event ranks candidates BEFORE persisting, so invalid constraints write nothing
    - confirm_date moves PLANNING -> CONFIRMED exactly once, under a row lock
    - archive_past_events only ever touches events.status, never attendance rows
    - delete_event removes attendance through the database FK cascade, not row by row

Design Decisions:
    - Direct SQLAlchemy queries (no repository) for event CRUD; the ledger's
      attendance IO stays behind AttendanceRepository
    - Event lifecycle rules come from core/event_lifecycle.py
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.attendance_rules import AttendanceEntry, split_roster
from rollcall.core.candidate_finder import Candidate
from rollcall.core.domain_types import (
    AttendanceStatus, EventId, EventStatus, MemberId, ScopeId,
)
from rollcall.core.errors import (
    EventAlreadyConfirmedError, ErrorContext, ResourceNotFoundError,
)
from rollcall.core.event_lifecycle import ACTIVE_STATUSES, can_confirm, is_archivable
from rollcall.models.attendance_record import AttendanceRecord
from rollcall.models.event import Event
from rollcall.models.event_requirement import EventRequirement
from rollcall.services.attendance_store import SqlAttendanceStore
from rollcall.services.availability_store import SqlAvailabilityStore
from rollcall.services.candidate_service import find_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventSummary:
    event: Event
    confirmed_count: int
    waitlisted_count: int


@dataclass(frozen=True)
class Roster:
    event: Event
    confirmed: list[AttendanceEntry]
    waitlisted: list[AttendanceEntry]


async def create_event(
    db: AsyncSession,
    *,
    scope_id: ScopeId,
    title: str,
    created_by: MemberId,
    min_participants: int,
    max_participants: int | None,
    required_members: Iterable[str],
    start: date,
    end: date,
    candidate_limit: int,
    weekdays: Iterable[int] | None = None,
    total_registered: int | None = None,
) -> tuple[Event, list[Candidate]]:
    """Persist a PLANNING event and return the ranked candidate dates for it."""
    required = sorted(set(required_members))
    candidates = await find_candidates(
        SqlAvailabilityStore(db), scope_id, start, end,
        limit=candidate_limit,
        min_participants=min_participants,
        required_members=required,
        weekdays=weekdays,
        total_registered=total_registered,
    )

    event = Event(
        scope_id=scope_id,
        title=title,
        min_participants=min_participants,
        max_participants=max_participants,
        status=EventStatus.PLANNING.value,
        created_by=created_by,
        requirements=[EventRequirement(member_id=m) for m in required],
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)
    logger.info(
        f"Event '{title}' created with {len(candidates)} candidate date(s)",
        extra={"scope_id": scope_id, "event_id": event.id, "count": len(candidates)},
    )
    return event, candidates


async def get_event_or_404(
    db: AsyncSession, event_id: UUID, for_update: bool = False,
) -> Event:
    query = select(Event).where(Event.id == event_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    event = result.scalar_one_or_none()
    if not event:
        raise ResourceNotFoundError(
            "Event", str(event_id), ErrorContext(event_id=str(event_id)),
        )
    return event


async def confirm_date(db: AsyncSession, event_id: UUID, chosen: date) -> Event:
    """Fix the event's date. Only allowed while the event is PLANNING."""
    event = await get_event_or_404(db, event_id, for_update=True)
    status = EventStatus(event.status)
    if not can_confirm(status):
        await db.rollback()
        raise EventAlreadyConfirmedError(str(event_id), status.value)
    event.scheduled_date = chosen
    event.status = EventStatus.CONFIRMED.value
    await db.commit()
    logger.info(
        f"Event {event_id} confirmed for {chosen.isoformat()}",
        extra={"event_id": event_id, "scope_id": event.scope_id},
    )
    return event


async def list_events(
    db: AsyncSession, scope_id: ScopeId, archived: bool = False,
) -> list[EventSummary]:
    """Active (planning + confirmed) or archived events of a scope, with seat counts."""
    statuses = (
        [EventStatus.ARCHIVED.value] if archived
        else [s.value for s in ACTIVE_STATUSES]
    )
    result = await db.execute(
        select(Event)
        .where(Event.scope_id == scope_id)
        .where(Event.status.in_(statuses))
        .order_by(Event.scheduled_date.asc().nulls_last(), Event.created_at.asc())
    )
    events = result.scalars().all()
    counts = await _attendance_counts(db, [e.id for e in events])
    return [
        EventSummary(
            event=e,
            confirmed_count=counts.get((e.id, AttendanceStatus.CONFIRMED.value), 0),
            waitlisted_count=counts.get((e.id, AttendanceStatus.WAITLISTED.value), 0),
        )
        for e in events
    ]


async def _attendance_counts(
    db: AsyncSession, event_ids: list[UUID],
) -> dict[tuple[UUID, str], int]:
    if not event_ids:
        return {}
    result = await db.execute(
        select(
            AttendanceRecord.event_id, AttendanceRecord.status, func.count(),
        )
        .where(AttendanceRecord.event_id.in_(event_ids))
        .group_by(AttendanceRecord.event_id, AttendanceRecord.status)
    )
    return {(eid, status): n for eid, status, n in result.all()}


async def get_roster(db: AsyncSession, event_id: UUID) -> Roster:
    event = await get_event_or_404(db, event_id)
    entries = await SqlAttendanceStore(db).list_records(EventId(event_id))
    confirmed, waitlisted = split_roster(entries)
    return Roster(event=event, confirmed=confirmed, waitlisted=waitlisted)


async def delete_event(db: AsyncSession, event_id: UUID) -> None:
    await get_event_or_404(db, event_id)
    await db.execute(delete(Event).where(Event.id == event_id))
    await db.commit()
    logger.info(f"Event {event_id} deleted", extra={"event_id": event_id})


async def archive_past_events(db: AsyncSession, today: date) -> int:
    """Archive active events dated before today. Returns how many were archived.

    Called by an external scheduler; nothing in-process runs it periodically.
    """
    result = await db.execute(
        select(Event.id, Event.status, Event.scheduled_date)
        .where(Event.status.in_([s.value for s in ACTIVE_STATUSES]))
        .where(Event.scheduled_date.is_not(None))
        .where(Event.scheduled_date < today)
    )
    ids = [
        eid for eid, status, day in result.all()
        if is_archivable(EventStatus(status), day, today)
    ]
    if ids:
        await db.execute(
            update(Event)
            .where(Event.id.in_(ids))
            .values(status=EventStatus.ARCHIVED.value)
        )
    await db.commit()
    logger.info(
        f"Archived {len(ids)} past event(s) before {today.isoformat()}",
        extra={"count": len(ids)},
    )
    return len(ids)
