"""Attendance Store: SQLAlchemy implementation of AttendanceRepository.

Invariants:
    - The only module that writes attendance_records rows
    - atomic() commits once on success and rolls back on ANY exit by exception,
      task cancellation included, so no partial insert or promotion is ever visible
    - get_event(for_update=True) issues SELECT ... FOR UPDATE on the event row
      (PostgreSQL); SQLite ignores the clause and relies on the in-process lock
    - A unique-constraint race on (event_id, member_id) surfaces as ConcurrencyError (retryable)
    - A PostgreSQL lock wait beyond lock_timeout surfaces as LedgerBusyError (retryable)

Design Decisions:
    - Returns core snapshots (EventSnapshot, AttendanceEntry), never ORM rows
    - SET LOCAL lock_timeout: bounds the row lock wait to the same budget as the in-process lock
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import lazyload

from rollcall.core.attendance_rules import AttendanceEntry, EventSnapshot
from rollcall.core.domain_types import (
    AttendanceStatus, EventId, EventStatus, MemberId, ScopeId,
)
from rollcall.core.errors import ConcurrencyError, ErrorContext, LedgerBusyError
from rollcall.models.attendance_record import AttendanceRecord
from rollcall.models.event import Event

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for lock_not_available
_LOCK_NOT_AVAILABLE = "55P03"


def _sqlstate(e: DBAPIError) -> str | None:
    orig = e.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def to_entry(row: AttendanceRecord) -> AttendanceEntry:
    return AttendanceEntry(
        event_id=EventId(row.event_id),
        member_id=MemberId(row.member_id),
        status=AttendanceStatus(row.status),
        joined_at=row.joined_at,
    )


def to_snapshot(event: Event) -> EventSnapshot:
    return EventSnapshot(
        id=EventId(event.id),
        scope_id=ScopeId(event.scope_id),
        title=event.title,
        max_participants=event.max_participants,
        status=EventStatus(event.status),
    )


class SqlAttendanceStore:
    """Attendance persistence over one AsyncSession."""

    def __init__(self, db: AsyncSession, lock_timeout_seconds: float | None = None):
        self.db = db
        self.lock_timeout_seconds = lock_timeout_seconds
        self._locked_event: EventId | None = None

    @asynccontextmanager
    async def atomic(self) -> AsyncGenerator[None, None]:
        """One transaction around the block: commit on success, roll back otherwise."""
        try:
            await self._bound_lock_wait()
            yield
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Attendance write raced with another writer: {e.orig}")
            raise ConcurrencyError(
                "Attendance changed concurrently; retry the operation",
            )
        except DBAPIError as e:
            await self.db.rollback()
            if _sqlstate(e) == _LOCK_NOT_AVAILABLE:
                raise LedgerBusyError(
                    str(self._locked_event), self.lock_timeout_seconds or 0.0,
                    ErrorContext(debug_info={"source": "row_lock"}),
                )
            raise
        except BaseException:
            await self.db.rollback()
            raise

    async def _bound_lock_wait(self) -> None:
        if self.lock_timeout_seconds is None:
            return
        if self.db.get_bind().dialect.name != "postgresql":
            return
        ms = int(self.lock_timeout_seconds * 1000)
        await self.db.execute(text(f"SET LOCAL lock_timeout = '{ms}ms'"))

    async def get_event(
        self, event_id: EventId, for_update: bool = False,
    ) -> EventSnapshot | None:
        query = (
            select(Event)
            .where(Event.id == event_id)
            .options(lazyload(Event.requirements))
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update()
            self._locked_event = event_id
        result = await self.db.execute(query)
        event = result.scalar_one_or_none()
        return to_snapshot(event) if event else None

    async def count_confirmed(self, event_id: EventId) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(AttendanceRecord)
            .where(AttendanceRecord.event_id == event_id)
            .where(AttendanceRecord.status == AttendanceStatus.CONFIRMED.value)
        )
        return result.scalar_one()

    async def get_record(
        self, event_id: EventId, member_id: MemberId,
    ) -> AttendanceEntry | None:
        result = await self.db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.event_id == event_id)
            .where(AttendanceRecord.member_id == member_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return to_entry(row) if row else None

    async def insert_record(
        self,
        event_id: EventId,
        member_id: MemberId,
        status: AttendanceStatus,
        joined_at: datetime,
    ) -> AttendanceEntry:
        row = AttendanceRecord(
            event_id=event_id,
            member_id=member_id,
            status=status.value,
            joined_at=joined_at,
        )
        self.db.add(row)
        await self.db.flush()
        return to_entry(row)

    async def delete_record(self, event_id: EventId, member_id: MemberId) -> None:
        await self.db.execute(
            delete(AttendanceRecord)
            .where(AttendanceRecord.event_id == event_id)
            .where(AttendanceRecord.member_id == member_id)
        )

    async def update_status(
        self, event_id: EventId, member_id: MemberId, status: AttendanceStatus,
    ) -> None:
        await self.db.execute(
            update(AttendanceRecord)
            .where(AttendanceRecord.event_id == event_id)
            .where(AttendanceRecord.member_id == member_id)
            .values(status=status.value)
        )

    async def first_waitlisted_by_join_order(
        self, event_id: EventId,
    ) -> AttendanceEntry | None:
        result = await self.db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.event_id == event_id)
            .where(AttendanceRecord.status == AttendanceStatus.WAITLISTED.value)
            .order_by(
                AttendanceRecord.joined_at.asc(),
                AttendanceRecord.member_id.asc(),
            )
            .limit(1)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return to_entry(row) if row else None

    async def list_records(self, event_id: EventId) -> list[AttendanceEntry]:
        result = await self.db.execute(
            select(AttendanceRecord)
            .where(AttendanceRecord.event_id == event_id)
            .order_by(
                AttendanceRecord.joined_at.asc(),
                AttendanceRecord.member_id.asc(),
            )
            .execution_options(populate_existing=True)
        )
        return [to_entry(row) for row in result.scalars().all()]
