"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - Ledger IO is accessed only through AttendanceRepository
    - Every call made inside one `atomic()` block commits or rolls back together

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, but the decisions that USE these
      results (core/attendance_rules.py) are plain functions
    - get_event(for_update=True) takes the database row lock that serializes
      join/cancel across worker processes; the in-process lock covers one worker
"""

from contextlib import AbstractAsyncContextManager
from datetime import date, datetime
from typing import Protocol

from rollcall.core.attendance_rules import AttendanceEntry, EventSnapshot
from rollcall.core.candidate_finder import AvailabilityFact
from rollcall.core.domain_types import (
    AttendanceStatus, AvailabilityState, EventId, MemberId, ScopeId,
)


class AttendanceRepository(Protocol):
    """Contract for attendance persistence, implemented by shell."""
    def atomic(self) -> AbstractAsyncContextManager[None]: ...
    async def get_event(
        self, event_id: EventId, for_update: bool = False,
    ) -> EventSnapshot | None: ...
    async def count_confirmed(self, event_id: EventId) -> int: ...
    async def get_record(
        self, event_id: EventId, member_id: MemberId,
    ) -> AttendanceEntry | None: ...
    async def insert_record(
        self,
        event_id: EventId,
        member_id: MemberId,
        status: AttendanceStatus,
        joined_at: datetime,
    ) -> AttendanceEntry: ...
    async def delete_record(self, event_id: EventId, member_id: MemberId) -> None: ...
    async def update_status(
        self, event_id: EventId, member_id: MemberId, status: AttendanceStatus,
    ) -> None: ...
    async def first_waitlisted_by_join_order(
        self, event_id: EventId,
    ) -> AttendanceEntry | None: ...
    async def list_records(self, event_id: EventId) -> list[AttendanceEntry]: ...


class AvailabilityRepository(Protocol):
    """Contract for availability persistence, implemented by shell."""
    async def list_facts(
        self,
        scope_id: ScopeId,
        start: date,
        end: date,
        state: AvailabilityState | None = None,
        member_id: MemberId | None = None,
    ) -> list[AvailabilityFact]: ...
    async def replace_range(
        self,
        scope_id: ScopeId,
        member_id: MemberId,
        start: date,
        end: date,
        entries: list[tuple[date, AvailabilityState]],
    ) -> None: ...
    async def registered_members(self, scope_id: ScopeId) -> list[MemberId]: ...
