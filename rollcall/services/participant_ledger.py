"""Participant Ledger: capacity-bounded join/cancel with waitlist promotion.

Invariants:
    - Every join/cancel runs as ONE unit: per-event in-process lock, then one database
      transaction that starts by row-locking the event; nothing is read outside it
    - confirmed count never exceeds max_participants (count and insert share the unit)
    - a vacated confirmed seat promotes exactly the earliest waitlisted member, in place
    - at most one record per (event, member); the unique constraint backstops races
      between processes and is reported as a retryable ConcurrencyError
    - Already-in-state and not-found are returned as outcomes, never raised
    - Operations on different events never wait on each other

Design Decisions:
    - Decisions come from core/attendance_rules.py; this class only sequences IO around them
    - clock injectable: tests pin joined_at to prove waitlist ordering
    - run_with_retries re-runs the WHOLE operation (fresh reads), never a stale decision
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

from rollcall.core.attendance_rules import (
    CancelResult,
    JoinResult,
    admission_status,
    existing_join_outcome,
    frees_slot,
    join_outcome_for,
)
from rollcall.core.domain_types import (
    AttendanceStatus, CancelOutcome, EventId, JoinOutcome, MemberId,
)
from rollcall.core.errors import RollcallError
from rollcall.core.repository_protocols import AttendanceRepository
from rollcall.infrastructure.event_locks import EventLockRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ParticipantLedger:
    """Owns the attendance lifecycle of events."""

    def __init__(
        self,
        store: AttendanceRepository,
        locks: EventLockRegistry,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.locks = locks
        self.clock = clock

    async def join(self, event_id: EventId, member_id: MemberId) -> JoinResult:
        """Confirm the member, waitlist them when full, or report why not."""
        async with self.locks.hold(event_id):
            async with self.store.atomic():
                result = await self._join_unit(event_id, member_id)
        logger.info(
            f"Join {member_id} -> {event_id}: {result.outcome.value}",
            extra={
                "event_id": event_id, "member_id": member_id,
                "outcome": result.outcome.value,
            },
        )
        return result

    async def cancel(self, event_id: EventId, member_id: MemberId) -> CancelResult:
        """Drop the member's record and promote the next waitlisted member if a seat opened."""
        async with self.locks.hold(event_id):
            async with self.store.atomic():
                result = await self._cancel_unit(event_id, member_id)
        logger.info(
            f"Cancel {member_id} -> {event_id}: {result.outcome.value}",
            extra={
                "event_id": event_id, "member_id": member_id,
                "outcome": result.outcome.value,
                "promoted_member_id": result.promoted_member_id,
            },
        )
        return result

    async def _join_unit(self, event_id: EventId, member_id: MemberId) -> JoinResult:
        event = await self.store.get_event(event_id, for_update=True)

        existing = await self.store.get_record(event_id, member_id)
        already = existing_join_outcome(existing.status if existing else None)
        if already is not None:
            return JoinResult(already, event_id, member_id)

        if event is None:
            return JoinResult(JoinOutcome.EVENT_NOT_FOUND, event_id, member_id)

        confirmed = await self.store.count_confirmed(event_id)
        status = admission_status(event.max_participants, confirmed)
        await self.store.insert_record(event_id, member_id, status, self.clock())
        if status == AttendanceStatus.CONFIRMED:
            confirmed += 1
        return JoinResult(
            join_outcome_for(status), event_id, member_id,
            confirmed_count=confirmed,
            max_participants=event.max_participants,
        )

    async def _cancel_unit(self, event_id: EventId, member_id: MemberId) -> CancelResult:
        # row lock only; a missing event simply has no records
        await self.store.get_event(event_id, for_update=True)

        record = await self.store.get_record(event_id, member_id)
        if record is None:
            return CancelResult(CancelOutcome.NOT_FOUND, event_id, member_id)

        await self.store.delete_record(event_id, member_id)

        if frees_slot(record.status):
            nxt = await self.store.first_waitlisted_by_join_order(event_id)
            if nxt is not None:
                await self.store.update_status(
                    event_id, nxt.member_id, AttendanceStatus.CONFIRMED,
                )
                return CancelResult(
                    CancelOutcome.PROMOTED, event_id, member_id,
                    promoted_member_id=nxt.member_id,
                )

        return CancelResult(CancelOutcome.CANCELLED, event_id, member_id)


async def run_with_retries(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 50,
    max_delay_ms: int = 1000,
) -> T:
    """Re-run a whole ledger operation while it fails with a retryable RollcallError.

    Exponential backoff with ±25% jitter between attempts; the last error propagates.
    """
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except RollcallError as e:
            if not e.retryable or attempt == max_attempts:
                raise
            delay_ms = min(base_delay_ms * (2 ** (attempt - 1)), max_delay_ms)
            delay_ms *= random.uniform(0.75, 1.25)
            logger.warning(
                f"Retryable ledger error ({e.code}), attempt {attempt}/{max_attempts}, "
                f"retrying in {delay_ms:.0f}ms",
                extra={"error_code": e.code, "attempt": attempt},
            )
            await asyncio.sleep(delay_ms / 1000)
    raise RuntimeError("max_attempts must be >= 1")
