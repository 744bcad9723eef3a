"""Route Dependencies: shared path parameters and the per-request ledger.

Invariants:
    - One ParticipantLedger per request, bound to that request's session
    - The lock registry is process-wide (get_event_locks), never per request
"""

from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.config import Settings, get_settings
from rollcall.infrastructure.database import get_db
from rollcall.infrastructure.event_locks import EventLockRegistry, get_event_locks
from rollcall.services.attendance_store import SqlAttendanceStore
from rollcall.services.participant_ledger import ParticipantLedger

ScopeIdPath = Annotated[str, Path(min_length=1, max_length=64)]
MemberIdPath = Annotated[str, Path(min_length=1, max_length=64)]


def get_ledger(
    db: AsyncSession = Depends(get_db),
    locks: EventLockRegistry = Depends(get_event_locks),
    settings: Settings = Depends(get_settings),
) -> ParticipantLedger:
    store = SqlAttendanceStore(db, settings.ledger_lock_timeout_seconds)
    return ParticipantLedger(store, locks)
