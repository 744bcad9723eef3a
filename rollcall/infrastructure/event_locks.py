"""Per-Event Locks: in-process serialization of ledger operations keyed by event id.

Invariants:
    - At most one holder per event id at any time; different event ids never contend
    - Acquisition is bounded by timeout_seconds; on expiry LedgerBusyError (retryable) is raised
    - A lock entry exists only while some task holds or awaits it (no unbounded growth)
    - The lock is released on every exit path, cancellation included

Design Decisions:
    - asyncio.Lock per event over one global lock: operations on different events
      must not block each other
    - Reference count per entry instead of a WeakValueDictionary: entries are
      dropped deterministically when the last user leaves
    - Single-process scope only: cross-process serialization is the event row lock
      taken in services/attendance_store.py
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import UUID

from rollcall.core.errors import LedgerBusyError

logger = logging.getLogger(__name__)


class EventLockRegistry:
    """Hands out one asyncio.Lock per event id."""

    def __init__(self, timeout_seconds: float = 5.0):
        self.timeout_seconds = timeout_seconds
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._users: dict[UUID, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, event_id: UUID) -> bool:
        lock = self._locks.get(event_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, event_id: UUID) -> AsyncGenerator[None, None]:
        """Hold the event's lock for the duration of the block."""
        lock = self._locks.setdefault(event_id, asyncio.Lock())
        self._users[event_id] = self._users.get(event_id, 0) + 1
        try:
            try:
                await asyncio.wait_for(lock.acquire(), self.timeout_seconds)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Lock wait for event {event_id} exceeded {self.timeout_seconds}s",
                    extra={"event_id": event_id, "error_code": "LEDGER_BUSY"},
                )
                raise LedgerBusyError(str(event_id), self.timeout_seconds)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[event_id] -= 1
            if not self._users[event_id]:
                del self._users[event_id]
                del self._locks[event_id]


# Singleton (reset on startup so it is bound to the serving event loop)
event_locks: EventLockRegistry | None = None


def init_event_locks(timeout_seconds: float) -> EventLockRegistry:
    global event_locks
    event_locks = EventLockRegistry(timeout_seconds)
    return event_locks


def get_event_locks() -> EventLockRegistry:
    """FastAPI dependency for the process-wide lock registry."""
    if event_locks is None:
        from rollcall.config import get_settings
        return init_event_locks(get_settings().ledger_lock_timeout_seconds)
    return event_locks
