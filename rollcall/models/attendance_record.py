"""AttendanceRecord ORM: one member's live seat (or waitlist place) at one event.

Invariants:
    - Unique per (event_id, member_id): the database backstop for "one record per member"
    - status is 'confirmed' or 'waitlisted'; cancellation deletes the row (no tombstone)
    - joined_at is set on insert and never changed, promotion included
    - Written only by services/attendance_store.py on behalf of the participant ledger

Design Decisions:
    - (event_id, status, joined_at) index: serves both count_confirmed and the
      first-waitlisted scan
    - ON DELETE CASCADE from events: deleting an event removes its roster in the database
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from rollcall.db.base import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_attendance_event_member"),
        Index("ix_attendance_event_status_joined", "event_id", "status", "joined_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
