"""Event ORM: a scheduled gathering within a scope.

Invariants:
    - id is UUID primary key
    - status transitions: planning -> confirmed -> archived (terminal)
    - scheduled_date is NULL while planning and set exactly once on confirmation
    - max_participants NULL means unlimited

Design Decisions:
    - status stored as String(20) holding EventStatus values
    - attendance rows reference events with ON DELETE CASCADE; no ORM collection,
      so loading an Event never drags its roster along
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Integer, Date, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from rollcall.db.base import Base


class Event(Base):
    """Event aggregate root: owns its required members."""
    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_scope_status", "scope_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    scope_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    min_participants: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )
    max_participants: Mapped[int | None] = mapped_column(
        Integer, nullable=True,
    )
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="planning",
    )
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    requirements: Mapped[list["EventRequirement"]] = relationship(
        "EventRequirement", back_populates="event",
        cascade="all, delete-orphan", passive_deletes=True, lazy="selectin",
    )

    @property
    def required_member_ids(self) -> list[str]:
        return sorted(r.member_id for r in self.requirements)
