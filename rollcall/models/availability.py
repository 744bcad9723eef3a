"""Availability ORM: a member's declared state for one calendar date in one scope.

Invariants:
    - Unique per (scope_id, member_id, date)
    - state is 'available' or 'unavailable'
    - Rows are replaced wholesale per member and month, never patched one by one
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Date, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from rollcall.db.base import Base


class Availability(Base):
    __tablename__ = "availabilities"
    __table_args__ = (
        UniqueConstraint(
            "scope_id", "member_id", "date", name="uq_availability_scope_member_date",
        ),
        Index("ix_availability_scope_date", "scope_id", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    scope_id: Mapped[str] = mapped_column(String(64), nullable=False)
    member_id: Mapped[str] = mapped_column(String(64), nullable=False)
    day: Mapped[date] = mapped_column("date", Date, nullable=False)
    state: Mapped[str] = mapped_column(
        String(20), nullable=False, default="available",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
