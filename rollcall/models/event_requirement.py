"""EventRequirement ORM: a member whose availability is mandatory for an event's date.

Invariants:
    - Always belongs to an Event (event_id FK, cascade on delete)
    - Unique per (event_id, member_id)
"""

import uuid

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from rollcall.db.base import Base


class EventRequirement(Base):
    __tablename__ = "event_requirements"
    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_event_requirements_member"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_id: Mapped[str] = mapped_column(String(64), nullable=False)

    event: Mapped["Event"] = relationship(
        "Event", back_populates="requirements",
    )
