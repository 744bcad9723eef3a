"""Initial schema: events, event_requirements, attendance_records, availabilities.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("scope_id", sa.String(64), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("min_participants", sa.Integer, nullable=False, server_default="1"),
        sa.Column("max_participants", sa.Integer, nullable=True),
        sa.Column("scheduled_date", sa.Date, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="planning"),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_events_scope_status", "events", ["scope_id", "status"])

    op.create_table(
        "event_requirements",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "event_id", UUID(as_uuid=True),
            sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("member_id", sa.String(64), nullable=False),
        sa.UniqueConstraint("event_id", "member_id", name="uq_event_requirements_member"),
    )

    # one record per (event, member); the waitlist scan reads the composite index
    op.create_table(
        "attendance_records",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "event_id", UUID(as_uuid=True),
            sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("member_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "member_id", name="uq_attendance_event_member"),
    )
    op.create_index(
        "ix_attendance_event_status_joined", "attendance_records",
        ["event_id", "status", "joined_at"],
    )

    op.create_table(
        "availabilities",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("scope_id", sa.String(64), nullable=False),
        sa.Column("member_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("state", sa.String(20), nullable=False, server_default="available"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "scope_id", "member_id", "date", name="uq_availability_scope_member_date",
        ),
    )
    op.create_index("ix_availability_scope_date", "availabilities", ["scope_id", "date"])


def downgrade() -> None:
    op.drop_index("ix_availability_scope_date", table_name="availabilities")
    op.drop_table("availabilities")
    op.drop_index("ix_attendance_event_status_joined", table_name="attendance_records")
    op.drop_table("attendance_records")
    op.drop_table("event_requirements")
    op.drop_index("ix_events_scope_status", table_name="events")
    op.drop_table("events")
