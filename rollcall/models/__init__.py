"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Event is the aggregate root for requirements and attendance; availability is scoped by scope_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from rollcall.models.event import Event  # noqa: F401
from rollcall.models.event_requirement import EventRequirement  # noqa: F401
from rollcall.models.attendance_record import AttendanceRecord  # noqa: F401
from rollcall.models.availability import Availability  # noqa: F401
