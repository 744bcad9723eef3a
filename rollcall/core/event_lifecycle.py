"""Event Lifecycle: PLANNING -> CONFIRMED -> ARCHIVED transition rules.

Invariants:
    - The date is set exactly once, on PLANNING -> CONFIRMED
    - ARCHIVED is terminal
    - Archival is decided by date comparison alone and never concerns attendance
"""

from datetime import date

from rollcall.core.domain_types import EventStatus

ACTIVE_STATUSES = frozenset({EventStatus.PLANNING, EventStatus.CONFIRMED})


def can_confirm(status: EventStatus) -> bool:
    return status == EventStatus.PLANNING


def is_active(status: EventStatus) -> bool:
    return status in ACTIVE_STATUSES


def is_archivable(status: EventStatus, event_date: date | None, today: date) -> bool:
    """Whether the external sweep may archive this event today."""
    if status not in ACTIVE_STATUSES or event_date is None:
        return False
    return event_date < today
