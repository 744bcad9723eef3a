"""Availability Service: period submissions and overviews for a scope.

Invariants:
    - submit_period replaces the member's whole month in one commit (replace-by-period)
    - Validation (core/availability_rules.py) runs before any write
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.availability_rules import (
    PeriodOverview, summarize_availability, validate_submission,
)
from rollcall.core.dates import Period
from rollcall.core.domain_types import AvailabilityState, MemberId, ScopeId
from rollcall.services.availability_store import SqlAvailabilityStore

logger = logging.getLogger(__name__)


async def submit_period(
    db: AsyncSession,
    scope_id: ScopeId,
    member_id: MemberId,
    period: Period,
    available: list[date],
    unavailable: list[date] | None = None,
) -> list[tuple[date, AvailabilityState]]:
    """Replace the member's availability for one month. Returns what was stored."""
    entries = validate_submission(period, available, unavailable or [])
    store = SqlAvailabilityStore(db)
    await store.replace_range(
        scope_id, member_id, period.first_day, period.last_day, entries,
    )
    await db.commit()
    logger.info(
        f"Availability for {period.key} replaced: {len(entries)} date(s)",
        extra={"scope_id": scope_id, "member_id": member_id, "count": len(entries)},
    )
    return entries


async def member_available_dates(
    db: AsyncSession, scope_id: ScopeId, member_id: MemberId, period: Period,
) -> list[date]:
    """The member's AVAILABLE dates in the month, ascending."""
    facts = await SqlAvailabilityStore(db).list_facts(
        scope_id, period.first_day, period.last_day,
        AvailabilityState.AVAILABLE, member_id,
    )
    return [f.date for f in facts]


async def period_overview(
    db: AsyncSession, scope_id: ScopeId, period: Period,
) -> PeriodOverview:
    store = SqlAvailabilityStore(db)
    facts = await store.list_facts(
        scope_id, period.first_day, period.last_day, AvailabilityState.AVAILABLE,
    )
    registered = await store.registered_members(scope_id)
    return summarize_availability(period, facts, registered)
