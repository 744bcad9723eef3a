"""Availability Routes: per-month submissions and the scope overview.

Invariants:
    - {year}/{month} path segments are validated into a Period before any query
    - PUT replaces the member's whole month (dates omitted are forgotten)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.api.dependencies import MemberIdPath, ScopeIdPath
from rollcall.core.dates import month_period
from rollcall.core.domain_types import MemberId, ScopeId
from rollcall.infrastructure.database import get_db
from rollcall.schemas.availability import (
    AvailabilitySubmit, MemberAvailabilityOut, PeriodOverviewOut,
)
from rollcall.services import availability_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/scopes", tags=["availability"])


@router.put(
    "/{scope_id}/members/{member_id}/availability/{year}/{month}",
    response_model=MemberAvailabilityOut,
)
async def submit_availability(
    body: AvailabilitySubmit,
    year: int,
    month: int,
    scope_id: ScopeIdPath,
    member_id: MemberIdPath,
    db: AsyncSession = Depends(get_db),
):
    """Replace a member's answer for one month."""
    period = month_period(year, month)
    await availability_service.submit_period(
        db, ScopeId(scope_id), MemberId(member_id), period,
        body.available, body.unavailable,
    )
    available = await availability_service.member_available_dates(
        db, ScopeId(scope_id), MemberId(member_id), period,
    )
    return MemberAvailabilityOut(
        scope_id=scope_id, member_id=member_id,
        period=period.key, available=available,
    )


@router.get(
    "/{scope_id}/members/{member_id}/availability/{year}/{month}",
    response_model=MemberAvailabilityOut,
)
async def get_member_availability(
    year: int,
    month: int,
    scope_id: ScopeIdPath,
    member_id: MemberIdPath,
    db: AsyncSession = Depends(get_db),
):
    period = month_period(year, month)
    available = await availability_service.member_available_dates(
        db, ScopeId(scope_id), MemberId(member_id), period,
    )
    return MemberAvailabilityOut(
        scope_id=scope_id, member_id=member_id,
        period=period.key, available=available,
    )


@router.get(
    "/{scope_id}/availability/{year}/{month}",
    response_model=PeriodOverviewOut,
)
async def get_period_overview(
    year: int,
    month: int,
    scope_id: ScopeIdPath,
    db: AsyncSession = Depends(get_db),
):
    """Who is available on each date of the month, plus who has not answered."""
    period = month_period(year, month)
    overview = await availability_service.period_overview(
        db, ScopeId(scope_id), period,
    )
    return PeriodOverviewOut.from_overview(scope_id, overview)
