"""Candidate Routes: ranked candidate dates for a scope.

Invariants:
    - limit is bounded by settings.candidate_max_limit (INVALID_LIMIT above it)
    - Read-only: ranking never writes
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.api.dependencies import ScopeIdPath
from rollcall.config import Settings, get_settings
from rollcall.core.domain_types import ScopeId
from rollcall.core.errors import InputValidationError
from rollcall.infrastructure.database import get_db
from rollcall.schemas.candidate import CandidateOut, CandidateQuery
from rollcall.services.availability_store import SqlAvailabilityStore
from rollcall.services.candidate_service import find_candidates

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/scopes", tags=["candidates"])


def check_limit(limit: int, settings: Settings) -> None:
    """Reject a candidate limit above the configured ceiling."""
    if limit > settings.candidate_max_limit:
        raise InputValidationError(
            f"limit must be at most {settings.candidate_max_limit}, got {limit}",
            "limit", "INVALID_LIMIT",
        )


@router.post("/{scope_id}/candidates", response_model=list[CandidateOut])
async def rank_scope_candidates(
    body: CandidateQuery,
    scope_id: ScopeIdPath,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Best dates in the requested range, most attendees first."""
    check_limit(body.limit, settings)
    candidates = await find_candidates(
        SqlAvailabilityStore(db), ScopeId(scope_id),
        body.start_date, body.end_date,
        limit=body.limit,
        min_participants=body.min_participants,
        required_members=body.required_members,
        weekdays=body.weekdays,
        total_registered=body.total_registered,
    )
    return [CandidateOut.from_candidate(c) for c in candidates]
