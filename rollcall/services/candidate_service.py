"""Candidate Service: loads a scope's availability and ranks it.

Invariants:
    - Input is validated (validate_candidate_query) before any query runs
    - Only AVAILABLE facts within [start, end] are loaded; ranking itself is pure
    - limit is always passed explicitly by the caller
"""

import logging
from collections.abc import Iterable
from datetime import date

from rollcall.core.candidate_finder import (
    Candidate, rank_candidates, validate_candidate_query,
)
from rollcall.core.domain_types import AvailabilityState, ScopeId
from rollcall.core.repository_protocols import AvailabilityRepository

logger = logging.getLogger(__name__)


async def find_candidates(
    store: AvailabilityRepository,
    scope_id: ScopeId,
    start: date,
    end: date,
    *,
    limit: int,
    min_participants: int,
    required_members: Iterable[str] = (),
    weekdays: Iterable[int] | None = None,
    total_registered: int | None = None,
) -> list[Candidate]:
    """Best dates in [start, end] for the scope under the given constraints."""
    weekday_filter = validate_candidate_query(
        start, end, weekdays, limit, min_participants,
    )
    facts = await store.list_facts(
        scope_id, start, end, AvailabilityState.AVAILABLE,
    )
    candidates = rank_candidates(
        facts, start, end,
        limit=limit,
        min_participants=min_participants,
        required_members=required_members,
        weekdays=weekday_filter,
        total_registered=total_registered,
    )
    logger.info(
        f"Ranked {len(candidates)} candidate(s) from {len(facts)} fact(s) "
        f"for {start.isoformat()}..{end.isoformat()}",
        extra={"scope_id": scope_id, "count": len(candidates)},
    )
    return candidates
