"""Availability Store: SQLAlchemy implementation of AvailabilityRepository.

Invariants:
    - replace_range deletes then inserts inside the caller's transaction; the caller commits
    - list_facts returns facts ordered by (date, member_id)
"""

from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.candidate_finder import AvailabilityFact
from rollcall.core.domain_types import AvailabilityState, MemberId, ScopeId
from rollcall.models.availability import Availability


class SqlAvailabilityStore:
    """Availability persistence over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_facts(
        self,
        scope_id: ScopeId,
        start: date,
        end: date,
        state: AvailabilityState | None = None,
        member_id: MemberId | None = None,
    ) -> list[AvailabilityFact]:
        query = (
            select(Availability)
            .where(Availability.scope_id == scope_id)
            .where(Availability.day >= start)
            .where(Availability.day <= end)
        )
        if state is not None:
            query = query.where(Availability.state == state.value)
        if member_id is not None:
            query = query.where(Availability.member_id == member_id)
        query = query.order_by(Availability.day, Availability.member_id)

        result = await self.db.execute(query)
        return [
            AvailabilityFact(
                scope_id=ScopeId(row.scope_id),
                member_id=MemberId(row.member_id),
                date=row.day,
                state=AvailabilityState(row.state),
            )
            for row in result.scalars().all()
        ]

    async def replace_range(
        self,
        scope_id: ScopeId,
        member_id: MemberId,
        start: date,
        end: date,
        entries: list[tuple[date, AvailabilityState]],
    ) -> None:
        await self.db.execute(
            delete(Availability)
            .where(Availability.scope_id == scope_id)
            .where(Availability.member_id == member_id)
            .where(Availability.day >= start)
            .where(Availability.day <= end)
        )
        self.db.add_all([
            Availability(
                scope_id=scope_id, member_id=member_id,
                day=day, state=state.value,
            )
            for day, state in entries
        ])
        await self.db.flush()

    async def registered_members(self, scope_id: ScopeId) -> list[MemberId]:
        result = await self.db.execute(
            select(Availability.member_id)
            .where(Availability.scope_id == scope_id)
            .distinct()
            .order_by(Availability.member_id)
        )
        return [MemberId(m) for m in result.scalars().all()]
