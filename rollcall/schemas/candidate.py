"""Candidate Schemas: ranking request and ranked-date response.

Invariants:
    - limit is required (no default) and >= 1; the route applies the configured upper bound
    - start_date <= end_date
    - weekdays use 0=Sunday .. 6=Saturday
"""

from datetime import date

from pydantic import BaseModel, Field, model_validator

from rollcall.core.candidate_finder import Candidate
from rollcall.core.domain_types import CandidateTag
from rollcall.schemas.types import IsoDate, MemberIdValue, WeekdayValue


class CandidateQuery(BaseModel):
    """Constraints for ranking the dates of a range."""
    start_date: IsoDate
    end_date: IsoDate
    limit: int = Field(ge=1)
    min_participants: int = Field(1, ge=1)
    required_members: list[MemberIdValue] = Field(default_factory=list, max_length=25)
    weekdays: list[WeekdayValue] | None = Field(None, max_length=7)
    total_registered: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class CandidateOut(BaseModel):
    date: date
    count: int
    member_ids: list[str]
    tags: list[CandidateTag]

    @classmethod
    def from_candidate(cls, c: Candidate) -> "CandidateOut":
        return cls(
            date=c.date, count=c.count,
            member_ids=list(c.member_ids), tags=list(c.tags),
        )
