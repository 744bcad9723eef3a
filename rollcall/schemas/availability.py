"""Availability Schemas: per-month submissions and overviews."""

from datetime import date

from pydantic import BaseModel, Field

from rollcall.core.availability_rules import PeriodOverview
from rollcall.schemas.types import IsoDate


class AvailabilitySubmit(BaseModel):
    """A member's complete answer for one month; replaces any earlier answer."""
    available: list[IsoDate] = Field(default_factory=list, max_length=31)
    unavailable: list[IsoDate] = Field(default_factory=list, max_length=31)


class MemberAvailabilityOut(BaseModel):
    scope_id: str
    member_id: str
    period: str
    available: list[date]


class DateAvailabilityOut(BaseModel):
    date: date
    count: int
    member_ids: list[str]
    weekend: bool


class PeriodOverviewOut(BaseModel):
    scope_id: str
    period: str
    dates: list[DateAvailabilityOut]
    registered_members: list[str]
    unregistered_members: list[str]

    @classmethod
    def from_overview(cls, scope_id: str, overview: PeriodOverview) -> "PeriodOverviewOut":
        return cls(
            scope_id=scope_id,
            period=overview.period.key,
            dates=[
                DateAvailabilityOut(
                    date=d.date, count=d.count,
                    member_ids=list(d.member_ids), weekend=d.weekend,
                )
                for d in overview.dates
            ],
            registered_members=list(overview.registered_members),
            unregistered_members=list(overview.unregistered_members),
        )
