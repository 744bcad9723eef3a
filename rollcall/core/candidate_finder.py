"""Candidate Finder: ranks the dates of a period by who can attend.

Invariants:
    - Pure: no IO, no clock, no mutation of the caller's facts
    - Only AVAILABLE facts dated within [start, end] (inclusive) are counted
    - Filters run in order weekday -> required members -> minimum headcount;
      a date failing any of them is dropped, not scored
    - Tags are independent predicates emitted in CandidateTag declaration order;
      every candidate carries exactly one of WEEKDAY / WEEKEND
    - Ordering is count descending, then date ascending; output is reproducible
    - registered_count only feeds FULL_ATTENDANCE, never filtering
    - limit is explicit at every call site; there is no implicit default

Design Decisions:
    - min_participants is not clamped here: the boundary (schemas, validate_candidate_query)
      owns input validation
    - member_ids sorted ascending: set semantics per date, stable wire output
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from rollcall.core.dates import (
    parse_iso_date, validate_range, validate_weekdays, weekday_of,
)
from rollcall.core.domain_types import (
    AvailabilityState, CandidateTag, MemberId, ScopeId, Weekday, WEEKDAYS, WEEKEND,
)
from rollcall.core.errors import InputValidationError


@dataclass(frozen=True)
class AvailabilityFact:
    """One member's declared state for one date in one scope."""
    scope_id: ScopeId
    member_id: MemberId
    date: date
    state: AvailabilityState = AvailabilityState.AVAILABLE

    @classmethod
    def from_pair(
        cls, date_str: str, member_id: str, scope_id: str = "",
    ) -> "AvailabilityFact":
        """Build an AVAILABLE fact from the (ISO date, member id) wire pair."""
        return cls(
            scope_id=ScopeId(scope_id),
            member_id=MemberId(member_id),
            date=parse_iso_date(date_str),
        )


@dataclass(frozen=True)
class Candidate:
    """A scored date. Derived per call, never persisted."""
    date: date
    member_ids: tuple[MemberId, ...]
    tags: tuple[CandidateTag, ...]

    @property
    def count(self) -> int:
        return len(self.member_ids)

    def has_tag(self, tag: CandidateTag) -> bool:
        return tag in self.tags

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "count": self.count,
            "member_ids": list(self.member_ids),
            "tags": [t.value for t in self.tags],
        }


def validate_candidate_query(
    start: date,
    end: date,
    weekdays: Iterable[int] | None,
    limit: int,
    min_participants: int = 1,
) -> frozenset[Weekday] | None:
    """Boundary validation for a ranking request. Returns the normalized weekday filter."""
    validate_range(start, end)
    if (
        isinstance(min_participants, bool)
        or not isinstance(min_participants, int)
        or min_participants < 1
    ):
        raise InputValidationError(
            f"min_participants must be at least 1, got {min_participants!r}",
            "min_participants", "INVALID_MIN_PARTICIPANTS",
        )
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InputValidationError(
            f"limit must be a non-negative integer, got {limit!r}",
            "limit", "INVALID_LIMIT",
        )
    return validate_weekdays(weekdays)


def candidate_tags(
    day: date,
    count: int,
    registered_count: int,
    min_participants: int,
    required_present: bool,
) -> tuple[CandidateTag, ...]:
    """Reason tags for a date that survived filtering."""
    dow = weekday_of(day)
    tags = []
    if registered_count > 0 and count >= registered_count:
        tags.append(CandidateTag.FULL_ATTENDANCE)
    if count >= 2 * min_participants:
        tags.append(CandidateTag.HIGH_TURNOUT)
    if required_present:
        tags.append(CandidateTag.ALL_REQUIRED_PRESENT)
    if dow in WEEKDAYS:
        tags.append(CandidateTag.WEEKDAY)
    if dow in WEEKEND:
        tags.append(CandidateTag.WEEKEND)
    return tuple(tags)


def group_available_by_date(
    facts: Iterable[AvailabilityFact], start: date, end: date,
) -> dict[date, set[MemberId]]:
    """Steps 1-2: AVAILABLE facts inside [start, end], grouped per date."""
    by_date: dict[date, set[MemberId]] = defaultdict(set)
    for fact in facts:
        if fact.state != AvailabilityState.AVAILABLE:
            continue
        if not start <= fact.date <= end:
            continue
        by_date[fact.date].add(fact.member_id)
    return by_date


def rank_candidates(
    facts: Iterable[AvailabilityFact],
    start: date,
    end: date,
    *,
    limit: int,
    min_participants: int,
    required_members: Iterable[str] = (),
    weekdays: frozenset[Weekday] | None = None,
    total_registered: int | None = None,
) -> list[Candidate]:
    """Rank the dates in [start, end] by available headcount. Pure, no IO."""
    by_date = group_available_by_date(facts, start, end)
    if not by_date:
        return []

    required = frozenset(required_members)
    if total_registered is not None:
        registered_count = total_registered
    else:
        registered_count = len(set().union(*by_date.values()))

    candidates = []
    for day, members in by_date.items():
        if weekdays and weekday_of(day) not in weekdays:
            continue
        if required and not required <= members:
            continue
        if len(members) < min_participants:
            continue
        candidates.append(Candidate(
            date=day,
            member_ids=tuple(sorted(members)),
            tags=candidate_tags(
                day, len(members), registered_count, min_participants,
                required_present=bool(required),
            ),
        ))

    candidates.sort(key=lambda c: (-c.count, c.date))
    return candidates[:limit]
