"""Shared schema types.

Invariants:
    - IsoDate accepts only YYYY-MM-DD strings (or date objects), never timestamps or compact forms
"""

from datetime import date
from typing import Annotated

from pydantic import BeforeValidator, Field

from rollcall.core.dates import parse_iso_date
from rollcall.core.errors import InvalidDateError


def _strict_iso_date(value: object) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(value)  # type: ignore[arg-type]
    except InvalidDateError as e:
        raise ValueError(e.message)


IsoDate = Annotated[date, BeforeValidator(_strict_iso_date)]
WeekdayValue = Annotated[int, Field(ge=0, le=6)]
MemberIdValue = Annotated[str, Field(min_length=1, max_length=64)]
