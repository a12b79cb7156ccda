"""Draft recurrence rule model for recurfix.

A DraftRule is the typed, not-yet-serialized form of an RRULE. The builder produces it,
the validator sanitizes it, and the serializer renders it.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Set

from pydantic import BaseModel, Field

from recurfix.models.descriptor import RecurrenceFrequency, Weekday


class ByDay(BaseModel):
    """One BYDAY entry, optionally qualified with a week-of-month ordinal (-1 = last)."""

    weekday: Weekday
    ordinal: Optional[int] = None


class DraftRule(BaseModel):
    frequency: RecurrenceFrequency
    interval: Optional[int] = Field(None, description="Normalized step; only set when > 1")

    by_weekday: List[ByDay] = Field(default_factory=list)
    by_month_day: Optional[int] = None
    by_month: Optional[int] = Field(None, ge=1, le=12, description="Derived from the event start")

    # Range
    count: Optional[int] = None
    until: Optional[datetime] = None

    # Occurrence count reported by the source, consulted even for date-bounded rules
    occurrence_count: Optional[int] = None

    # True means "emit no recurrence at all"
    strip: bool = False

    # Parts the parser could not type (unknown keys, multi-valued lists) kept verbatim
    extra_parts: List[str] = Field(default_factory=list)

    @property
    def is_unbounded(self) -> bool:
        return self.count is None and self.until is None

    def extra_keys(self) -> Set[str]:
        """Upper-cased keys of the preserved parts (e.g. a multi-valued BYMONTH)."""
        return {extra_part_key(p) for p in self.extra_parts}

    def needs_by_month(self) -> bool:
        """Yearly rules with a day selector must name their month explicitly."""
        if self.frequency != RecurrenceFrequency.YEARLY or self.by_month is not None:
            return False
        extra = self.extra_keys()
        if "BYMONTH" in extra:
            return False
        return self.by_month_day is not None or bool(self.by_weekday) or bool(extra & {"BYDAY", "BYMONTHDAY"})


def extra_part_key(part: str) -> str:
    return part.partition("=")[0].strip().upper()
