"""Data models for recurfix."""

from recurfix.models.descriptor import (
    EndCondition,
    MonthDayShape,
    MonthEndShape,
    NthWeekdayShape,
    PatternShape,
    RecurrenceDescriptor,
    RecurrenceFrequency,
    Weekday,
    WeekdayShape,
    WeekOrdinal,
)
from recurfix.models.draft_rule import ByDay, DraftRule

__all__ = [
    "EndCondition",
    "MonthDayShape",
    "MonthEndShape",
    "NthWeekdayShape",
    "PatternShape",
    "RecurrenceDescriptor",
    "RecurrenceFrequency",
    "Weekday",
    "WeekdayShape",
    "WeekOrdinal",
    "ByDay",
    "DraftRule",
]
