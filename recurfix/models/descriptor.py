"""Recurrence descriptor models for recurfix.

A descriptor is the typed form of the binary recurrence structure that an upstream
mailbox decoder extracts from an appointment. It is read-only input to the engine.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

from recurfix.models import constants


logger = logging.getLogger(__name__)


class RecurrenceFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Weekday(str, Enum):
    MO = "mo"
    TU = "tu"
    WE = "we"
    TH = "th"
    FR = "fr"
    SA = "sa"
    SU = "su"


# Order of the weekday flags in the source structure (and of BYDAY output)
SOURCE_WEEKDAY_ORDER: List[Weekday] = [
    Weekday.SU,
    Weekday.MO,
    Weekday.TU,
    Weekday.WE,
    Weekday.TH,
    Weekday.FR,
    Weekday.SA,
]


class PatternShape(str, Enum):
    BY_WEEKDAY = "by_weekday"
    BY_MONTH_DAY = "by_month_day"
    BY_MONTH_END = "by_month_end"
    NTH_WEEKDAY = "nth_weekday"


class WeekOrdinal(int, Enum):
    """Week-of-month ordinal, using the source format's numbering (5 = last)."""

    FIRST = 1
    SECOND = 2
    THIRD = 3
    FOURTH = 4
    LAST = 5

    @property
    def rrule_ordinal(self) -> int:
        return -1 if self is WeekOrdinal.LAST else int(self.value)


class EndCondition(str, Enum):
    AFTER_DATE = "after_date"
    AFTER_COUNT = "after_count"
    NEVER = "never"


def _dedupe_weekdays(v: Optional[List[Weekday]]) -> List[Weekday]:
    if not v:
        return []
    # Deduplicate, then order Sunday..Saturday like the source flags
    seen = set(v)
    return [d for d in SOURCE_WEEKDAY_ORDER if d in seen]


def weekdays_from_flags(flags: Sequence[Any]) -> List[Weekday]:
    """Convert Sun..Sat boolean flags into weekdays (extra flags are ignored)."""
    return [day for day, flag in zip(SOURCE_WEEKDAY_ORDER, flags) if flag]


class WeekdayShape(BaseModel):
    kind: Literal["by_weekday"] = "by_weekday"
    weekdays: List[Weekday] = Field(default_factory=list)

    @field_validator("weekdays")
    @classmethod
    def _validate_weekdays(cls, v):
        return _dedupe_weekdays(v)


class MonthDayShape(BaseModel):
    kind: Literal["by_month_day"] = "by_month_day"
    day: int = Field(..., ge=1, le=31)


class MonthEndShape(BaseModel):
    kind: Literal["by_month_end"] = "by_month_end"
    day: int = Field(..., ge=1, le=31)


class NthWeekdayShape(BaseModel):
    kind: Literal["nth_weekday"] = "nth_weekday"
    ordinal: WeekOrdinal
    weekdays: List[Weekday] = Field(default_factory=list)

    @field_validator("weekdays")
    @classmethod
    def _validate_weekdays(cls, v):
        return _dedupe_weekdays(v)


ShapeData = Annotated[
    Union[WeekdayShape, MonthDayShape, MonthEndShape, NthWeekdayShape],
    Field(discriminator="kind"),
]


_FREQUENCY_CODES: dict[int, RecurrenceFrequency] = {
    constants.FREQUENCY_CODE_DAILY: RecurrenceFrequency.DAILY,
    constants.FREQUENCY_CODE_WEEKLY: RecurrenceFrequency.WEEKLY,
    constants.FREQUENCY_CODE_MONTHLY: RecurrenceFrequency.MONTHLY,
    constants.FREQUENCY_CODE_YEARLY: RecurrenceFrequency.YEARLY,
}

_END_TYPE_CODES: dict[int, EndCondition] = {
    constants.END_TYPE_AFTER_DATE: EndCondition.AFTER_DATE,
    constants.END_TYPE_AFTER_COUNT: EndCondition.AFTER_COUNT,
    constants.END_TYPE_NEVER: EndCondition.NEVER,
}


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _shape_from_pattern(pattern_type: Optional[int], specific: Any) -> Optional[ShapeData]:
    if specific is None:
        return None

    if pattern_type == constants.PATTERN_TYPE_WEEK:
        if isinstance(specific, (list, tuple)):
            return WeekdayShape(weekdays=weekdays_from_flags(specific))
        return None

    if pattern_type in (constants.PATTERN_TYPE_MONTH, constants.PATTERN_TYPE_MONTH_END):
        if isinstance(specific, bool) or not isinstance(specific, int) or not 1 <= specific <= 31:
            return None
        if pattern_type == constants.PATTERN_TYPE_MONTH_END:
            return MonthEndShape(day=specific)
        return MonthDayShape(day=specific)

    if pattern_type == constants.PATTERN_TYPE_MONTH_NTH:
        flags = _field(specific, "weekdays")
        nth = _field(specific, "nth")
        if not flags or not nth:
            return None
        try:
            ordinal = WeekOrdinal(nth)
        except ValueError:
            # Unknown ordinals degrade to "first"
            ordinal = WeekOrdinal.FIRST
        return NthWeekdayShape(ordinal=ordinal, weekdays=weekdays_from_flags(flags))

    return None


class RecurrenceDescriptor(BaseModel):
    """Decoded appointment recurrence.

    Notes:
    - `interval_raw` is in the source format's unit, which depends on frequency:
      minutes for daily, weeks for weekly, months for monthly and yearly.
    - `frequency` is None when the decoder reported a code this engine does not know.
    - `occurrence_count` is consulted even when the end condition is a date.
    """

    frequency: Optional[RecurrenceFrequency] = None
    shape: Optional[ShapeData] = None
    interval_raw: int = 0

    end_condition: EndCondition = EndCondition.NEVER
    end_date: Optional[datetime] = None
    occurrence_count: Optional[int] = None

    @property
    def pattern_shape(self) -> Optional[PatternShape]:
        return PatternShape(self.shape.kind) if self.shape is not None else None

    @classmethod
    def from_pattern(
        cls,
        *,
        recur_frequency: Optional[int],
        pattern_type: Optional[int] = None,
        pattern_type_specific: Any = None,
        period: Optional[int] = None,
        end_type: Optional[int] = None,
        end_date: Optional[datetime] = None,
        occurrence_count: Optional[int] = None,
    ) -> "RecurrenceDescriptor":
        """Build a descriptor from the raw numeric fields a mailbox decoder exposes.

        Unknown frequency codes become None, unknown or malformed pattern data becomes
        no shape, and unknown end types become NEVER. Never raises for recurrence data.
        """
        frequency = _FREQUENCY_CODES.get(recur_frequency) if recur_frequency is not None else None
        if frequency is None:
            logger.debug(f"Unknown recurrence frequency code {recur_frequency!r}")

        shape = _shape_from_pattern(pattern_type, pattern_type_specific)
        end_condition = _END_TYPE_CODES.get(end_type, EndCondition.NEVER) if end_type is not None else EndCondition.NEVER

        return cls(
            frequency=frequency,
            shape=shape,
            interval_raw=int(period or 0),
            end_condition=end_condition,
            end_date=end_date,
            occurrence_count=occurrence_count,
        )
