"""Build draft recurrence rules from decoded descriptors.

The builder is a pure translation. It normalizes the source format's unit quirks and
adds the parameters strict consumers need, but leaves end-date corruption to the
validator.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from recurfix.models import constants
from recurfix.models.descriptor import (
    EndCondition,
    MonthDayShape,
    MonthEndShape,
    NthWeekdayShape,
    RecurrenceDescriptor,
    RecurrenceFrequency,
    WeekdayShape,
)
from recurfix.models.draft_rule import ByDay, DraftRule


logger = logging.getLogger(__name__)


def normalize_interval(frequency: RecurrenceFrequency, interval_raw: int) -> Optional[int]:
    """Convert the source interval into the rule's unit; None means the implicit 1.

    - Daily: minutes -> whole days.
    - Yearly: months; 12 (one year) is the implicit default. Other values pass
      through unchanged and are left to the span cap.
    - Weekly/Monthly: already in the rule's unit.
    """
    if not interval_raw or interval_raw <= 1:
        return None

    if frequency == RecurrenceFrequency.DAILY:
        days = interval_raw // constants.MINUTES_PER_DAY
        return days if days > 1 else None

    if frequency == RecurrenceFrequency.YEARLY:
        if interval_raw == constants.MONTHS_PER_YEAR:
            return None
        logger.debug(f"Yearly interval {interval_raw} is not twelve months; passing through unchanged")
        return interval_raw

    return interval_raw


def _expand_shape(descriptor: RecurrenceDescriptor) -> tuple[List[ByDay], Optional[int]]:
    shape = descriptor.shape
    if shape is None:
        return [], None

    if isinstance(shape, WeekdayShape):
        return [ByDay(weekday=d) for d in shape.weekdays], None

    if isinstance(shape, (MonthDayShape, MonthEndShape)):
        return [], shape.day

    if isinstance(shape, NthWeekdayShape):
        ordinal = shape.ordinal.rrule_ordinal
        return [ByDay(weekday=d, ordinal=ordinal) for d in shape.weekdays], None

    raise TypeError(f"Unhandled recurrence shape: {type(shape).__name__}")


def _translate_end(descriptor: RecurrenceDescriptor) -> tuple[Optional[int], Optional[datetime]]:
    """Map the end condition onto COUNT or a candidate UNTIL; the validator sanitizes the date."""
    if descriptor.end_condition == EndCondition.AFTER_COUNT:
        if descriptor.occurrence_count and descriptor.occurrence_count > 0:
            return descriptor.occurrence_count, None
        return None, None
    if descriptor.end_condition == EndCondition.AFTER_DATE:
        return None, descriptor.end_date
    return None, None


def build(descriptor: RecurrenceDescriptor, event_start: datetime) -> DraftRule:
    """Translate a descriptor into a draft rule.

    Unknown frequencies fall back to a plain daily rule without shape modifiers or
    interval, but keep the end condition; the upstream decoder is the authority on
    structural validity.
    """
    frequency = descriptor.frequency
    if frequency is None:
        logger.debug("Unknown recurrence frequency; falling back to plain daily rule")
        count, until = _translate_end(descriptor)
        return DraftRule(
            frequency=RecurrenceFrequency.DAILY,
            count=count,
            until=until,
            occurrence_count=descriptor.occurrence_count,
        )

    by_weekday, by_month_day = ([], None)
    if frequency != RecurrenceFrequency.DAILY:
        by_weekday, by_month_day = _expand_shape(descriptor)

    # Without BYMONTH, strict consumers read "FREQ=YEARLY;BYDAY=-1SA" as the last
    # Saturday of the year, not of the event's month.
    by_month = None
    if frequency == RecurrenceFrequency.YEARLY and (by_weekday or by_month_day is not None):
        by_month = event_start.month

    count, until = _translate_end(descriptor)
    return DraftRule(
        frequency=frequency,
        interval=normalize_interval(frequency, descriptor.interval_raw),
        by_weekday=by_weekday,
        by_month_day=by_month_day,
        by_month=by_month,
        count=count,
        until=until,
        occurrence_count=descriptor.occurrence_count,
    )
