"""Deterministic fallback parser for appointments without a binary recurrence structure.

Some decoders only expose a coarse recurrence type plus a human-readable pattern
("every 2 weeks on Monday", "the last Saturday of every 1 month"). This module turns
that into a DraftRule. It must be deterministic: same input -> same output.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from recurfix.models.descriptor import SOURCE_WEEKDAY_ORDER, RecurrenceFrequency, Weekday
from recurfix.models.draft_rule import ByDay, DraftRule


logger = logging.getLogger(__name__)


# Coarse recurrence types reported alongside the pattern text
_RECURRENCE_TYPES: dict[int, RecurrenceFrequency] = {
    0: RecurrenceFrequency.DAILY,
    1: RecurrenceFrequency.WEEKLY,
    2: RecurrenceFrequency.MONTHLY,
    3: RecurrenceFrequency.YEARLY,
}

_YEARLY_TITLE_RE = re.compile(r"birthday|anniversary", re.I)

_WEEKDAY_ALIASES: list[tuple[re.Pattern, Weekday]] = [
    (re.compile(r"\b(mon|monday)\b", re.I), Weekday.MO),
    (re.compile(r"\b(tue|tues|tuesday)\b", re.I), Weekday.TU),
    (re.compile(r"\b(wed|weds|wednesday)\b", re.I), Weekday.WE),
    (re.compile(r"\b(thu|thur|thurs|thursday)\b", re.I), Weekday.TH),
    (re.compile(r"\b(fri|friday)\b", re.I), Weekday.FR),
    (re.compile(r"\b(sat|saturday)\b", re.I), Weekday.SA),
    (re.compile(r"\b(sun|sunday)\b", re.I), Weekday.SU),
]

_ORDINALS: dict[str, int] = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "last": -1,
}

_ORDINAL_RE = re.compile(
    r"\b(first|second|third|fourth|last)\s+"
    r"(monday|mon|tuesday|tues|tue|wednesday|weds|wed|thursday|thurs|thur|thu|friday|fri|saturday|sat|sunday|sun)\b",
    re.I,
)
_DAY_OF_MONTH_RE = re.compile(r"\bday\s+(\d{1,2})\b", re.I)
_INTERVAL_RE = re.compile(r"\bevery\s+(\d+)\s+(day|week|month|year)s?\b", re.I)
_OCCURRENCES_RE = re.compile(r"\b(\d+)\s+occurrences?\b", re.I)


def _extract_weekdays(text: str) -> List[Weekday]:
    """Extract all mentioned weekdays, ordered Sunday..Saturday."""
    found = {day for pat, day in _WEEKDAY_ALIASES if pat.search(text)}
    return [d for d in SOURCE_WEEKDAY_ORDER if d in found]


def infer_frequency(recurrence_type: Optional[int], title: Optional[str]) -> Optional[RecurrenceFrequency]:
    """Map the coarse type to a frequency; without one, only birthdays/anniversaries recur."""
    if recurrence_type is None:
        if title and _YEARLY_TITLE_RE.search(title):
            logger.debug(f'Inferred yearly recurrence for "{title}"')
            return RecurrenceFrequency.YEARLY
        return None
    return _RECURRENCE_TYPES.get(recurrence_type, RecurrenceFrequency.DAILY)


def parse_recurrence_summary(
    recurrence_type: Optional[int],
    summary: Optional[str],
    *,
    title: Optional[str] = None,
) -> Optional[DraftRule]:
    """Parse a coarse recurrence type and its pattern text into a draft rule.

    Supported fragments:
    - weekdays ("Monday", "tues") -> BYDAY
    - "first|second|third|fourth|last <weekday>" -> ordinal BYDAY
    - "day 15" -> BYMONTHDAY
    - "every 3 weeks" -> INTERVAL (already in the rule's unit)
    - "10 occurrences" -> COUNT

    Returns None when no recurrence can be inferred. BYMONTH for yearly rules is left
    to the validator.
    """
    frequency = infer_frequency(recurrence_type, title)
    if frequency is None:
        return None

    text = (summary or "").strip()
    fields: dict = {}

    weekdays = _extract_weekdays(text)
    if weekdays:
        m = _ORDINAL_RE.search(text)
        ordinal = _ORDINALS[m.group(1).lower()] if m else None
        fields["by_weekday"] = [ByDay(weekday=d, ordinal=ordinal) for d in weekdays]

    m = _DAY_OF_MONTH_RE.search(text)
    if m and 1 <= int(m.group(1)) <= 31:
        fields["by_month_day"] = int(m.group(1))

    m = _INTERVAL_RE.search(text)
    if m and int(m.group(1)) > 1:
        fields["interval"] = int(m.group(1))

    m = _OCCURRENCES_RE.search(text)
    if m and int(m.group(1)) > 0:
        fields["count"] = int(m.group(1))
        fields["occurrence_count"] = int(m.group(1))

    return DraftRule(frequency=frequency, **fields)
