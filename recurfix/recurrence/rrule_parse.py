"""Parse stored RRULE text back into a DraftRule.

The parser is deliberately literal: it records what the text says (including the
legacy unit mistakes) and leaves corrections to the repair pass and the validator.
Parts it does not understand, and known parts whose value it cannot type (such as a
multi-valued BYMONTH), are kept verbatim in `extra_parts`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from recurfix.models.descriptor import RecurrenceFrequency, Weekday
from recurfix.models.draft_rule import ByDay, DraftRule


class RuleParseError(ValueError):
    """Raised when stored text cannot be read as a supported RRULE."""

    def __init__(self, message: str, *, text: Optional[str] = None):
        super().__init__(message)
        self.text = text


@dataclass(frozen=True)
class ParsedRule:
    prefix: str  # "", "RRULE:" or the legacy "RRULE;"
    rule: DraftRule


_PREFIX_RE = re.compile(r"^(RRULE[:;])", re.I)
_UNTIL_RE = re.compile(r"^(?P<date>\d{8})(?:T(?P<time>\d{6})Z?)?$", re.I)
_BYDAY_RE = re.compile(r"^(?P<ordinal>[+-]?\d{1,2})?(?P<day>MO|TU|WE|TH|FR|SA|SU)$", re.I)
_INT_RE = re.compile(r"^[+-]?\d+$")

_FREQUENCIES: dict[str, RecurrenceFrequency] = {
    "DAILY": RecurrenceFrequency.DAILY,
    "WEEKLY": RecurrenceFrequency.WEEKLY,
    "MONTHLY": RecurrenceFrequency.MONTHLY,
    "YEARLY": RecurrenceFrequency.YEARLY,
}


def _parse_int(value: str) -> Optional[int]:
    value = value.strip()
    return int(value) if _INT_RE.match(value) else None


def parse_until(value: str) -> Optional[datetime]:
    """Parse YYYYMMDD or YYYYMMDDTHHMMSS[Z]; None if the value is not a valid date."""
    m = _UNTIL_RE.match(value.strip())
    if not m:
        return None
    stamp = m.group("date") + (m.group("time") or "000000")
    try:
        return datetime.strptime(stamp, "%Y%m%d%H%M%S")
    except ValueError:
        return None


def _parse_by_day(value: str) -> Optional[List[ByDay]]:
    entries: List[ByDay] = []
    for token in value.split(","):
        m = _BYDAY_RE.match(token.strip())
        if not m:
            return None
        ordinal = int(m.group("ordinal")) if m.group("ordinal") else None
        entries.append(ByDay(weekday=Weekday(m.group("day").lower()), ordinal=ordinal))
    return entries


def split_prefix(text: str) -> tuple[str, str]:
    m = _PREFIX_RE.match(text)
    if not m:
        return "", text
    return m.group(1), text[m.end():]


def parse_rrule(text: str) -> ParsedRule:
    """Parse RRULE text (optionally prefixed with 'RRULE:' or 'RRULE;').

    Raises RuleParseError when FREQ is missing or not one of DAILY/WEEKLY/MONTHLY/YEARLY.
    """
    prefix, body = split_prefix((text or "").strip())

    fields: dict = {}
    extra: List[str] = []
    frequency: Optional[RecurrenceFrequency] = None

    for part in body.split(";"):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        key = key.strip().upper()
        if not sep:
            extra.append(part)
            continue

        if key == "FREQ":
            frequency = _FREQUENCIES.get(value.strip().upper())
            if frequency is None:
                raise RuleParseError(f"Unsupported frequency: {value}", text=text)
            continue

        parsed = None
        if key == "INTERVAL":
            parsed = _parse_int(value)
            if parsed is not None and parsed >= 1:
                fields["interval"] = parsed
                continue
        elif key == "COUNT":
            parsed = _parse_int(value)
            if parsed is not None and parsed >= 1:
                fields["count"] = parsed
                continue
        elif key == "UNTIL":
            parsed = parse_until(value)
            if parsed is not None:
                fields["until"] = parsed
                continue
        elif key == "BYDAY":
            parsed = _parse_by_day(value)
            if parsed:
                fields["by_weekday"] = parsed
                continue
        elif key == "BYMONTHDAY":
            parsed = _parse_int(value)
            if parsed is not None and parsed != 0 and -31 <= parsed <= 31:
                fields["by_month_day"] = parsed
                continue
        elif key == "BYMONTH":
            parsed = _parse_int(value)
            if parsed is not None and 1 <= parsed <= 12:
                fields["by_month"] = parsed
                continue

        extra.append(part)

    if frequency is None:
        raise RuleParseError("Missing FREQ", text=text)

    rule = DraftRule(
        frequency=frequency,
        occurrence_count=fields.get("count"),
        extra_parts=extra,
        **fields,
    )
    return ParsedRule(prefix=prefix, rule=rule)
