"""Render DraftRule objects as iCalendar RRULE values."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from recurfix.models.descriptor import RecurrenceFrequency, Weekday
from recurfix.models.draft_rule import ByDay, DraftRule, extra_part_key


_WD_MAP: dict[Weekday, str] = {
    Weekday.MO: "MO",
    Weekday.TU: "TU",
    Weekday.WE: "WE",
    Weekday.TH: "TH",
    Weekday.FR: "FR",
    Weekday.SA: "SA",
    Weekday.SU: "SU",
}

_FREQ_MAP: dict[RecurrenceFrequency, str] = {
    RecurrenceFrequency.DAILY: "DAILY",
    RecurrenceFrequency.WEEKLY: "WEEKLY",
    RecurrenceFrequency.MONTHLY: "MONTHLY",
    RecurrenceFrequency.YEARLY: "YEARLY",
}

UNTIL_FORMAT = "%Y%m%dT%H%M%SZ"

_PART_ORDER = ("INTERVAL", "BYMONTH", "BYDAY", "BYMONTHDAY", "COUNT", "UNTIL")


def format_by_day(entry: ByDay) -> str:
    code = _WD_MAP[entry.weekday]
    return f"{entry.ordinal}{code}" if entry.ordinal is not None else code


def format_until(until: datetime) -> str:
    return until.strftime(UNTIL_FORMAT)


def serialize(draft: DraftRule) -> Optional[str]:
    """Convert a draft to an RRULE value (without the leading 'RRULE:' prefix).

    Returns None for a stripped draft. Parts are emitted in a fixed order so the same
    draft always renders to the same bytes:
    FREQ, INTERVAL, BYMONTH, BYDAY, BYMONTHDAY, COUNT, UNTIL, then preserved extras.
    A preserved part for one of those keys takes that key's slot, and is dropped when
    the typed field already renders the key.
    """
    if draft.strip:
        return None

    slots: dict[str, str] = {}
    if draft.interval and int(draft.interval) > 1:
        slots["INTERVAL"] = f"INTERVAL={int(draft.interval)}"
    if draft.by_month is not None:
        slots["BYMONTH"] = f"BYMONTH={draft.by_month}"
    if draft.by_weekday:
        slots["BYDAY"] = "BYDAY=" + ",".join(format_by_day(d) for d in draft.by_weekday)
    if draft.by_month_day is not None:
        slots["BYMONTHDAY"] = f"BYMONTHDAY={draft.by_month_day}"
    if draft.count is not None:
        slots["COUNT"] = f"COUNT={draft.count}"
    if draft.until is not None:
        slots["UNTIL"] = f"UNTIL={format_until(draft.until)}"

    trailing: List[str] = []
    for part in draft.extra_parts:
        key = extra_part_key(part)
        if key == "FREQ":
            continue
        if key in _PART_ORDER:
            slots.setdefault(key, part)
        else:
            trailing.append(part)

    parts: List[str] = [f"FREQ={_FREQ_MAP[draft.frequency]}"]
    parts.extend(slots[key] for key in _PART_ORDER if key in slots)
    parts.extend(trailing)
    return ";".join(parts)
