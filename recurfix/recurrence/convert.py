"""High-level entry points: descriptor or summary text in, RRULE value (or None) out.

These are the functions an import pipeline calls once per appointment.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from recurfix.config import ValidationConfig
from recurfix.models.descriptor import RecurrenceDescriptor
from recurfix.recurrence.builder import build
from recurfix.recurrence.rrule_export import serialize
from recurfix.recurrence.summary_parser import parse_recurrence_summary
from recurfix.recurrence.validator import validate


def descriptor_to_rrule(
    descriptor: RecurrenceDescriptor,
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
    *,
    title: Optional[str] = None,
) -> Optional[str]:
    """Build, validate and serialize; None means "no recurrence".

    `title` is only used in log messages.
    """
    draft = build(descriptor, event_start)
    return serialize(validate(draft, event_start, config, title=title))


def summary_to_rrule(
    recurrence_type: Optional[int],
    summary: Optional[str],
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
    *,
    title: Optional[str] = None,
) -> Optional[str]:
    """Fallback path for appointments that only carry a coarse type and pattern text."""
    draft = parse_recurrence_summary(recurrence_type, summary, title=title)
    if draft is None:
        return None
    return serialize(validate(draft, event_start, config, title=title))
