"""Repair RRULE text stored before sanitizing existed.

Stored rules come back without their originating descriptor, so the only inputs are
the text and the event start. The text is parsed, the legacy unit mistakes the
builder now avoids are undone, and the result goes through the same validator and
serializer as the structured path. For a canonical rule the output is byte-identical
to what the structured path produces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from recurfix.config import ValidationConfig, resolve_config
from recurfix.models import constants
from recurfix.models.descriptor import RecurrenceFrequency
from recurfix.models.draft_rule import DraftRule
from recurfix.recurrence.rrule_export import serialize
from recurfix.recurrence.rrule_parse import RuleParseError, parse_rrule, parse_until, split_prefix
from recurfix.recurrence.validator import NoticeCode, validate_with_notices


logger = logging.getLogger(__name__)


class RepairAction(str, Enum):
    KEPT = "KEPT"
    REPAIRED = "REPAIRED"
    CAPPED = "CAPPED"
    STRIPPED = "STRIPPED"


@dataclass(frozen=True)
class RepairResult:
    modified: bool
    action: RepairAction
    rule: Optional[str]  # None when the recurrence should be dropped
    reason: str


def fix_legacy_units(rule: DraftRule) -> Tuple[DraftRule, List[str]]:
    """Undo interval unit mistakes written by older builders.

    - FREQ=DAILY with an INTERVAL of a day or more worth of minutes: convert to days.
    - FREQ=YEARLY;INTERVAL=12: twelve months is the implicit one-year step.
    """
    reasons: List[str] = []
    interval = rule.interval

    if rule.frequency == RecurrenceFrequency.DAILY and interval and interval >= constants.MINUTES_PER_DAY:
        days = interval // constants.MINUTES_PER_DAY
        reasons.append(f"Daily INTERVAL={interval} read as minutes ({days} days)")
        return rule.model_copy(update={"interval": days if days > 1 else None}), reasons

    if rule.frequency == RecurrenceFrequency.YEARLY and interval == constants.MONTHS_PER_YEAR:
        reasons.append("Yearly INTERVAL=12 read as months (one year)")
        return rule.model_copy(update={"interval": None}), reasons

    return rule, reasons


def _span_reason(rule: DraftRule, event_start: datetime) -> str:
    if rule.until is None:
        return "No UNTIL date (COUNT-based or infinite recurrence)"
    years_span = rule.until.year - event_start.year
    return f"{rule.frequency.value} recurrence span ({years_span} years) is reasonable"


def repair_rule(
    rule_text: str,
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
    *,
    title: Optional[str] = None,
) -> RepairResult:
    """Repair one stored rule and report what happened.

    Text that cannot be read as a supported RRULE (no FREQ, an unsupported FREQ, the
    legacy "RECURRING" placeholder) is kept unchanged.
    """
    config = resolve_config(config)
    label = f' "{title}"' if title else ""

    try:
        parsed = parse_rrule(rule_text)
    except RuleParseError as e:
        logger.debug(f"Keeping unparseable recurrence{label}: {e}")
        return RepairResult(modified=False, action=RepairAction.KEPT, rule=rule_text, reason=str(e))

    draft, reasons = fix_legacy_units(parsed.rule)
    outcome = validate_with_notices(draft, event_start, config, title=title)
    reasons.extend(n.message for n in outcome.notices)

    text = serialize(outcome.rule)
    if text is None:
        return RepairResult(
            modified=True,
            action=RepairAction.STRIPPED,
            rule=None,
            reason="; ".join(reasons),
        )

    repaired = parsed.prefix + text
    modified = repaired != rule_text
    if outcome.has(NoticeCode.CAPPED_SPAN):
        action = RepairAction.CAPPED
    elif modified:
        action = RepairAction.REPAIRED
    else:
        action = RepairAction.KEPT

    if not reasons:
        reasons.append(_span_reason(outcome.rule, event_start) if not modified else "Normalized rule text")

    if modified:
        logger.debug(f"Repaired recurrence{label}: {rule_text} -> {repaired}")
    return RepairResult(modified=modified, action=action, rule=repaired, reason="; ".join(reasons))


def repair(
    rule_text: str,
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
    *,
    title: Optional[str] = None,
) -> Optional[str]:
    """Repair stored RRULE text; returns None when no recurrence should be emitted."""
    return repair_rule(rule_text, event_start, config, title=title).rule


def has_suspicious_until(
    rule_text: str,
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
) -> bool:
    """True when UNTIL sits on the sentinel year far beyond the event start."""
    config = resolve_config(config)
    _, body = split_prefix((rule_text or "").strip())
    for part in body.split(";"):
        key, _, value = part.partition("=")
        if key.strip().upper() != "UNTIL":
            continue
        until = parse_until(value)
        if until is None:
            return False
        years_span = until.year - event_start.year
        return until.year == config.sentinel_year and years_span > config.suspicious_span_years
    return False
