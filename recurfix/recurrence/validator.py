"""Span validation and sanitizing of draft recurrence rules.

Sanitizing is the error handling strategy here: a corrupted or implausible recurrence
is capped, replaced or stripped, never rejected, so the appointment itself survives.
The validator is pure and idempotent: validate(validate(x)) == validate(x).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from recurfix.config import ValidationConfig, resolve_config
from recurfix.models import constants
from recurfix.models.descriptor import RecurrenceFrequency
from recurfix.models.draft_rule import DraftRule, extra_part_key


logger = logging.getLogger(__name__)

_RANGE_KEYS = {"COUNT", "UNTIL"}


class NoticeCode(str, Enum):
    STRIPPED_SINGLE_OCCURRENCE = "stripped_single_occurrence"
    DROPPED_UNTIL_FOR_COUNT = "dropped_until_for_count"
    PREFERRED_COUNT = "preferred_count"
    PROJECTED_CORRUPTED_UNTIL = "projected_corrupted_until"
    LOWERED_TO_SENTINEL = "lowered_to_sentinel"
    CAPPED_SPAN = "capped_span"
    ADDED_END_OF_DAY = "added_end_of_day"
    ADDED_BY_MONTH = "added_by_month"
    DROPPED_UNREADABLE_RANGE = "dropped_unreadable_range"
    SUSPICIOUS_DAILY_INTERVAL = "suspicious_daily_interval"


@dataclass(frozen=True)
class ValidationNotice:
    """Informational record of one sanitizing step. Never affects control flow."""

    code: NoticeCode
    message: str


@dataclass
class ValidationOutcome:
    rule: DraftRule
    notices: List[ValidationNotice] = field(default_factory=list)

    def has(self, code: NoticeCode) -> bool:
        return any(n.code == code for n in self.notices)


def with_year(dt: datetime, year: int) -> datetime:
    """Move dt to another year, keeping month/day (Feb 29 clamps to Feb 28)."""
    return dt + relativedelta(year=year)


def end_of_day(dt: datetime) -> datetime:
    return dt.replace(
        hour=constants.END_OF_DAY_HOUR,
        minute=constants.END_OF_DAY_MINUTE,
        second=constants.END_OF_DAY_SECOND,
        microsecond=0,
    )


def is_corrupted(until: datetime, config: ValidationConfig) -> bool:
    return until.year < config.corrupted_before_year


class _NoticeLog:
    def __init__(self, config: ValidationConfig, title: Optional[str]):
        self.config = config
        self.label = f' for "{title}"' if title else ""
        self.notices: List[ValidationNotice] = []

    def add(self, code: NoticeCode, message: str, level: int = logging.INFO) -> None:
        self.notices.append(ValidationNotice(code=code, message=message))
        if self.config.log_all_changes:
            logger.log(level, f"{message}{self.label}")


def _sanitize_until(
    rule: DraftRule,
    until: datetime,
    event_start: datetime,
    config: ValidationConfig,
    log: _NoticeLog,
) -> dict:
    """Resolve a candidate UNTIL into either a COUNT or a plausible end-of-day UNTIL."""
    occurrences = rule.occurrence_count

    if is_corrupted(until, config):
        if occurrences is not None and config.count_preference_min <= occurrences <= config.count_preference_max:
            log.add(
                NoticeCode.PREFERRED_COUNT,
                f"Using COUNT={occurrences} instead of corrupted UNTIL date (year {until.year})",
            )
            return {"count": occurrences, "until": None}

        log.add(
            NoticeCode.PROJECTED_CORRUPTED_UNTIL,
            f"Projected corrupted recurrence end date from {until.year} to {config.sentinel_year}",
        )
        until = with_year(until, config.sentinel_year)

    if until.year > config.sentinel_year:
        log.add(
            NoticeCode.LOWERED_TO_SENTINEL,
            f"Lowered recurrence end year {until.year} to {config.sentinel_year}",
        )
        until = with_year(until, config.sentinel_year)

    max_years = config.max_years_for(rule.frequency)
    years_span = until.year - event_start.year
    if years_span > max_years:
        until = with_year(until, event_start.year + max_years)
        log.add(
            NoticeCode.CAPPED_SPAN,
            f"Capped {rule.frequency.value} recurrence: {years_span} years -> {max_years} years",
            level=logging.WARNING,
        )

    normalized = end_of_day(until)
    if normalized != until:
        log.add(
            NoticeCode.ADDED_END_OF_DAY,
            f"Set recurrence end time to end of day on {normalized.date().isoformat()}",
            level=logging.DEBUG,
        )
    return {"until": normalized}


def validate_with_notices(
    draft: DraftRule,
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
    *,
    title: Optional[str] = None,
) -> ValidationOutcome:
    """Sanitize a draft rule and report what was changed.

    Steps, in order:
    1. Strip single occurrences (occurrence_count == 1).
    2. Detect corrupted UNTIL dates (year before 1900).
    3. Prefer a small explicit COUNT over a corrupted UNTIL.
    4. Project corrupted dates to the sentinel year, then clamp to the frequency cap.
    5. Give any surviving UNTIL an end-of-day time.
    6. Make sure yearly rules with a day selector carry BYMONTH.
    """
    config = resolve_config(config)
    log = _NoticeLog(config, title)

    if draft.strip:
        return ValidationOutcome(rule=draft, notices=log.notices)

    if config.strip_single_occurrence and draft.occurrence_count == 1:
        log.add(
            NoticeCode.STRIPPED_SINGLE_OCCURRENCE,
            "Stripping recurrence (occurrence count of 1 indicates a single event)",
            level=logging.WARNING,
        )
        return ValidationOutcome(rule=draft.model_copy(update={"strip": True}), notices=log.notices)

    update: dict = {}

    if draft.count is not None and draft.until is not None:
        log.add(NoticeCode.DROPPED_UNTIL_FOR_COUNT, "Dropped UNTIL because COUNT is also set")
        update["until"] = None
    elif draft.until is not None:
        update.update(_sanitize_until(draft, draft.until, event_start, config, log))

    if draft.count is not None or draft.until is not None:
        kept = [p for p in draft.extra_parts if extra_part_key(p) not in _RANGE_KEYS]
        if len(kept) != len(draft.extra_parts):
            log.add(NoticeCode.DROPPED_UNREADABLE_RANGE, "Dropped unreadable COUNT/UNTIL part alongside a valid range")
            update["extra_parts"] = kept

    if draft.needs_by_month():
        log.add(NoticeCode.ADDED_BY_MONTH, f"Added BYMONTH={event_start.month} to yearly recurrence")
        update["by_month"] = event_start.month

    if (
        draft.frequency == RecurrenceFrequency.DAILY
        and draft.interval is not None
        and draft.interval >= constants.SUSPICIOUS_DAILY_INTERVAL
    ):
        log.add(
            NoticeCode.SUSPICIOUS_DAILY_INTERVAL,
            f"Daily recurrence with INTERVAL={draft.interval} may be a misclassified weekly pattern",
        )

    rule = draft.model_copy(update=update) if update else draft
    return ValidationOutcome(rule=rule, notices=log.notices)


def validate(
    draft: DraftRule,
    event_start: datetime,
    config: Optional[ValidationConfig] = None,
    *,
    title: Optional[str] = None,
) -> DraftRule:
    """Sanitize a draft rule; see validate_with_notices for the steps."""
    return validate_with_notices(draft, event_start, config, title=title).rule
