"""Recurrence rule construction, validation and repair for recurfix."""

from recurfix.recurrence.builder import build, normalize_interval
from recurfix.recurrence.convert import descriptor_to_rrule, summary_to_rrule
from recurfix.recurrence.repair import RepairAction, RepairResult, has_suspicious_until, repair, repair_rule
from recurfix.recurrence.rrule_export import serialize
from recurfix.recurrence.rrule_parse import RuleParseError, parse_rrule
from recurfix.recurrence.summary_parser import parse_recurrence_summary
from recurfix.recurrence.validator import (
    NoticeCode,
    ValidationNotice,
    ValidationOutcome,
    validate,
    validate_with_notices,
)

__all__ = [
    "build",
    "normalize_interval",
    "descriptor_to_rrule",
    "summary_to_rrule",
    "RepairAction",
    "RepairResult",
    "has_suspicious_until",
    "repair",
    "repair_rule",
    "serialize",
    "RuleParseError",
    "parse_rrule",
    "parse_recurrence_summary",
    "NoticeCode",
    "ValidationNotice",
    "ValidationOutcome",
    "validate",
    "validate_with_notices",
]
