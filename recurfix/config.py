"""Validation configuration for recurfix.

The engine never reads the environment on its own: callers pass a ValidationConfig
explicitly (or None for the defaults). Batch tooling that wants environment-driven
caps can opt in with `load_config_from_env()`.
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from recurfix.models import constants
from recurfix.models.descriptor import RecurrenceFrequency


class ValidationConfig(BaseModel):
    """Caps table and sanitizing switches shared by the validator and the repair pass."""

    model_config = ConfigDict(frozen=True)

    max_years_daily: int = Field(constants.DEFAULT_MAX_YEARS_DAILY, ge=0)
    max_years_weekly: int = Field(constants.DEFAULT_MAX_YEARS_WEEKLY, ge=0)
    max_years_monthly: int = Field(constants.DEFAULT_MAX_YEARS_MONTHLY, ge=0)
    max_years_yearly: int = Field(constants.DEFAULT_MAX_YEARS_YEARLY, ge=0)

    sentinel_year: int = constants.SENTINEL_YEAR
    corrupted_before_year: int = constants.CORRUPTED_BEFORE_YEAR
    count_preference_min: int = constants.COUNT_PREFERENCE_MIN
    count_preference_max: int = constants.COUNT_PREFERENCE_MAX
    suspicious_span_years: int = constants.SUSPICIOUS_SPAN_YEARS

    strip_single_occurrence: bool = True
    log_all_changes: bool = True

    def max_years_for(self, frequency: Optional[RecurrenceFrequency]) -> int:
        """Maximum plausible span in years for a frequency (weekly for unknown)."""
        return {
            RecurrenceFrequency.DAILY: self.max_years_daily,
            RecurrenceFrequency.WEEKLY: self.max_years_weekly,
            RecurrenceFrequency.MONTHLY: self.max_years_monthly,
            RecurrenceFrequency.YEARLY: self.max_years_yearly,
        }.get(frequency, self.max_years_weekly)


DEFAULT_CONFIG = ValidationConfig()


_ENV_FIELDS = {
    "RECURFIX_MAX_YEARS_DAILY": "max_years_daily",
    "RECURFIX_MAX_YEARS_WEEKLY": "max_years_weekly",
    "RECURFIX_MAX_YEARS_MONTHLY": "max_years_monthly",
    "RECURFIX_MAX_YEARS_YEARLY": "max_years_yearly",
    "RECURFIX_SENTINEL_YEAR": "sentinel_year",
    "RECURFIX_STRIP_SINGLE_OCCURRENCE": "strip_single_occurrence",
    "RECURFIX_LOG_ALL_CHANGES": "log_all_changes",
}


def resolve_config(config: Optional[ValidationConfig]) -> ValidationConfig:
    """Return config, or DEFAULT_CONFIG when None is passed."""
    return config if config is not None else DEFAULT_CONFIG


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> ValidationConfig:
    """Build a ValidationConfig from RECURFIX_* variables.

    Reads `.env` via python-dotenv first when no explicit mapping is given. Unset
    variables keep their defaults; malformed values raise pydantic's ValidationError.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    overrides = {}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = environ.get(env_name)
        if raw is None or raw.strip() == "":
            continue
        overrides[field_name] = raw.strip()
    return ValidationConfig(**overrides)
