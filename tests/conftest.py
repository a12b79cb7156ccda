"""Pytest fixtures and configuration for recurfix tests."""

import pytest
from datetime import datetime

from recurfix.config import ValidationConfig
from recurfix.models.descriptor import (
    EndCondition,
    MonthDayShape,
    RecurrenceDescriptor,
    RecurrenceFrequency,
)


@pytest.fixture
def default_config():
    """Default caps table (daily 5, weekly 10, monthly 20, yearly 100 years)."""
    return ValidationConfig()


@pytest.fixture
def event_start():
    """A plain event start used where the exact date does not matter."""
    return datetime(2022, 1, 1, 9, 0)


@pytest.fixture
def corrupted_end_date():
    """End date written by Outlook's corrupted-recurrence bug."""
    return datetime(1600, 1, 1)


@pytest.fixture
def sample_descriptor_base():
    """Base descriptor data that can be overridden per test.

    Returns a dict with default descriptor attributes.
    """
    return {
        "frequency": RecurrenceFrequency.DAILY,
        "shape": None,
        "interval_raw": 1440,
        "end_condition": EndCondition.NEVER,
        "end_date": None,
        "occurrence_count": None,
    }


@pytest.fixture
def daily_descriptor(sample_descriptor_base):
    """Every day, no end."""
    return RecurrenceDescriptor(**sample_descriptor_base)


@pytest.fixture
def yearly_month_day_descriptor(sample_descriptor_base):
    """Every year on the 13th (of the event's month), no end."""
    return RecurrenceDescriptor(
        **{
            **sample_descriptor_base,
            "frequency": RecurrenceFrequency.YEARLY,
            "shape": MonthDayShape(day=13),
            "interval_raw": 12,
        }
    )
