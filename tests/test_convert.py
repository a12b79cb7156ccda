"""End-to-end tests: descriptor -> RRULE, and agreement with the repair pass.

These tests verify the whole structured path (build, validate, serialize) and that the
textual repair pass reaches byte-identical output for the same logical recurrence.
"""

import pytest
from datetime import date, datetime, timezone
from dateutil.rrule import rrulestr

from recurfix.models.descriptor import (
    EndCondition,
    MonthDayShape,
    NthWeekdayShape,
    RecurrenceDescriptor,
    RecurrenceFrequency,
    Weekday,
    WeekdayShape,
    WeekOrdinal,
)
from recurfix.recurrence.convert import descriptor_to_rrule
from recurfix.recurrence.repair import repair


class TestScenarios:
    def test_yearly_month_day_never_ends(self, yearly_month_day_descriptor):
        rule = descriptor_to_rrule(yearly_month_day_descriptor, datetime(2020, 6, 13, 10, 0))
        assert rule == "FREQ=YEARLY;BYMONTH=6;BYMONTHDAY=13"

    def test_daily_corrupted_end_capped_to_five_years(self, sample_descriptor_base, corrupted_end_date):
        d = RecurrenceDescriptor(
            **{
                **sample_descriptor_base,
                "end_condition": EndCondition.AFTER_DATE,
                "end_date": corrupted_end_date,
            }
        )
        assert descriptor_to_rrule(d, datetime(2022, 1, 1)) == "FREQ=DAILY;UNTIL=20270101T235959Z"

    def test_count_preferred_over_corrupted_date(self, sample_descriptor_base):
        d = RecurrenceDescriptor(
            **{
                **sample_descriptor_base,
                "end_condition": EndCondition.AFTER_DATE,
                "end_date": datetime(1600, 12, 31),
                "occurrence_count": 4,
            }
        )
        rule = descriptor_to_rrule(d, datetime(2019, 3, 4))
        assert rule == "FREQ=DAILY;COUNT=4"
        assert "UNTIL" not in rule

    def test_daily_interval_in_minutes(self, sample_descriptor_base, event_start):
        one_day = RecurrenceDescriptor(**sample_descriptor_base)
        three_days = RecurrenceDescriptor(**{**sample_descriptor_base, "interval_raw": 4320})
        assert descriptor_to_rrule(one_day, event_start) == "FREQ=DAILY"
        assert descriptor_to_rrule(three_days, event_start) == "FREQ=DAILY;INTERVAL=3"

    def test_yearly_twelve_months_has_no_interval(self, yearly_month_day_descriptor):
        rule = descriptor_to_rrule(yearly_month_day_descriptor, datetime(2020, 6, 13))
        assert "INTERVAL" not in rule

    def test_from_raw_pattern_codes(self):
        d = RecurrenceDescriptor.from_pattern(
            recur_frequency=8205,
            pattern_type=3,
            pattern_type_specific={"weekdays": [False, False, False, False, False, False, True], "nth": 5},
            period=12,
            end_type=8227,
        )
        assert descriptor_to_rrule(d, datetime(2021, 1, 30)) == "FREQ=YEARLY;BYMONTH=1;BYDAY=-1SA"

    def test_unknown_frequency_code_falls_back_to_daily(self):
        d = RecurrenceDescriptor.from_pattern(recur_frequency=1234, pattern_type=2, pattern_type_specific=5)
        assert descriptor_to_rrule(d, datetime(2021, 1, 1)) == "FREQ=DAILY"

    def test_unknown_frequency_keeps_count(self):
        d = RecurrenceDescriptor.from_pattern(recur_frequency=1234, end_type=8226, occurrence_count=5)
        assert descriptor_to_rrule(d, datetime(2021, 1, 1)) == "FREQ=DAILY;COUNT=5"

    def test_unknown_frequency_keeps_end_date(self):
        d = RecurrenceDescriptor.from_pattern(recur_frequency=1234, end_type=8225, end_date=datetime(2021, 3, 1))
        assert descriptor_to_rrule(d, datetime(2021, 1, 1)) == "FREQ=DAILY;UNTIL=20210301T235959Z"

    def test_unknown_frequency_corrupted_end_date_capped(self):
        d = RecurrenceDescriptor.from_pattern(recur_frequency=1234, end_type=8225, end_date=datetime(1600, 1, 1))
        assert descriptor_to_rrule(d, datetime(2021, 1, 1)) == "FREQ=DAILY;UNTIL=20260101T235959Z"


class TestSingleOccurrence:
    @pytest.mark.parametrize("frequency", list(RecurrenceFrequency))
    @pytest.mark.parametrize("end_condition", list(EndCondition))
    def test_always_no_recurrence(self, frequency, end_condition):
        d = RecurrenceDescriptor(
            frequency=frequency,
            shape=WeekdayShape(weekdays=[Weekday.MO]) if frequency == RecurrenceFrequency.WEEKLY else None,
            interval_raw=1,
            end_condition=end_condition,
            end_date=datetime(1600, 1, 1),
            occurrence_count=1,
        )
        assert descriptor_to_rrule(d, datetime(2021, 1, 4)) is None


class TestYearlyDisambiguation:
    @pytest.mark.parametrize(
        "shape",
        [
            MonthDayShape(day=2),
            NthWeekdayShape(ordinal=WeekOrdinal.FIRST, weekdays=[Weekday.SU]),
            WeekdayShape(weekdays=[Weekday.WE]),
        ],
    )
    @pytest.mark.parametrize("month", [1, 7, 12])
    def test_by_month_equals_start_month(self, shape, month):
        d = RecurrenceDescriptor(frequency=RecurrenceFrequency.YEARLY, shape=shape, interval_raw=12)
        rule = descriptor_to_rrule(d, datetime(2021, month, 2))
        assert f"BYMONTH={month};" in rule


# (descriptor, event start, what older builders stored for the same appointment)
_LEGACY_CORPUS = [
    (
        RecurrenceDescriptor(
            frequency=RecurrenceFrequency.DAILY,
            interval_raw=1440,
            end_condition=EndCondition.AFTER_DATE,
            end_date=datetime(1600, 1, 1),
        ),
        datetime(2022, 1, 1),
        "FREQ=DAILY;UNTIL=21000101T235959Z",
    ),
    (
        RecurrenceDescriptor(
            frequency=RecurrenceFrequency.DAILY,
            interval_raw=2880,
            end_condition=EndCondition.AFTER_DATE,
            end_date=datetime(1600, 12, 31),
        ),
        datetime(2019, 4, 1),
        "FREQ=DAILY;INTERVAL=2880;UNTIL=21001231",
    ),
    (
        RecurrenceDescriptor(
            frequency=RecurrenceFrequency.YEARLY,
            shape=NthWeekdayShape(ordinal=WeekOrdinal.LAST, weekdays=[Weekday.SA]),
            interval_raw=12,
        ),
        datetime(2021, 1, 30),
        "FREQ=YEARLY;INTERVAL=12;BYDAY=-1SA",
    ),
    (
        RecurrenceDescriptor(
            frequency=RecurrenceFrequency.MONTHLY,
            shape=MonthDayShape(day=15),
            interval_raw=1,
            end_condition=EndCondition.AFTER_DATE,
            end_date=datetime(1601, 3, 15),
        ),
        datetime(2010, 3, 15),
        "FREQ=MONTHLY;BYMONTHDAY=15;UNTIL=21000315T235959Z",
    ),
    (
        RecurrenceDescriptor(
            frequency=RecurrenceFrequency.YEARLY,
            shape=MonthDayShape(day=13),
            interval_raw=12,
            end_condition=EndCondition.AFTER_DATE,
            end_date=datetime(1600, 6, 13),
            occurrence_count=60,
        ),
        datetime(2020, 6, 13),
        "FREQ=YEARLY;INTERVAL=12;BYMONTHDAY=13;UNTIL=21000613T235959Z",
    ),
    (
        RecurrenceDescriptor(
            frequency=RecurrenceFrequency.WEEKLY,
            shape=WeekdayShape(weekdays=[Weekday.MO, Weekday.WE]),
            interval_raw=2,
            end_condition=EndCondition.AFTER_DATE,
            end_date=datetime(1600, 1, 1),
        ),
        datetime(2012, 9, 3),
        "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;UNTIL=21000101T235959Z",
    ),
]


class TestRepairAgreesWithStructuredPath:
    """Repairing text without the descriptor reaches the structured path's bytes."""

    @pytest.mark.parametrize("descriptor,start,legacy", _LEGACY_CORPUS)
    def test_repairing_structured_output_is_a_no_op(self, descriptor, start, legacy):
        structured = descriptor_to_rrule(descriptor, start)
        assert repair(structured, start) == structured

    @pytest.mark.parametrize("descriptor,start,legacy", _LEGACY_CORPUS)
    def test_repairing_legacy_text_matches_structured(self, descriptor, start, legacy):
        assert repair(legacy, start) == descriptor_to_rrule(descriptor, start)


class TestStrictConsumer:
    """Produced rules parse with dateutil and mean what the appointment meant."""

    def test_capped_daily_rule_ends_on_cap(self, sample_descriptor_base, corrupted_end_date):
        start = datetime(2022, 1, 1, 9, 0, tzinfo=timezone.utc)
        d = RecurrenceDescriptor(
            **{
                **sample_descriptor_base,
                "end_condition": EndCondition.AFTER_DATE,
                "end_date": corrupted_end_date,
            }
        )
        rule = rrulestr("RRULE:" + descriptor_to_rrule(d, start), dtstart=start)
        assert list(rule)[-1].date() == date(2027, 1, 1)

    def test_yearly_last_saturday_stays_in_start_month(self):
        start = datetime(2021, 1, 30, 18, 0, tzinfo=timezone.utc)
        d = RecurrenceDescriptor(
            frequency=RecurrenceFrequency.YEARLY,
            shape=NthWeekdayShape(ordinal=WeekOrdinal.LAST, weekdays=[Weekday.SA]),
            interval_raw=12,
        )
        rule = rrulestr("RRULE:" + descriptor_to_rrule(d, start), dtstart=start)
        assert [occ.date() for occ in rule[:2]] == [date(2021, 1, 30), date(2022, 1, 29)]
