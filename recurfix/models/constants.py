"""Constants for recurfix.

This module centralizes the magic numbers of the mailbox recurrence format and the
default sanitizing thresholds used throughout the engine.
"""


# Source-format units
MINUTES_PER_DAY = 1440
MONTHS_PER_YEAR = 12

# Maximum plausible span per frequency, in years from the event start
DEFAULT_MAX_YEARS_DAILY = 5
DEFAULT_MAX_YEARS_WEEKLY = 10
DEFAULT_MAX_YEARS_MONTHLY = 20
DEFAULT_MAX_YEARS_YEARLY = 100

# End dates before this year are treated as corrupted (Outlook writes 1600-12-31)
CORRUPTED_BEFORE_YEAR = 1900

# Far-future placeholder year for corrupted end dates
SENTINEL_YEAR = 2100

# A corrupted end date is replaced by COUNT when the occurrence count is in this window
COUNT_PREFERENCE_MIN = 2
COUNT_PREFERENCE_MAX = 50

# UNTIL on the sentinel year spanning more than this many years is suspicious
SUSPICIOUS_SPAN_YEARS = 70

# Daily intervals at or above this are probably misclassified weekly patterns
SUSPICIOUS_DAILY_INTERVAL = 7

# UNTIL time-of-day (end of day)
END_OF_DAY_HOUR = 23
END_OF_DAY_MINUTE = 59
END_OF_DAY_SECOND = 59

# MS-OXOCAL numeric codes exposed by mailbox decoders
FREQUENCY_CODE_DAILY = 8202
FREQUENCY_CODE_WEEKLY = 8203
FREQUENCY_CODE_MONTHLY = 8204
FREQUENCY_CODE_YEARLY = 8205

PATTERN_TYPE_DAY = 0
PATTERN_TYPE_WEEK = 1
PATTERN_TYPE_MONTH = 2
PATTERN_TYPE_MONTH_NTH = 3
PATTERN_TYPE_MONTH_END = 4

END_TYPE_AFTER_DATE = 8225
END_TYPE_AFTER_COUNT = 8226
END_TYPE_NEVER = 8227

# Legacy placeholder written for recurrences that could not be parsed at all
LEGACY_UNPARSED_PLACEHOLDER = "RECURRING"
