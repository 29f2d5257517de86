"""Interval parsing, resolution and compatibility checks."""

from candleflow.intervals.catalog import (INTERVAL_GROUPS, INTERVALS,
                                          TIME_RANGES, find_interval_option)
from candleflow.intervals.parsing import (interval_text, interval_to_minutes,
                                          parse_interval, unit_to_minutes)
from candleflow.intervals.validation import (can_transform, explain_failure,
                                             validate_transform)

__all__ = [
    "INTERVAL_GROUPS",
    "INTERVALS",
    "TIME_RANGES",
    "find_interval_option",
    "interval_text",
    "interval_to_minutes",
    "parse_interval",
    "unit_to_minutes",
    "can_transform",
    "explain_failure",
    "validate_transform",
]
