"""Advisory candle counts and interval/range combination checks.

These helpers only inform what a chart selection is likely to show; the
aggregation engine never consumes them.
"""

from __future__ import annotations

from fractions import Fraction

from candleflow.engine.ranges import parse_range
from candleflow.intervals.parsing import exact_minutes, interval_text, parse_interval
from candleflow.types import IntervalInput, IntervalUnit, RangeToken

# Assumed activity for intervals that are not time-based (varies by market)
TICKS_PER_DAY = 1000
RANGES_PER_DAY = 100

RANGE_DAYS: dict[RangeToken, int] = {
    RangeToken.ONE_DAY: 1,
    RangeToken.FIVE_DAYS: 5,
    RangeToken.ONE_MONTH: 30,
    RangeToken.THREE_MONTHS: 90,
    RangeToken.SIX_MONTHS: 180,
    RangeToken.ONE_YEAR: 365,
    RangeToken.FIVE_YEARS: 1825,
}

MINUTES_PER_DAY = 1440


def range_to_minutes(range_token: RangeToken | str) -> int | None:
    """Length of a fixed-duration range in minutes, or None if open-ended."""
    token = parse_range(range_token)
    days = RANGE_DAYS.get(token) if token is not None else None
    if days is None:
        return None
    return days * MINUTES_PER_DAY


def estimate_candle_count(interval: IntervalInput, range_token: RangeToken | str) -> int | None:
    """Estimate how many candles a selection produces.

    Tick and range intervals use a fixed density of ticks or ranges per day;
    time intervals divide the range length by the interval length.

    :param interval: Selected interval.
    :param range_token: Selected display range.
    :returns: Floored candle count, or None for ``YTD``/``All`` ranges and
        intervals that cannot be resolved.
    """
    spec = parse_interval(interval)
    token = parse_range(range_token)
    if spec is None or token is None or token.is_open_ended:
        return None

    days = RANGE_DAYS[token]
    if spec.unit is IntervalUnit.TICK:
        return days * TICKS_PER_DAY // spec.value
    if spec.unit is IntervalUnit.RANGE:
        return days * RANGES_PER_DAY // spec.value

    interval_minutes = exact_minutes(spec)
    if not interval_minutes:
        return None
    return int(Fraction(days * MINUTES_PER_DAY) // interval_minutes)


def is_valid_combination(interval: IntervalInput, range_token: RangeToken | str) -> bool:
    """Check that an interval fits inside a display range.

    ``YTD`` and ``All`` accept any interval, as do tick and range intervals.
    Otherwise the interval must not be longer than the range.
    """
    token = parse_range(range_token)
    if token is not None and token.is_open_ended:
        return True

    spec = parse_interval(interval)
    if spec is not None and not spec.unit.is_time_based:
        return True

    interval_minutes = exact_minutes(spec) if spec is not None else None
    range_minutes = range_to_minutes(range_token)
    if interval_minutes is None or range_minutes is None:
        return False
    return interval_minutes <= range_minutes


def invalid_combination_message(interval: IntervalInput, range_token: RangeToken | str) -> str:
    """User-facing message for a rejected interval/range combination."""
    range_label = range_token.value if isinstance(range_token, RangeToken) else range_token
    return (
        f"Invalid combination: {interval_text(interval)} interval cannot be used "
        f"with {range_label} range. The interval is larger than the time range."
    )
