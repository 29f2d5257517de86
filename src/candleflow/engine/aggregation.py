"""Bucketing and aggregation of bars into coarser calendar-aligned candles.

Each input bar is assigned to a bucket identified by an aligned start instant
for the target interval. Consecutive bars sharing a bucket are collapsed into a
single bar:

- ``open``: first bar's open
- ``high``: highest high
- ``low``: lowest low
- ``close``: last bar's close
- ``volume``: summed volume
- ``timestamp``: first bar's own timestamp (not the aligned bucket start)

Calendar fields are read in each timestamp's own timezone (or as naive local
values when the timestamp carries none).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from itertools import groupby
from typing import Sequence

from loguru import logger

from candleflow.exceptions import SubResolutionError
from candleflow.intervals.parsing import exact_minutes, interval_text, parse_interval
from candleflow.types import IntervalInput, IntervalSpec, IntervalUnit, OHLCVBar

# Multi-day buckets are counted from this date so boundaries do not depend on
# where a dataset happens to start.
EPOCH = date(1970, 1, 1)


def _midnight(timestamp: datetime, day: date | None = None) -> datetime:
    return datetime.combine(day or timestamp.date(), time(), tzinfo=timestamp.tzinfo)


def bucket_start(timestamp: datetime, spec: IntervalSpec) -> datetime:
    """Compute the aligned start of the bucket containing ``timestamp``.

    - minutes: minute-of-hour floored to a multiple of N
    - hours: hour-of-day floored to a multiple of N
    - days: midnight; for N > 1 the day index since 1970-01-01 is floored to a
      multiple of N
    - weeks: Monday 00:00 of the week
    - months: first of the month; for N > 1 the month is floored to a multiple
      of N within the same calendar year
    - other units: the timestamp itself. This includes second-based targets
      that are whole minutes (e.g. ``120 seconds``): they pass validation but
      every bar stays in its own bucket, so output size equals input size
      even though the target is coarser than the source.

    :param timestamp: Timestamp of an input bar.
    :param spec: Target interval.
    :returns: Bucket start instant.
    """
    n = spec.value
    unit = spec.unit

    if unit is IntervalUnit.MINUTE:
        return timestamp.replace(minute=timestamp.minute // n * n, second=0, microsecond=0)

    if unit is IntervalUnit.HOUR:
        return timestamp.replace(
            hour=timestamp.hour // n * n, minute=0, second=0, microsecond=0
        )

    if unit is IntervalUnit.DAY:
        if n == 1:
            return _midnight(timestamp)
        days_since_epoch = (timestamp.date() - EPOCH).days
        aligned = EPOCH + timedelta(days=days_since_epoch // n * n)
        return _midnight(timestamp, aligned)

    if unit is IntervalUnit.WEEK:
        monday = timestamp.date() - timedelta(days=timestamp.weekday())
        return _midnight(timestamp, monday)

    if unit is IntervalUnit.MONTH:
        month = (timestamp.month - 1) // n * n + 1
        return _midnight(timestamp, date(timestamp.year, month, 1))

    return timestamp


def aggregate_bars(bucket: Sequence[OHLCVBar]) -> OHLCVBar:
    """Collapse the bars of one bucket into a single bar.

    :param bucket: Non-empty, chronologically ordered bars.
    :returns: Aggregated bar stamped with the first bar's timestamp.
    :raises ValueError: If the bucket is empty.
    """
    if not bucket:
        raise ValueError("Cannot aggregate an empty bucket")
    if len(bucket) == 1:
        return bucket[0]

    first = bucket[0]
    return OHLCVBar(
        timestamp=first.timestamp,
        open=first.open,
        high=max(bar.high for bar in bucket),
        low=min(bar.low for bar in bucket),
        close=bucket[-1].close,
        volume=sum(bar.volume for bar in bucket),
    )


def transform(bars: Sequence[OHLCVBar], target_interval: IntervalInput) -> list[OHLCVBar]:
    """Aggregate ``bars`` into candles of ``target_interval``.

    The target should already have passed
    :func:`~candleflow.intervals.validation.validate_transform`. An unparseable
    or non-time target leaves the data unchanged.

    :param bars: Bars sorted ascending by timestamp, without duplicates.
    :param target_interval: Requested output interval.
    :returns: Aggregated bars in chronological order.
    :raises SubResolutionError: If the target is finer than one minute.
    """
    if not bars:
        return []

    spec = parse_interval(target_interval)
    minutes = exact_minutes(spec) if spec is not None else None
    if minutes is None:
        logger.debug(
            "Interval {!r} is not a time interval, returning bars unchanged",
            interval_text(target_interval),
        )
        return list(bars)

    if minutes < 1:
        raise SubResolutionError(
            f"Cannot transform to {interval_text(target_interval)}: "
            "target interval is smaller than source data resolution"
        )

    result = [
        aggregate_bars(list(bucket))
        for _, bucket in groupby(bars, key=lambda bar: bucket_start(bar.timestamp, spec))
    ]

    logger.debug("Aggregated {} bars into {} {} candles", len(bars), len(result), spec)
    return result
