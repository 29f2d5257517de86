"""Trailing display-window filtering."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from loguru import logger

from candleflow.types import OHLCVBar, RangeToken

RANGE_DURATIONS: dict[RangeToken, timedelta] = {
    RangeToken.ONE_DAY: timedelta(days=1),
    RangeToken.FIVE_DAYS: timedelta(days=5),
    RangeToken.ONE_MONTH: timedelta(days=30),
    RangeToken.THREE_MONTHS: timedelta(days=90),
    RangeToken.SIX_MONTHS: timedelta(days=180),
    RangeToken.ONE_YEAR: timedelta(days=365),
    RangeToken.FIVE_YEARS: timedelta(days=1825),
}


def parse_range(value: RangeToken | str | None) -> RangeToken | None:
    """Return the :class:`RangeToken` named by ``value``, or None if unknown."""
    if isinstance(value, RangeToken):
        return value
    try:
        return RangeToken(value)
    except ValueError:
        return None


def range_cutoff(anchor: datetime, range_token: RangeToken) -> datetime | None:
    """Compute the earliest timestamp kept for a range.

    :param anchor: Timestamp of the last bar.
    :param range_token: Display range.
    :returns: Cutoff instant, or None when nothing is cut off.
    """
    if range_token is RangeToken.YEAR_TO_DATE:
        return anchor.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    duration = RANGE_DURATIONS.get(range_token)
    if duration is None:
        return None
    return anchor - duration


def filter_by_range(
    bars: Sequence[OHLCVBar], range_token: RangeToken | str
) -> Sequence[OHLCVBar]:
    """Keep the bars inside a trailing window ending at the last bar.

    The window is anchored at the last bar's timestamp, not at the current
    time. ``All`` and unrecognized ranges keep everything; an empty input is
    returned unchanged.

    :param bars: Bars sorted ascending by timestamp.
    :param range_token: Display range.
    :returns: The suffix of ``bars`` with ``timestamp >= cutoff``.
    """
    if not bars:
        return bars

    token = parse_range(range_token)
    cutoff = range_cutoff(bars[-1].timestamp, token) if token is not None else None
    if cutoff is None:
        return bars

    kept = [bar for bar in bars if bar.timestamp >= cutoff]
    logger.debug("Range {} kept {} of {} bars (cutoff {})", token.value, len(kept), len(bars), cutoff)
    return kept
