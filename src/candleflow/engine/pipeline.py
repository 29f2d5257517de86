"""Validate, aggregate and window raw bars for one chart selection."""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from candleflow.engine.aggregation import transform
from candleflow.engine.ranges import filter_by_range, parse_range
from candleflow.exceptions import TransformationError
from candleflow.intervals.parsing import interval_text
from candleflow.intervals.validation import validate_transform
from candleflow.types import IntervalInput, OHLCVBar, RangeToken, TransformResult

DEFAULT_SOURCE_INTERVAL = "1 minute"


def prepare_chart_data(
    raw_bars: Sequence[OHLCVBar],
    target_interval: IntervalInput,
    range_token: RangeToken | str = RangeToken.ALL,
    source_interval: IntervalInput = DEFAULT_SOURCE_INTERVAL,
) -> TransformResult:
    """Turn raw bars into the candles shown for an interval/range selection.

    Rejections are reported through :attr:`TransformResult.error` with a
    message suitable for display; no bars are returned alongside an error.

    Example usage::

        result = prepare_chart_data(bars, {"full": "5 minutes", "short": "5m"}, "1D")
        if result.ok:
            draw(result.bars)
        else:
            show(result.error)

    :param raw_bars: Bars at ``source_interval`` resolution, sorted ascending.
    :param target_interval: Requested output interval.
    :param range_token: Display range; unknown names keep all bars.
    :param source_interval: Resolution of ``raw_bars``.
    :returns: The prepared bars or the rejection message.
    """
    label = interval_text(target_interval) or ""
    token = parse_range(range_token) or RangeToken.ALL
    base = {"interval": label, "range": token, "source_count": len(raw_bars)}

    try:
        validate_transform(source_interval, target_interval)
        bars = transform(raw_bars, target_interval)
    except TransformationError as e:
        logger.warning("Rejected transformation to {!r}: {}", label, e)
        return TransformResult(**base, error=str(e))

    windowed = filter_by_range(bars, token)
    return TransformResult(**base, bars=list(windowed))
