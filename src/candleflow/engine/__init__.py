"""Bar aggregation, range filtering and candle-count estimation."""

from candleflow.engine.aggregation import aggregate_bars, bucket_start, transform
from candleflow.engine.estimation import (estimate_candle_count,
                                          invalid_combination_message,
                                          is_valid_combination)
from candleflow.engine.pipeline import prepare_chart_data
from candleflow.engine.ranges import filter_by_range, range_cutoff

__all__ = [
    "aggregate_bars",
    "bucket_start",
    "transform",
    "estimate_candle_count",
    "invalid_combination_message",
    "is_valid_combination",
    "prepare_chart_data",
    "filter_by_range",
    "range_cutoff",
]
