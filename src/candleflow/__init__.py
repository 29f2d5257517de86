"""Candleflow package root."""

from loguru import logger

from candleflow.engine import (estimate_candle_count, filter_by_range,
                               prepare_chart_data, transform)
from candleflow.exceptions import CandleflowError, TransformationError
from candleflow.intervals import (can_transform, explain_failure,
                                  parse_interval, unit_to_minutes)
from candleflow.types import IntervalSpec, OHLCVBar, RangeToken, TransformResult

# Library code stays quiet unless a front end calls configure_logging()
logger.disable("candleflow")

__all__ = [
    "CandleflowError",
    "TransformationError",
    "IntervalSpec",
    "OHLCVBar",
    "RangeToken",
    "TransformResult",
    "can_transform",
    "estimate_candle_count",
    "explain_failure",
    "filter_by_range",
    "parse_interval",
    "prepare_chart_data",
    "transform",
    "unit_to_minutes",
]
