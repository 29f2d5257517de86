"""Core type definitions for the candle transformation engine.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Interval Types
# ---------------------------------------------------------------------------


class IntervalUnit(str, Enum):
    """Unit of an interval token."""

    TICK = "tick"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    RANGE = "range"

    @property
    def is_time_based(self) -> bool:
        """Whether the unit measures calendar time."""
        return self not in (IntervalUnit.TICK, IntervalUnit.RANGE)


class IntervalSpec(FrozenModel):
    """Parsed interval such as ``5 minutes``.

    :param value: Number of units (at least 1).
    :param unit: Unit of the interval.
    """

    value: int = Field(ge=1)
    unit: IntervalUnit

    def __str__(self) -> str:
        suffix = "" if self.value == 1 else "s"
        return f"{self.value} {self.unit.value}{suffix}"


class IntervalOption(FrozenModel):
    """Interval as offered by a menu: a full label and a short label.

    :param full: Full label, e.g. ``"5 minutes"``.
    :param short: Short label, e.g. ``"5m"``.
    """

    full: str
    short: str


# An interval may be passed around as a bare string or as a menu option.
IntervalInput = Union[str, IntervalOption, dict[str, Any]]


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class OHLCVBar(FrozenModel):
    """One open/high/low/close/volume record for a time slice.

    :param timestamp: Start of the bar's time slice.
    :param open: Opening price.
    :param high: Highest price during the bar period.
    :param low: Lowest price during the bar period.
    :param close: Closing price.
    :param volume: Traded volume during the bar period.
    """

    timestamp: datetime
    open: float = Field(allow_inf_nan=False)
    high: float = Field(allow_inf_nan=False)
    low: float = Field(allow_inf_nan=False)
    close: float = Field(allow_inf_nan=False)
    volume: float = Field(ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def _check_price_envelope(self) -> OHLCVBar:
        if self.low > min(self.open, self.close):
            raise ValueError("low must not exceed open or close")
        if self.high < max(self.open, self.close):
            raise ValueError("high must not be below open or close")
        return self


# ---------------------------------------------------------------------------
# Range Types
# ---------------------------------------------------------------------------


class RangeToken(str, Enum):
    """Named trailing display window, anchored at the last bar."""

    ONE_DAY = "1D"
    FIVE_DAYS = "5D"
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    FIVE_YEARS = "5Y"
    ALL = "All"

    @property
    def is_open_ended(self) -> bool:
        """Whether the window has no fixed duration."""
        return self in (RangeToken.YEAR_TO_DATE, RangeToken.ALL)


# ---------------------------------------------------------------------------
# Result Types
# ---------------------------------------------------------------------------


class TransformResult(FrozenModel):
    """Outcome of preparing chart data for one interval/range selection.

    :param interval: Requested target interval label.
    :param range: Requested display range.
    :param source_count: Number of raw bars supplied.
    :param bars: Final ordered bars (empty when rejected).
    :param error: Human-readable rejection message, or None on success.
    """

    interval: str
    range: RangeToken
    source_count: int = 0
    bars: list[OHLCVBar] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the selection produced data without error."""
        return self.error is None


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class ChartConfig(FrozenModel):
    """Configuration for a transform run.

    :param source_interval: Resolution of the raw bars.
    :param interval: Target interval label.
    :param range: Display range to keep.
    :param data_source: Name of the bar source (``csv`` or ``sample``).
    :param source_params: Source-specific parameters.
    :param log_level: Logging level for the run.
    """

    source_interval: str = "1 minute"
    interval: str
    range: RangeToken = RangeToken.ALL
    data_source: str
    source_params: dict[str, Any] = Field(default_factory=dict)
    log_level: str = "INFO"


class SampleDataConfig(FrozenModel):
    """Parameters for the random-walk sample generator.

    :param start: Timestamp of the first generated bar.
    :param count: Number of bars to generate.
    :param resolution: Interval between consecutive bars.
    :param initial_price: Price the walk starts from.
    :param volatility: Relative size of each step.
    :param seed: Random seed, or None for a fresh stream.
    """

    start: datetime
    count: int = Field(gt=0)
    resolution: str = "1 minute"
    initial_price: float = Field(default=100.0, gt=0)
    volatility: float = Field(default=0.02, ge=0)
    seed: int | None = None


__all__ = [
    "FrozenModel",
    "IntervalUnit",
    "IntervalSpec",
    "IntervalOption",
    "IntervalInput",
    "OHLCVBar",
    "RangeToken",
    "TransformResult",
    "ChartConfig",
    "SampleDataConfig",
]
