"""Tests for the bucketing and aggregation engine."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from candleflow.engine.aggregation import aggregate_bars, bucket_start, transform
from candleflow.exceptions import SubResolutionError
from candleflow.intervals.parsing import parse_interval
from candleflow.types import IntervalSpec, IntervalUnit, OHLCVBar


def make_bars(
    start: datetime,
    count: int,
    step: timedelta = timedelta(minutes=1),
    volume: float = 1.0,
) -> list[OHLCVBar]:
    """Create bars with distinct, increasing prices."""
    bars = []
    for i in range(count):
        open_price = 100.0 + i
        close_price = open_price + 0.5
        bars.append(
            OHLCVBar(
                timestamp=start + i * step,
                open=open_price,
                high=close_price + 1.0,
                low=open_price - 1.0,
                close=close_price,
                volume=volume,
            )
        )
    return bars


def random_bars(start: datetime, count: int, seed: int = 7) -> list[OHLCVBar]:
    """Create a random walk of minute bars with integer volumes."""
    rng = random.Random(seed)
    bars = []
    price = 50.0
    for i in range(count):
        open_price = price
        close_price = open_price + rng.uniform(-1.0, 1.0)
        bars.append(
            OHLCVBar(
                timestamp=start + timedelta(minutes=i),
                open=open_price,
                high=max(open_price, close_price) + rng.uniform(0.0, 0.5),
                low=min(open_price, close_price) - rng.uniform(0.0, 0.5),
                close=close_price,
                volume=float(rng.randint(0, 500)),
            )
        )
        price = close_price
    return bars


def spec(text: str) -> IntervalSpec:
    parsed = parse_interval(text)
    assert parsed is not None
    return parsed


MIDNIGHT = datetime(2024, 1, 1, 0, 0)


class TestBucketStart:
    """Tests for bucket alignment per unit."""

    def test_minutes_floor_within_hour(self) -> None:
        """Minute buckets floor minute-of-hour and zero the seconds."""
        ts = datetime(2024, 3, 5, 10, 47, 33, 500_000)
        assert bucket_start(ts, spec("15 minutes")) == datetime(2024, 3, 5, 10, 45)
        assert bucket_start(ts, spec("1 minute")) == datetime(2024, 3, 5, 10, 47)

    def test_hours_floor_within_day(self) -> None:
        """Hour buckets floor hour-of-day and zero the minutes."""
        ts = datetime(2024, 3, 5, 11, 59)
        assert bucket_start(ts, spec("2 hours")) == datetime(2024, 3, 5, 10, 0)
        assert bucket_start(ts, spec("4 hours")) == datetime(2024, 3, 5, 8, 0)

    def test_single_day_is_midnight(self) -> None:
        """One-day buckets start at midnight."""
        ts = datetime(2024, 3, 5, 23, 59)
        assert bucket_start(ts, spec("1 day")) == datetime(2024, 3, 5)

    def test_multi_day_aligns_to_epoch(self) -> None:
        """Multi-day buckets are fixed to 1970-01-01, not to the data."""
        # 2024-01-01 is day 19723 since the epoch; 19722 is a multiple of 3.
        assert bucket_start(datetime(2024, 1, 1, 12), spec("3 days")) == datetime(2023, 12, 31)
        assert bucket_start(datetime(2024, 1, 3, 12), spec("3 days")) == datetime(2024, 1, 3)

    def test_week_starts_monday(self) -> None:
        """Week buckets start on Monday at midnight."""
        # 2024-01-01 is a Monday
        assert bucket_start(datetime(2024, 1, 3, 15), spec("1 week")) == datetime(2024, 1, 1)
        assert bucket_start(datetime(2024, 1, 7, 23, 59), spec("1 week")) == datetime(2024, 1, 1)
        assert bucket_start(datetime(2024, 1, 8), spec("1 week")) == datetime(2024, 1, 8)

    def test_month_starts_on_first(self) -> None:
        """Month buckets start on the first of the month."""
        assert bucket_start(datetime(2024, 2, 29, 18), spec("1 month")) == datetime(2024, 2, 1)

    def test_multi_month_floors_within_year(self) -> None:
        """Multi-month buckets floor the month index within the calendar year."""
        assert bucket_start(datetime(2024, 5, 15), spec("3 months")) == datetime(2024, 4, 1)
        assert bucket_start(datetime(2024, 3, 31), spec("3 months")) == datetime(2024, 1, 1)

    def test_multi_month_resets_each_january(self) -> None:
        """Grouping restarts every January instead of rolling across years."""
        five_months = spec("5 months")
        assert bucket_start(datetime(2023, 12, 15), five_months) == datetime(2023, 11, 1)
        assert bucket_start(datetime(2024, 1, 15), five_months) == datetime(2024, 1, 1)

    def test_timezone_is_preserved(self) -> None:
        """Aware timestamps keep their timezone."""
        ts = datetime(2024, 1, 3, 15, 20, tzinfo=timezone.utc)
        assert bucket_start(ts, spec("1 week")) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert bucket_start(ts, spec("3 days")).tzinfo is timezone.utc

    def test_other_units_use_own_timestamp(self) -> None:
        """Units without calendar alignment leave the timestamp as-is."""
        ts = datetime(2024, 1, 3, 15, 20, 7)
        assert bucket_start(ts, IntervalSpec(value=120, unit=IntervalUnit.SECOND)) == ts


class TestAggregateBars:
    """Tests for collapsing one bucket."""

    def test_aggregation_law(self) -> None:
        """Open from first, close from last, extremes and summed volume."""
        bars = make_bars(MIDNIGHT, 4, volume=2.0)
        result = aggregate_bars(bars)

        assert result.timestamp == bars[0].timestamp
        assert result.open == bars[0].open
        assert result.close == bars[-1].close
        assert result.high == max(b.high for b in bars)
        assert result.low == min(b.low for b in bars)
        assert result.volume == 8.0

    def test_single_bar_returned_unchanged(self) -> None:
        """A bucket of one bar yields that bar."""
        bar = make_bars(MIDNIGHT, 1)[0]
        assert aggregate_bars([bar]) is bar

    def test_empty_bucket_raises(self) -> None:
        """Empty buckets are a programming error."""
        with pytest.raises(ValueError):
            aggregate_bars([])


class TestTransform:
    """Tests for transform."""

    def test_sixty_minutes_into_five_minute_candles(self) -> None:
        """60 one-minute bars become 12 five-minute candles."""
        bars = make_bars(MIDNIGHT, 60)
        result = transform(bars, "5 minutes")

        assert len(result) == 12
        assert all(bar.volume == 5 for bar in result)
        assert result[0].timestamp == MIDNIGHT
        for k, bar in enumerate(result):
            assert bar.close == bars[5 * k + 4].close
            assert bar.open == bars[5 * k].open

    def test_empty_input(self) -> None:
        """Empty input gives empty output."""
        assert transform([], "5 minutes") == []

    def test_single_bar(self) -> None:
        """One bar comes back unchanged."""
        bars = make_bars(MIDNIGHT, 1)
        assert transform(bars, "1 hour") == bars

    def test_same_resolution_is_identity(self) -> None:
        """Transforming to the source resolution changes nothing."""
        bars = make_bars(MIDNIGHT, 30)
        assert transform(bars, "1 minute") == bars

    def test_timestamp_is_first_bar_not_bucket_start(self) -> None:
        """Candles are stamped with their first contributing bar."""
        bars = make_bars(datetime(2024, 1, 1, 9, 30), 90)
        result = transform(bars, "1 hour")

        assert [bar.timestamp for bar in result] == [
            datetime(2024, 1, 1, 9, 30),
            datetime(2024, 1, 1, 10, 0),
        ]
        assert [bar.volume for bar in result] == [30, 60]

    def test_gaps_are_not_filled(self) -> None:
        """Missing minutes simply produce smaller or later buckets."""
        bars = [make_bars(MIDNIGHT + timedelta(minutes=m), 1)[0] for m in (0, 1, 7)]
        result = transform(bars, "5 minutes")

        assert len(result) == 2
        assert result[0].volume == 2
        assert result[1].timestamp == MIDNIGHT + timedelta(minutes=7)

    def test_multi_day_epoch_alignment(self) -> None:
        """Three-day candles split on epoch-relative boundaries."""
        bars = make_bars(MIDNIGHT, 6, step=timedelta(days=1))
        result = transform(bars, "3 days")

        assert [bar.timestamp.day for bar in result] == [1, 3, 6]
        assert [bar.volume for bar in result] == [2, 3, 1]

    def test_weekly_candles(self) -> None:
        """Two weeks of daily bars become two weekly candles."""
        bars = make_bars(MIDNIGHT, 14, step=timedelta(days=1))
        result = transform(bars, "1 week")

        assert len(result) == 2
        assert result[1].timestamp == datetime(2024, 1, 8)

    def test_monthly_candles(self) -> None:
        """Daily bars spanning a month boundary split on the first."""
        bars = make_bars(datetime(2024, 1, 30), 4, step=timedelta(days=1))
        result = transform(bars, "1 month")

        assert [bar.volume for bar in result] == [2, 2]
        assert result[1].timestamp == datetime(2024, 2, 1)

    def test_unparseable_target_passes_through(self) -> None:
        """Targets that do not parse return the input unchanged."""
        bars = make_bars(MIDNIGHT, 10)
        assert transform(bars, "whenever") == bars

    def test_tick_target_passes_through(self) -> None:
        """Non-time targets return the input unchanged."""
        bars = make_bars(MIDNIGHT, 10)
        assert transform(bars, "100 ticks") == bars

    def test_sub_minute_target_fails_loudly(self) -> None:
        """Targets finer than one minute raise SubResolutionError."""
        bars = make_bars(MIDNIGHT, 10)
        with pytest.raises(SubResolutionError, match="30 seconds"):
            transform(bars, "30 seconds")

    def test_seconds_multiple_of_a_minute_keeps_bars(self) -> None:
        """Second-based targets of whole minutes are not calendar-aligned."""
        bars = make_bars(MIDNIGHT, 10)
        assert transform(bars, "120 seconds") == bars

    def test_structured_target(self) -> None:
        """Targets may be given as a {full, short} pair."""
        bars = make_bars(MIDNIGHT, 60)
        assert len(transform(bars, {"full": "15 minutes", "short": "15m"})) == 4


class TestTransformProperties:
    """Invariants that hold for any valid transformation."""

    TARGETS = ["2 minutes", "5 minutes", "15 minutes", "1 hour", "4 hours", "1 day"]

    @pytest.fixture
    def bars(self) -> list[OHLCVBar]:
        return random_bars(datetime(2024, 2, 28, 21, 13), 3000)

    @pytest.mark.parametrize("target", TARGETS)
    def test_volume_is_conserved(self, bars: list[OHLCVBar], target: str) -> None:
        """Total volume is unchanged by aggregation."""
        result = transform(bars, target)
        assert sum(b.volume for b in result) == sum(b.volume for b in bars)

    @pytest.mark.parametrize("target", TARGETS)
    def test_aggregation_law_per_bucket(self, bars: list[OHLCVBar], target: str) -> None:
        """Each candle summarizes exactly the bars of its bucket."""
        target_spec = spec(target)
        buckets: dict[datetime, list[OHLCVBar]] = {}
        for bar in bars:
            buckets.setdefault(bucket_start(bar.timestamp, target_spec), []).append(bar)

        result = transform(bars, target)
        assert len(result) == len(buckets)
        for candle, members in zip(result, buckets.values()):
            assert candle.open == members[0].open
            assert candle.close == members[-1].close
            assert candle.high == max(b.high for b in members)
            assert candle.low == min(b.low for b in members)

    @pytest.mark.parametrize("target", TARGETS)
    def test_output_is_compressed_and_ordered(self, bars: list[OHLCVBar], target: str) -> None:
        """Output never grows and stays chronological."""
        result = transform(bars, target)
        timestamps = [b.timestamp for b in result]

        assert len(result) < len(bars)
        assert timestamps == sorted(timestamps)

    @pytest.mark.parametrize("target", TARGETS)
    def test_idempotent(self, bars: list[OHLCVBar], target: str) -> None:
        """Re-transforming to the same interval is a no-op."""
        once = transform(bars, target)
        assert transform(once, target) == once
