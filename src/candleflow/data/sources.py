"""Bar sources feeding the transformation engine.

This module provides an abstract interface for bar sources and concrete
implementations reading CSV files and generating random-walk sample data.
"""

from __future__ import annotations

import csv
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np
from pydantic import ValidationError

from candleflow.exceptions import DataSourceError
from candleflow.intervals.parsing import exact_minutes, parse_interval
from candleflow.types import OHLCVBar, SampleDataConfig

if TYPE_CHECKING:
    from candleflow.types import ChartConfig


def parse_timestamp(value: str, timestamp_format: str | None = None) -> datetime:
    """Parse a timestamp string into a timezone-aware datetime.

    :param value: ISO 8601 text (``Z`` suffix allowed) or text in ``timestamp_format``.
    :param timestamp_format: Optional strptime format.
    :returns: Timezone-aware datetime (UTC if no timezone specified).
    :raises ValueError: If the text cannot be parsed.
    """
    if timestamp_format:
        ts = datetime.strptime(value, timestamp_format)
    else:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


class DataSource(ABC):
    """Abstract base class for bar sources.

    All source implementations must inherit from this class and implement
    the `fetch_bars` method.
    """

    @abstractmethod
    def fetch_bars(self) -> Iterator[OHLCVBar]:
        """Produce bars in chronological order.

        :returns: Iterator of OHLCVBar objects.
        :raises DataSourceError: If the bars cannot be produced.
        """
        ...


class CSVDataSource(DataSource):
    """Data source that reads bar data from a CSV file.

    Expected CSV format (default columns):
    - timestamp: ISO format datetime string
    - open, high, low, close: Prices
    - volume: Traded volume

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - timestamp_col: Column name for timestamp (default: "timestamp")
        - open_col: Column name for open price (default: "open")
        - high_col: Column name for high price (default: "high")
        - low_col: Column name for low price (default: "low")
        - close_col: Column name for close price (default: "close")
        - volume_col: Column name for volume (default: "volume")
        - delimiter: CSV delimiter (default: ",")
        - timestamp_format: strptime format for timestamps (default: ISO format)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize CSV data source.

        :param source_params: Configuration with file_path and optional column mappings.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("CSVDataSource requires 'file_path' in source_params")

        self.timestamp_col = self.params.get("timestamp_col", "timestamp")
        self.open_col = self.params.get("open_col", "open")
        self.high_col = self.params.get("high_col", "high")
        self.low_col = self.params.get("low_col", "low")
        self.close_col = self.params.get("close_col", "close")
        self.volume_col = self.params.get("volume_col", "volume")
        self.delimiter = self.params.get("delimiter", ",")
        self.timestamp_format = self.params.get("timestamp_format")

    def fetch_bars(self) -> Iterator[OHLCVBar]:
        """Read bar data from the CSV file.

        :returns: Iterator of OHLCVBar objects in file order.
        :raises DataSourceError: If reading fails.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"CSV file not found: {self.file_path}")

        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)

                for row in reader:
                    ts_str = row.get(self.timestamp_col)
                    if not ts_str:
                        continue  # Skip rows without timestamp

                    try:
                        ts = parse_timestamp(ts_str, self.timestamp_format)
                    except ValueError as e:
                        raise DataSourceError(
                            f"Failed to parse timestamp '{ts_str}': {e}"
                        ) from e

                    try:
                        yield OHLCVBar(
                            timestamp=ts,
                            open=float(row[self.open_col]),
                            high=float(row[self.high_col]),
                            low=float(row[self.low_col]),
                            close=float(row[self.close_col]),
                            volume=float(row[self.volume_col]),
                        )
                    except (KeyError, ValueError, TypeError) as e:
                        raise DataSourceError(f"Failed to parse row {row}: {e}") from e

        except csv.Error as e:
            raise DataSourceError(f"CSV parsing error: {e}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read CSV file: {e}") from e


class SampleDataSource(DataSource):
    """Data source that generates a random walk of fixed-resolution bars.

    Each bar opens at the previous close and moves by a uniform step of at
    most ``volatility / 2`` of the previous close. Highs and lows are widened
    by up to 2 price units around the close.

    :param source_params: Parameters accepted by
        :class:`~candleflow.types.SampleDataConfig` (``start`` and ``count``
        are required).
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize sample data source.

        :param source_params: Generator parameters.
        :raises DataSourceError: If parameters are invalid.
        """
        self.params = source_params or {}
        try:
            self.config = SampleDataConfig(**self.params)
        except ValidationError as e:
            raise DataSourceError(f"Invalid sample data parameters: {e}") from e

        spec = parse_interval(self.config.resolution)
        minutes = exact_minutes(spec) if spec is not None else None
        if not minutes:
            raise DataSourceError(
                f"Sample resolution must be a time interval, got '{self.config.resolution}'"
            )
        self.step = timedelta(minutes=float(minutes))

    def fetch_bars(self) -> Iterator[OHLCVBar]:
        """Generate the configured number of bars.

        :returns: Iterator of OHLCVBar objects.
        """
        cfg = self.config
        rng = np.random.default_rng(cfg.seed)

        returns = 1.0 + (rng.random(cfg.count) - 0.5) * cfg.volatility
        closes = cfg.initial_price * np.cumprod(returns)
        opens = np.concatenate(([cfg.initial_price], closes[:-1]))
        highs = np.maximum(np.maximum(opens, closes), closes + rng.random(cfg.count) * 2)
        lows = np.minimum(np.minimum(opens, closes), closes - rng.random(cfg.count) * 2)
        volumes = rng.integers(100_000, 1_100_000, size=cfg.count)

        for i in range(cfg.count):
            yield OHLCVBar(
                timestamp=cfg.start + i * self.step,
                open=float(opens[i]),
                high=float(highs[i]),
                low=float(lows[i]),
                close=float(closes[i]),
                volume=float(volumes[i]),
            )


def resolve_data_source(config: ChartConfig) -> DataSource:
    """Construct a data source from configuration.

    :param config: ChartConfig with data_source and source_params.
    :returns: DataSource instance for the specified type.
    :raises DataSourceError: If data_source type is unrecognized.
    """
    source_type = config.data_source.lower()

    if source_type == "csv":
        return CSVDataSource(config.source_params)
    elif source_type == "sample":
        return SampleDataSource(config.source_params)
    else:
        raise DataSourceError(
            f"Unrecognized data source type: '{config.data_source}'. "
            f"Supported types: csv, sample"
        )
