"""Configuration and execution for the transform command.

Example config file (chart.yaml):

    source_interval: "1 minute"  # Optional, resolution of the raw bars
    interval: "5 minutes"        # Or {full: "5 minutes", short: "5m"}
    range: "1D"                  # Optional, defaults to All
    data_source: "csv"           # csv | sample
    source_params:
      file_path: "bars.csv"
    logging:
      level: "INFO"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from candleflow.data.sources import resolve_data_source
from candleflow.engine.pipeline import prepare_chart_data
from candleflow.exceptions import ConfigError
from candleflow.intervals.parsing import interval_text, parse_interval
from candleflow.logger import VALID_LOG_LEVELS
from candleflow.types import ChartConfig, RangeToken, TransformResult

VALID_DATA_SOURCES = frozenset(["csv", "sample"])


def _parse_interval_field(raw_config: dict[str, Any], field: str) -> str:
    """Extract and check an interval field.

    :param raw_config: Parsed YAML mapping.
    :param field: Field name.
    :returns: Full interval label.
    :raises ConfigError: If the value is not a parseable interval.
    """
    label = interval_text(raw_config[field])
    if label is None or parse_interval(label) is None:
        raise ConfigError(
            f"'{field}' must be an interval like '5 minutes', got {raw_config[field]!r}"
        )
    return label


def load_chart_config(config_path: str | Path) -> ChartConfig:
    """Parse and validate a chart configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated ChartConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    # Validate required fields
    required_fields = ["interval", "data_source"]
    for field in required_fields:
        if field not in raw_config:
            raise ConfigError(f"Missing required field: {field}")

    interval = _parse_interval_field(raw_config, "interval")

    source_interval = "1 minute"
    if "source_interval" in raw_config:
        source_interval = _parse_interval_field(raw_config, "source_interval")

    # Parse range (optional)
    raw_range = str(raw_config.get("range", RangeToken.ALL.value))
    try:
        range_token = RangeToken(raw_range)
    except ValueError as e:
        raise ConfigError(
            f"Invalid range '{raw_range}'. "
            f"Valid options: {[r.value for r in RangeToken]}"
        ) from e

    # Parse data source
    data_source = raw_config["data_source"]
    if not isinstance(data_source, str) or data_source.lower() not in VALID_DATA_SOURCES:
        raise ConfigError(
            f"Invalid data_source '{data_source}'. "
            f"Valid options: {sorted(VALID_DATA_SOURCES)}"
        )

    source_params: dict[str, Any] = raw_config.get("source_params") or {}
    if not isinstance(source_params, dict):
        raise ConfigError("'source_params' must be a mapping")

    # Parse logging (optional)
    raw_logging = raw_config.get("logging", {})
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")

    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. "
            f"Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return ChartConfig(
        source_interval=source_interval,
        interval=interval,
        range=range_token,
        data_source=data_source.lower(),
        source_params=source_params,
        log_level=log_level,
    )


def run_transform(config: ChartConfig) -> TransformResult:
    """Load bars for a configuration and prepare them for display.

    :param config: Validated chart configuration.
    :returns: Prepared bars or the rejection message.
    :raises DataSourceError: If the bars cannot be loaded.
    """
    source = resolve_data_source(config)
    bars = list(source.fetch_bars())
    return prepare_chart_data(
        bars,
        config.interval,
        config.range,
        source_interval=config.source_interval,
    )
