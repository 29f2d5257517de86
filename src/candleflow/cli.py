#!/usr/bin/env python3
"""Command-line interface for the candle transformation engine."""

from __future__ import annotations

import argparse
import sys


def cmd_transform(args: argparse.Namespace) -> int:
    """Aggregate bars from a configured source into the requested candles."""
    from candleflow.commands.transform import load_chart_config, run_transform
    from candleflow.exceptions import ConfigError, DataSourceError
    from candleflow.logger import configure_logging, logger

    try:
        config = load_chart_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    # The CLI owns the process, so loguru's default stderr sink goes too.
    logger.remove()
    configure_logging(config.log_level)

    print("=" * 60)
    print("TRANSFORM")
    print("=" * 60)
    print(f"Source:      {config.data_source} ({config.source_interval})")
    print(f"Interval:    {config.interval}")
    print(f"Range:       {config.range.value}")

    try:
        result = run_transform(config)
    except DataSourceError as e:
        print(f"Data source error: {e}")
        return 1

    print(f"\n   Loaded {result.source_count} bars")

    if not result.ok:
        print("\nData Transformation Error")
        print(f"   {result.error}")
        return 1

    if not result.bars:
        print("\nNo data available for the selected time range and interval.")
        return 0

    print(f"   Produced {len(result.bars)} candles")
    print("\n" + "=" * 60)
    print(f"{'Timestamp':<26} {'Open':>9} {'High':>9} {'Low':>9} {'Close':>9} {'Volume':>12}")
    print("-" * 80)
    shown = result.bars[-args.limit:] if args.limit > 0 else result.bars
    if len(shown) < len(result.bars):
        print(f"   ... {len(result.bars) - len(shown)} earlier candles omitted")
    for bar in shown:
        print(
            f"{bar.timestamp.isoformat():<26} {bar.open:>9.2f} {bar.high:>9.2f} "
            f"{bar.low:>9.2f} {bar.close:>9.2f} {bar.volume:>12,.0f}"
        )

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Report whether a source resolution can be aggregated into a target."""
    from candleflow.intervals import explain_failure

    error = explain_failure(args.source, args.target)
    if error is None:
        print(f"✅ {args.source} -> {args.target}: supported")
        return 0

    print(f"❌ {args.source} -> {args.target}: {error}")
    return 1


def cmd_estimate(args: argparse.Namespace) -> int:
    """Print the expected number of candles for an interval and range."""
    from candleflow.engine import (estimate_candle_count,
                                   invalid_combination_message,
                                   is_valid_combination)

    count = estimate_candle_count(args.interval, args.range)
    print(f"Interval:  {args.interval}")
    print(f"Range:     {args.range}")
    print(f"Candles:   {count if count is not None else 'unknown'}")

    if not is_valid_combination(args.interval, args.range):
        print(f"⚠️  {invalid_combination_message(args.interval, args.range)}")
        return 1

    return 0


def cmd_intervals(args: argparse.Namespace) -> int:
    """List the interval menu and which entries the source data supports."""
    from candleflow.intervals import INTERVAL_GROUPS, TIME_RANGES, can_transform

    print(f"{'Interval':<14} {'Short':<7} {'From ' + args.source:>20}")
    print("-" * 45)
    for group, options in INTERVAL_GROUPS.items():
        print(f"[{group}]")
        for option in options:
            mark = "yes" if can_transform(args.source, option) else "no"
            print(f"{option.full:<14} {option.short:<7} {mark:>20}")

    print(f"\nRanges: {', '.join(r.value for r in TIME_RANGES)}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Candle interval transformation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Transform command
    transform_parser = subparsers.add_parser(
        "transform", help="Aggregate bars into candles from a configuration"
    )
    transform_parser.add_argument("config", help="Path to YAML configuration file")
    transform_parser.add_argument(
        "-n", "--limit", type=int, default=20, help="Show the last N candles (0 = all)"
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check", help="Check whether an interval transformation is allowed"
    )
    check_parser.add_argument("source", help="Source resolution (e.g., '1 minute')")
    check_parser.add_argument("target", help="Target interval (e.g., '5 minutes')")

    # Estimate command
    estimate_parser = subparsers.add_parser(
        "estimate", help="Estimate the candle count for an interval and range"
    )
    estimate_parser.add_argument("interval", help="Interval (e.g., '5 minutes')")
    estimate_parser.add_argument("range", help="Range (1D, 5D, 1M, 3M, 6M, YTD, 1Y, 5Y, All)")

    # Intervals command
    intervals_parser = subparsers.add_parser(
        "intervals", help="List available intervals and ranges"
    )
    intervals_parser.add_argument(
        "--source", default="1 minute", help="Source resolution (default: 1 minute)"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "transform":
        return cmd_transform(args)
    elif args.command == "check":
        return cmd_check(args)
    elif args.command == "estimate":
        return cmd_estimate(args)
    elif args.command == "intervals":
        return cmd_intervals(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
