"""Interval and range menus offered to chart users."""

from __future__ import annotations

from candleflow.types import IntervalOption, RangeToken

INTERVAL_GROUPS: dict[str, list[IntervalOption]] = {
    "ticks": [
        IntervalOption(full="1 tick", short="1t"),
        IntervalOption(full="10 ticks", short="10t"),
        IntervalOption(full="100 ticks", short="100t"),
        IntervalOption(full="1000 ticks", short="1000t"),
    ],
    "seconds": [
        IntervalOption(full="1 second", short="1s"),
        IntervalOption(full="5 seconds", short="5s"),
        IntervalOption(full="10 seconds", short="10s"),
        IntervalOption(full="15 seconds", short="15s"),
        IntervalOption(full="30 seconds", short="30s"),
        IntervalOption(full="45 seconds", short="45s"),
    ],
    "minutes": [
        IntervalOption(full="1 minute", short="1m"),
        IntervalOption(full="2 minutes", short="2m"),
        IntervalOption(full="3 minutes", short="3m"),
        IntervalOption(full="5 minutes", short="5m"),
        IntervalOption(full="10 minutes", short="10m"),
        IntervalOption(full="15 minutes", short="15m"),
        IntervalOption(full="30 minutes", short="30m"),
        IntervalOption(full="45 minutes", short="45m"),
    ],
    "hours": [
        IntervalOption(full="1 hour", short="1H"),
        IntervalOption(full="2 hours", short="2H"),
        IntervalOption(full="3 hours", short="3H"),
        IntervalOption(full="4 hours", short="4H"),
    ],
    "days": [
        IntervalOption(full="1 day", short="1D"),
        IntervalOption(full="1 week", short="1W"),
        IntervalOption(full="1 month", short="1M"),
        IntervalOption(full="3 months", short="3M"),
        IntervalOption(full="6 months", short="6M"),
        IntervalOption(full="12 months", short="12M"),
    ],
    "ranges": [
        IntervalOption(full="1 range", short="1R"),
        IntervalOption(full="10 ranges", short="10R"),
        IntervalOption(full="100 ranges", short="100R"),
        IntervalOption(full="1000 ranges", short="1000R"),
    ],
}

INTERVALS: list[IntervalOption] = [
    option for group in INTERVAL_GROUPS.values() for option in group
]

TIME_RANGES: list[RangeToken] = list(RangeToken)


def find_interval_option(label: str) -> IntervalOption | None:
    """Look up a menu option by its full or short label.

    Full labels match case-insensitively. Short labels are case-sensitive
    because ``1M`` (month) and ``1m`` (minute) differ only in case.

    :param label: Label to look up.
    :returns: The matching option, or None.
    """
    wanted = label.strip()
    for option in INTERVALS:
        if option.full.lower() == wanted.lower() or option.short == wanted:
            return option
    return None
