"""Interval token parsing and unit resolution.

Interval tokens look like ``"5 minutes"`` or ``"1 hour"``, or arrive as a menu
option pair ``{"full": "5 minutes", "short": "5m"}``. Parsing yields an
:class:`~candleflow.types.IntervalSpec`; resolution converts it to minutes so
intervals of different units can be compared.
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import Any

from candleflow.types import IntervalInput, IntervalOption, IntervalSpec, IntervalUnit

INTERVAL_PATTERN = re.compile(r"^(\d+)\s*(\w+)$")

# Singular and plural spellings of every unit
UNIT_ALIASES: dict[str, IntervalUnit] = {}
for _unit in IntervalUnit:
    UNIT_ALIASES[_unit.value] = _unit
    UNIT_ALIASES[_unit.value + "s"] = _unit
del _unit

# Minutes per unit. Month is a fixed 30-day approximation, used only for
# comparing intervals, never for calendar alignment.
MINUTES_PER_UNIT: dict[IntervalUnit, Fraction] = {
    IntervalUnit.SECOND: Fraction(1, 60),
    IntervalUnit.MINUTE: Fraction(1),
    IntervalUnit.HOUR: Fraction(60),
    IntervalUnit.DAY: Fraction(1440),
    IntervalUnit.WEEK: Fraction(10080),
    IntervalUnit.MONTH: Fraction(43200),
}


def interval_text(interval: IntervalInput | None) -> str | None:
    """Return the full label of an interval given in any accepted form.

    :param interval: Bare string, :class:`IntervalOption`, or ``{full, short}`` mapping.
    :returns: The full label, or None if no label can be extracted.
    """
    if isinstance(interval, IntervalOption):
        return interval.full
    if isinstance(interval, dict):
        interval = interval.get("full")
    if isinstance(interval, str):
        return interval
    return None


def parse_interval(interval: IntervalInput | None) -> IntervalSpec | None:
    """Parse an interval token into value and unit.

    Unit text is matched case-insensitively; singular and plural spellings are
    both accepted. Anything that does not match returns None.

    :param interval: Interval token in any accepted form.
    :returns: Parsed interval, or None when the token is not understood.
    """
    text = interval_text(interval)
    if not text:
        return None

    match = INTERVAL_PATTERN.match(text.strip())
    if match is None:
        return None

    value = int(match.group(1))
    unit = UNIT_ALIASES.get(match.group(2).lower())
    if unit is None or value < 1:
        return None

    return IntervalSpec(value=value, unit=unit)


def exact_minutes(spec: IntervalSpec) -> Fraction | None:
    """Return an interval's length in minutes as an exact fraction.

    :param spec: Parsed interval.
    :returns: Minutes, or None for units that do not measure time.
    """
    per_unit = MINUTES_PER_UNIT.get(spec.unit)
    if per_unit is None:
        return None
    return spec.value * per_unit


def unit_to_minutes(value: int, unit: IntervalUnit | str) -> float | None:
    """Convert ``value`` units into minutes.

    :param value: Number of units.
    :param unit: Unit, as enum or singular/plural text.
    :returns: Minutes, or None for tick/range units and unknown text.
    """
    if not isinstance(unit, IntervalUnit):
        resolved = UNIT_ALIASES.get(str(unit).lower())
        if resolved is None:
            return None
        unit = resolved

    per_unit = MINUTES_PER_UNIT.get(unit)
    if per_unit is None:
        return None
    return float(value * per_unit)


def interval_to_minutes(interval: Any) -> float | None:
    """Parse and resolve an interval token in one step.

    :param interval: Interval token in any accepted form.
    :returns: Minutes, or None when unparseable or not time-based.
    """
    spec = parse_interval(interval)
    if spec is None:
        return None
    return unit_to_minutes(spec.value, spec.unit)
