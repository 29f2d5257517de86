"""Compatibility checks between a source resolution and a target interval.

Bars can only be aggregated into a coarser interval that is a whole multiple of
the source resolution. :func:`validate_transform` raises the specific
:class:`~candleflow.exceptions.TransformationError` subclass describing why a
request is rejected; :func:`explain_failure` and :func:`can_transform` are
derived from it so they always agree.
"""

from __future__ import annotations

from candleflow.exceptions import (ParseError, ResolutionMismatchError,
                                   TransformationError, UnsupportedUnitError)
from candleflow.intervals.parsing import exact_minutes, interval_text, parse_interval
from candleflow.types import IntervalInput, IntervalUnit


def validate_transform(source: IntervalInput, target: IntervalInput) -> None:
    """Check that bars at ``source`` resolution can be aggregated into ``target``.

    :param source: Resolution of the raw bars.
    :param target: Requested output interval.
    :raises UnsupportedUnitError: If the target is tick/range based or a unit
        cannot be resolved to minutes.
    :raises ParseError: If either interval is not understood.
    :raises ResolutionMismatchError: If the target is finer than the source or
        not an integer multiple of it.
    """
    source_text = interval_text(source) or ""
    target_text = interval_text(target) or ""

    lowered = target_text.lower()
    if IntervalUnit.TICK.value in lowered:
        raise UnsupportedUnitError(
            "Cannot transform to tick-based intervals. "
            "Tick data requires specialized market data."
        )
    if IntervalUnit.RANGE.value in lowered:
        raise UnsupportedUnitError(
            "Cannot transform to range-based intervals. "
            "Range data requires specialized market data."
        )

    source_spec = parse_interval(source)
    target_spec = parse_interval(target)
    if source_spec is None or target_spec is None:
        raise ParseError("Invalid interval format.")

    source_minutes = exact_minutes(source_spec)
    target_minutes = exact_minutes(target_spec)
    if source_minutes is None or target_minutes is None:
        raise UnsupportedUnitError("Unsupported time unit.")

    if target_minutes < source_minutes:
        raise ResolutionMismatchError(
            f"Cannot transform from {source_text} to {target_text}: "
            "target interval is smaller than source data resolution."
        )

    if target_minutes % source_minutes != 0:
        raise ResolutionMismatchError(
            f"Cannot transform from {source_text} to {target_text}: "
            "intervals are not evenly divisible."
        )


def explain_failure(source: IntervalInput, target: IntervalInput) -> str | None:
    """Describe why a transformation is rejected.

    :param source: Resolution of the raw bars.
    :param target: Requested output interval.
    :returns: A user-facing message, or None if the transformation is allowed.
    """
    try:
        validate_transform(source, target)
    except TransformationError as e:
        return str(e)
    return None


def can_transform(source: IntervalInput, target: IntervalInput) -> bool:
    """Return True if bars at ``source`` resolution can be aggregated into ``target``."""
    return explain_failure(source, target) is None
