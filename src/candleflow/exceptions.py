"""Candleflow exception hierarchy.

All candleflow-specific exceptions derive from :class:`CandleflowError` so
callers can catch all library errors uniformly.
"""

from __future__ import annotations


class CandleflowError(Exception):
    """Base class for candleflow exceptions.

    Derived exceptions should extend this class so that callers can catch all
    candleflow-specific errors uniformly.
    """


class ConfigError(CandleflowError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(CandleflowError):
    """Raised when reading or generating bar data fails."""


class TransformationError(CandleflowError):
    """Raised when a requested interval transformation cannot be performed.

    The message is meant to be shown to the user verbatim.
    """


class ParseError(TransformationError):
    """Raised when interval text does not match the ``<number> <unit>`` grammar."""


class UnsupportedUnitError(TransformationError):
    """Raised when a tick, range or other non-time unit is used for aggregation."""


class ResolutionMismatchError(TransformationError):
    """Raised when the target is finer than, or not a multiple of, the source."""


class SubResolutionError(TransformationError):
    """Raised by the aggregation engine for a target finer than one minute."""


__all__ = [
    "CandleflowError",
    "ConfigError",
    "DataSourceError",
    "TransformationError",
    "ParseError",
    "UnsupportedUnitError",
    "ResolutionMismatchError",
    "SubResolutionError",
]
