"""Loguru logger configuration for command-line runs.

The library disables its own loguru output on import; front ends call
:func:`configure_logging` to turn it on at the level they want. Only the sink
added here is replaced on later calls, sinks installed by the host
application are left alone.
"""

from __future__ import annotations

import sys

from loguru import logger

from candleflow.exceptions import ConfigError

VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Id of the stderr sink owned by configure_logging, if one is installed.
_handler_id: int | None = None


def configure_logging(level: str = "INFO") -> str:
    """Route candleflow log records to stderr at ``level``.

    Calling this again swaps the previously added stderr sink for a new one.

    :param level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL (any case).
    :returns: The normalized level name.
    :raises ConfigError: If the level is not recognized.
    """
    global _handler_id

    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{level}'. Choose from: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    if _handler_id is not None:
        try:
            logger.remove(_handler_id)
        except ValueError:
            # Already removed by the host application.
            pass

    _handler_id = logger.add(sys.stderr, level=level_upper, format=LOG_FORMAT, colorize=None)
    logger.enable("candleflow")
    return level_upper


__all__ = ["configure_logging", "VALID_LOG_LEVELS", "logger"]
