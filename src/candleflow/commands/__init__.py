"""CLI command implementations for candleflow.

Each command module provides:
- Configuration loading and validation
- Command execution logic
"""

from candleflow.commands.transform import load_chart_config, run_transform

__all__ = [
    "load_chart_config",
    "run_transform",
]
