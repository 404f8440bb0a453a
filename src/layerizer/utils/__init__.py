"""Utility functions for layerizer.

This module provides utility functions including:

- Logging setup and configuration
- Progress and statistics tracking
- Cooperative yield hooks for long pixel loops
"""

from layerizer.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)
from layerizer.utils.yielding import (
    FLOOD_FILL_YIELD_INTERVAL,
    SCAN_YIELD_ROWS,
    YieldCounter,
    YieldHook,
)

__all__ = [
    "FLOOD_FILL_YIELD_INTERVAL",
    "SCAN_YIELD_ROWS",
    "ProcessingLogger",
    "ProcessingStats",
    "YieldCounter",
    "YieldHook",
    "configure_logging",
]
