"""Core collectiondb utilities.

This module exports core utilities for use throughout the package.
"""

from collectiondb.core.config import Settings, get_settings
from collectiondb.core.logging import (
    LoggingContext,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
]
