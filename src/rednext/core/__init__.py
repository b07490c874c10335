"""Core rednext utilities.

This module exports configuration and logging helpers used throughout the package.
"""

from rednext.core.config import Settings, get_settings
from rednext.core.logging import LoggingContext, configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
]
