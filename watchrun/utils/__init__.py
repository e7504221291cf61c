"""
Watchrun Utilities Package.

Configuration, logging and file enumeration shared across modules.
Requires Python 3.11+.
"""

from watchrun.utils.config import Settings, get_settings
from watchrun.utils.files import collect_files
from watchrun.utils.logger import configure_logging, get_logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "collect_files",
    "configure_logging",
    "get_logger",
    "LoggerMixin",
]
