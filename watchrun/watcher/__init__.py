"""
Watchrun Watcher Package.

Change detection by polling or OS notifications.
Requires Python 3.11+.
"""

from watchrun.watcher.debouncer import DEBOUNCE_WINDOW, Debouncer
from watchrun.watcher.models import ChangeEvent, WatchError, WatchTarget
from watchrun.watcher.notify_watcher import NotifyWatcher
from watchrun.watcher.poll_watcher import PollWatcher
from watchrun.watcher.registry import TargetRegistry
from watchrun.watcher.sources import (
    ChangeSource,
    NotifyChangeSource,
    PollChangeSource,
    create_change_source,
)

__all__ = [
    "DEBOUNCE_WINDOW",
    "Debouncer",
    "ChangeEvent",
    "WatchError",
    "WatchTarget",
    "NotifyWatcher",
    "PollWatcher",
    "TargetRegistry",
    "ChangeSource",
    "NotifyChangeSource",
    "PollChangeSource",
    "create_change_source",
]
