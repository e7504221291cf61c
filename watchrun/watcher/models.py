"""
Watchrun Watcher Models.

Values passed between watchers and the dispatcher.
Requires Python 3.11+.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WatchTarget:
    """A filesystem path registered for change observation."""

    path: Path


@dataclass(frozen=True)
class ChangeEvent:
    """A detected modification of a watched path."""

    path: Path
    observed_at: float  # time.monotonic() at detection


@dataclass(frozen=True)
class WatchError:
    """A non-fatal error reported by the notification subscription."""

    message: str
    path: Path | None = None
