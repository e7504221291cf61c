"""
Watchrun Debouncer.

Suppresses repeated write events for the same path.
Requires Python 3.11+.
"""

import time
from collections.abc import Callable
from pathlib import Path

from watchrun.utils.logger import LoggerMixin

# Minimum gap between two events on one path for the second to count.
DEBOUNCE_WINDOW = 0.005


class Debouncer(LoggerMixin):
    """
    Drops events that follow another event on the same path too closely.

    The window is measured from the most recently *seen* event, not the
    most recently accepted one: every call refreshes the stored timestamp.
    A steady burst faster than the window therefore yields only its first
    event, and the next accepted event is the first one after a real gap.

    Only the dispatch task calls accept(), so the table is not locked.
    Entries are never evicted; the table holds at most one entry per
    watched path.
    """

    def __init__(
        self,
        window: float = DEBOUNCE_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            window: Suppression window in seconds
            clock: Monotonic time source
        """
        self._window = window
        self._clock = clock
        self._last_seen: dict[Path, float] = {}

    @property
    def window(self) -> float:
        return self._window

    def accept(self, path: Path, now: float | None = None) -> bool:
        """
        Record an event for path and decide whether to keep it.

        Args:
            path: Path the event refers to
            now: Event time; defaults to the clock

        Returns:
            True if the event should be acted on
        """
        if now is None:
            now = self._clock()

        last = self._last_seen.get(path)
        self._last_seen[path] = now

        if last is None:
            return True

        if now - last < self._window:
            self.log.debug("event_suppressed", path=str(path), elapsed=now - last)
            return False
        return True

    def last_seen(self, path: Path) -> float | None:
        """Get the timestamp of the latest event seen for path."""
        return self._last_seen.get(path)

    def __len__(self) -> int:
        return len(self._last_seen)
