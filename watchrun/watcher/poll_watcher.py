"""
Watchrun Poll Watcher.

Detects modifications by periodically stat'ing a file and comparing
its modification time with the last one observed.
Requires Python 3.11+.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from watchrun.utils.logger import LoggerMixin
from watchrun.watcher.models import ChangeEvent, WatchTarget


@dataclass
class PollState:
    """Per-path polling state."""

    path: Path
    last_mtime_ns: int | None = None

    def observe(self, mtime_ns: int) -> bool:
        """
        Record a freshly stat'ed modification time.

        Returns:
            True if it is strictly later than the stored one. The first
            observation is stored without reporting a change.
        """
        if self.last_mtime_ns is None:
            self.last_mtime_ns = mtime_ns
            return False

        if mtime_ns > self.last_mtime_ns:
            self.last_mtime_ns = mtime_ns
            return True

        return False


async def wait_or_stop(stop_event: asyncio.Event, timeout: float) -> bool:
    """
    Sleep for timeout seconds unless the stop token is set first.

    Returns:
        True if the stop token was set
    """
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout)
    except TimeoutError:
        return False
    return True


class PollWatcher(LoggerMixin):
    """
    Watches a single file by polling its modification time.

    The watcher runs until the stop token is set or the file can no
    longer be stat'ed. A missing file and any other stat failure both
    end the watcher after logging; neither is retried and neither
    affects other watchers.
    """

    def __init__(
        self,
        target: WatchTarget,
        period: float,
        emit: Callable[[ChangeEvent], Awaitable[None]],
        stop_event: asyncio.Event,
    ) -> None:
        """
        Initialize the poll watcher.

        Args:
            target: Path to watch
            period: Seconds to sleep between two stats
            emit: Coroutine receiving each detected change
            stop_event: Shared stop token
        """
        self._target = target
        self._period = period
        self._emit = emit
        self._stop_event = stop_event
        self._state = PollState(path=target.path)
        self._running = False

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    async def run(self) -> None:
        """Poll until stopped."""
        self._running = True
        path = self._target.path
        try:
            while not self._stop_event.is_set():
                try:
                    mtime_ns = path.stat().st_mtime_ns
                except FileNotFoundError:
                    self.log.warning("file_does_not_exist", path=str(path))
                    return
                except OSError as e:
                    self.log.error("file_stat_failed", path=str(path), error=str(e))
                    return

                if self._state.observe(mtime_ns):
                    await self._emit(ChangeEvent(path=path, observed_at=time.monotonic()))

                if await wait_or_stop(self._stop_event, self._period):
                    return
        finally:
            self._running = False
