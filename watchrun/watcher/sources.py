"""
Watchrun Change Sources.

Uniform "stream of change events" over the two detection strategies.
Requires Python 3.11+.
"""

import asyncio
from collections.abc import AsyncIterator
from typing import Protocol

from watchrun.utils.config import Settings
from watchrun.utils.logger import LoggerMixin
from watchrun.watcher.models import ChangeEvent, WatchError
from watchrun.watcher.notify_watcher import NotifyWatcher, WatchItem
from watchrun.watcher.poll_watcher import PollWatcher
from watchrun.watcher.registry import TargetRegistry

_CLOSED = None


class ChangeSource(Protocol):
    """Protocol for change detection strategies."""

    mode: str

    def events(self) -> AsyncIterator[ChangeEvent]:
        """Yield change events until the source ends."""
        ...


class PollChangeSource(LoggerMixin):
    """
    Change source backed by one PollWatcher task per target.

    All watchers hand their events to a single-slot queue, so a watcher
    waits until the consumer has taken its previous event. The stream
    ends once every watcher has stopped.
    """

    mode = "poll"

    def __init__(
        self,
        registry: TargetRegistry,
        period: float,
        stop_event: asyncio.Event,
    ) -> None:
        self._registry = registry
        self._period = period
        self._stop_event = stop_event

    async def _close_when_done(
        self,
        tasks: list[asyncio.Task[None]],
        queue: asyncio.Queue[ChangeEvent | None],
    ) -> None:
        # A crashed watcher must not keep the stream open
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for task, result in zip(tasks, results):
            if isinstance(result, Exception):
                self.log.error("watcher_failed", watcher=task.get_name(), error=repr(result))
        await queue.put(_CLOSED)

    async def events(self) -> AsyncIterator[ChangeEvent]:
        """Yield changes from every poll watcher."""
        queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue(maxsize=1)

        watchers = [
            PollWatcher(target, self._period, queue.put, self._stop_event)
            for target in self._registry
        ]
        tasks = [
            asyncio.create_task(w.run(), name=f"poll:{w.state.path}") for w in watchers
        ]
        closer = asyncio.create_task(self._close_when_done(tasks, queue))

        self.log.info(
            "watching_started",
            mode=self.mode,
            files=len(self._registry),
            period=self._period,
        )

        try:
            while True:
                event = await queue.get()
                if event is _CLOSED:
                    break
                yield event
        finally:
            for task in [*tasks, closer]:
                task.cancel()
            await asyncio.gather(*tasks, closer, return_exceptions=True)
            self.log.info("watching_stopped", mode=self.mode)


class NotifyChangeSource(LoggerMixin):
    """
    Change source backed by a single watchdog subscription.

    Write events are yielded; subscription errors are logged and
    skipped. The stream ends when the stop token is set.
    """

    mode = "notify"

    def __init__(self, registry: TargetRegistry, stop_event: asyncio.Event) -> None:
        self._registry = registry
        self._stop_event = stop_event

    async def _stop_when_signalled(self, watcher: NotifyWatcher) -> None:
        await self._stop_event.wait()
        await asyncio.to_thread(watcher.stop)

    async def events(self) -> AsyncIterator[ChangeEvent]:
        """
        Yield write events on registered paths.

        Raises:
            WatchSetupError: If the subscription cannot be created
        """
        queue: asyncio.Queue[WatchItem] = asyncio.Queue()
        watcher = NotifyWatcher(self._registry, asyncio.get_running_loop(), queue.put_nowait)
        watcher.start()

        stopper = asyncio.create_task(self._stop_when_signalled(watcher))
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    break
                if isinstance(item, WatchError):
                    self.log.warning(
                        "watch_error",
                        path=str(item.path) if item.path else None,
                        error=item.message,
                    )
                    continue
                yield item
        finally:
            stopper.cancel()
            if watcher.is_running:
                await asyncio.to_thread(watcher.stop)


def create_change_source(
    settings: Settings,
    registry: TargetRegistry,
    stop_event: asyncio.Event,
) -> ChangeSource:
    """
    Select the detection strategy from settings.

    A zero poll interval selects OS notifications, anything else polling.
    """
    if settings.poll_mode:
        return PollChangeSource(registry, settings.poll_interval, stop_event)
    return NotifyChangeSource(registry, stop_event)
