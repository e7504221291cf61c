"""
Watchrun Notification Watcher.

Cross-platform file system monitoring using watchdog.
Requires Python 3.11+.
"""

import asyncio
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import (
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from watchrun.exceptions import WatchSetupError
from watchrun.utils.logger import LoggerMixin
from watchrun.watcher.models import ChangeEvent, WatchError
from watchrun.watcher.registry import TargetRegistry

# Items handed to the event loop: a change, an error, or None once closed
WatchItem = ChangeEvent | WatchError | None


def _event_path(raw: str | bytes) -> Path:
    return Path(os.fsdecode(raw)).absolute()


def _content_signature(path: Path) -> tuple[int, int] | None:
    """(mtime_ns, size) of path, or None if it cannot be stat'ed."""
    try:
        st = path.stat()
    except OSError:
        return None
    return st.st_mtime_ns, st.st_size


class TargetEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Forwards events on registered paths to the asyncio loop.

    Runs on the watchdog observer thread. Content writes on registered
    paths become ChangeEvents; removal of a registered path and any
    failure while handling an event become WatchErrors.

    inotify reports attribute changes (chmod, chown) as modifications
    too, so a modification only counts when the file's mtime or size
    differs from the last one seen.
    """

    def __init__(
        self,
        registry: TargetRegistry,
        post: Callable[[WatchItem], None],
    ) -> None:
        """
        Initialize the handler.

        Args:
            registry: Paths whose events are forwarded
            post: Thread-safe callback receiving each item
        """
        super().__init__()
        self._registry = registry
        self._post = post
        # Only touched from the observer thread once watching starts
        self._signatures: dict[Path, tuple[int, int] | None] = {
            target.path: _content_signature(target.path) for target in registry
        }

    def dispatch(self, event: FileSystemEvent) -> None:
        """Dispatch an event, reporting handler failures as errors."""
        try:
            super().dispatch(event)
        except Exception as e:
            self._post(WatchError(message=str(e), path=_event_path(event.src_path)))

    def _content_changed(self, path: Path) -> bool:
        signature = _content_signature(path)
        if signature is None or signature == self._signatures.get(path):
            return False
        self._signatures[path] = signature
        return True

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if not isinstance(event, FileModifiedEvent):
            return

        path = _event_path(event.src_path)
        if path not in self._registry:
            return

        if self._content_changed(path):
            self._post(ChangeEvent(path=path, observed_at=time.monotonic()))
        else:
            self.log.debug("attribute_change_ignored", path=str(path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle removal of a watched file."""
        if not isinstance(event, FileDeletedEvent):
            return

        path = _event_path(event.src_path)
        if path in self._registry:
            self._post(WatchError(message="watched file was removed", path=path))

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle a watched file being renamed away."""
        if not isinstance(event, FileMovedEvent):
            return

        path = _event_path(event.src_path)
        if path in self._registry:
            self._post(WatchError(message="watched file was moved", path=path))


class NotifyWatcher(LoggerMixin):
    """
    Single OS change-notification subscription covering every target.

    Watchdog observes directories, so each unique parent directory is
    scheduled non-recursively and events are filtered to the registry.
    """

    def __init__(
        self,
        registry: TargetRegistry,
        loop: asyncio.AbstractEventLoop,
        on_item: Callable[[WatchItem], Any],
    ) -> None:
        """
        Initialize the notification watcher.

        Args:
            registry: Paths to watch
            loop: Event loop that receives the items
            on_item: Called on the loop for each item; None marks the end
        """
        self._registry = registry
        self._loop = loop
        self._on_item = on_item
        self._handler = TargetEventHandler(registry, self._post)
        self._observer: Any = None
        self._running = False

    def _post(self, item: WatchItem) -> None:
        try:
            self._loop.call_soon_threadsafe(self._on_item, item)
        except RuntimeError:
            # loop already closed during shutdown
            self.log.debug("watch_item_dropped", item=repr(item))

    def start(self) -> None:
        """
        Subscribe to change notifications for every target.

        Raises:
            WatchSetupError: If the observer cannot be created or a
                directory cannot be registered
        """
        if self._running:
            return

        observer = Observer()
        directory = None
        try:
            for directory in self._registry.directories:
                observer.schedule(self._handler, str(directory), recursive=False)
            observer.start()
        except OSError as e:
            observer.stop()
            path = str(directory) if directory is not None else None
            raise WatchSetupError(f"cannot watch {path}: {e}", path=path) from e

        self._observer = observer
        self._running = True

        self.log.info(
            "watching_started",
            mode="notify",
            files=len(self._registry),
            directories=len(self._registry.directories),
        )

    def stop(self) -> None:
        """Stop the subscription and close the item stream."""
        if not self._running:
            return

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        self._running = False
        self._post(None)
        self.log.info("watching_stopped", mode="notify")

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def __enter__(self) -> "NotifyWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
