"""
Watchrun Dispatcher.

Turns change events into command invocations.
Requires Python 3.11+.
"""

from watchrun.executor.command import CommandExecutor
from watchrun.utils.logger import LoggerMixin
from watchrun.watcher.debouncer import Debouncer
from watchrun.watcher.sources import ChangeSource


class Dispatcher(LoggerMixin):
    """
    Consumes a change source and fires the executor per accepted event.

    With a debouncer (notification mode) each event is filtered through
    it first; without one (poll mode) every event is accepted.
    """

    def __init__(
        self,
        source: ChangeSource,
        executor: CommandExecutor,
        debouncer: Debouncer | None = None,
        verbose: bool = False,
    ) -> None:
        self._source = source
        self._executor = executor
        self._debouncer = debouncer
        self._verbose = verbose
        self._accepted = 0

    @property
    def accepted(self) -> int:
        """Get number of events that triggered the command."""
        return self._accepted

    async def run(self) -> None:
        """Dispatch events until the source ends."""
        async for event in self._source.events():
            if self._debouncer is not None and not self._debouncer.accept(
                event.path, event.observed_at
            ):
                continue

            self._accepted += 1
            if self._verbose:
                self.log.info("file_changed", path=str(event.path))

            self._executor.fire()
