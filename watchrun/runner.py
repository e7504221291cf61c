"""
Watchrun Runner.

Wires enumeration, the change source, the dispatcher and the executor
together and runs them until stopped.
Requires Python 3.11+.
"""

import asyncio
import signal

from watchrun.dispatcher import Dispatcher
from watchrun.exceptions import ConfigurationError
from watchrun.executor.command import CommandExecutor
from watchrun.utils.config import Settings
from watchrun.utils.files import collect_files
from watchrun.utils.logger import ensure_stderr_logging, get_logger
from watchrun.watcher.debouncer import Debouncer
from watchrun.watcher.registry import TargetRegistry
from watchrun.watcher.sources import create_change_source

logger = get_logger(__name__)


def build_dispatcher(
    settings: Settings,
    registry: TargetRegistry,
    stop_event: asyncio.Event,
) -> tuple[Dispatcher, CommandExecutor]:
    """
    Build the dispatcher for the strategy selected by settings.

    Returns:
        Tuple of (dispatcher, executor)
    """
    source = create_change_source(settings, registry, stop_event)
    executor = CommandExecutor(
        settings.command,
        delay=settings.delay,
        mode=settings.execution_mode,
    )
    # Polling already filters on newer mtimes; only notifications are debounced
    debouncer = None if settings.poll_mode else Debouncer()
    dispatcher = Dispatcher(source, executor, debouncer=debouncer, verbose=settings.verbose)
    return dispatcher, executor


async def run(settings: Settings, stop_event: asyncio.Event | None = None) -> None:
    """
    Watch the configured files and run the command on every change.

    Returns once the stop token is set, or in poll mode once every
    watched file has gone. In-flight commands are awaited before
    returning.

    Raises:
        ConfigurationError: If no command is configured
        RootPathError: If the root path cannot be stat'ed
        WatchSetupError: If notifications cannot be subscribed
    """
    if not settings.command.strip():
        raise ConfigurationError("no command configured")

    ensure_stderr_logging()
    if stop_event is None:
        stop_event = asyncio.Event()

    files = collect_files(settings.path, settings.types)
    registry = TargetRegistry(files)
    logger.info(
        "targets_registered",
        root=settings.path,
        types=settings.types,
        count=len(registry),
    )

    dispatcher, executor = build_dispatcher(settings, registry, stop_event)
    try:
        await dispatcher.run()
    finally:
        await executor.drain()


def _install_signal_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop_event.set))


async def _run_until_signalled(settings: Settings) -> None:
    stop_event = asyncio.Event()
    _install_signal_handlers(stop_event)
    await run(settings, stop_event)


def run_blocking(settings: Settings) -> None:
    """Run watchrun in a fresh event loop, stopping on SIGINT/SIGTERM."""
    asyncio.run(_run_until_signalled(settings))
