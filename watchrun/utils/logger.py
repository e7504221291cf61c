"""
Watchrun Structured Logging Module.

Provides consistent, structured logging throughout the application.
Log lines always go to stderr: stdout belongs to the commands being run.
Requires Python 3.11+.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from watchrun.utils.config import Settings

# Third-party loggers that are only interesting when something breaks
QUIET_LOGGERS = {
    "watchdog": logging.WARNING,
    "watchdog.observers.inotify_buffer": logging.ERROR,
    "asyncio": logging.WARNING,
}


class WatchContext:
    """Processor stamping every entry with the app and its watch mode."""

    def __init__(self, settings: Settings) -> None:
        self._context = {
            "app": settings.app_name,
            "version": settings.app_version,
            "watch_mode": "poll" if settings.poll_mode else "notify",
        }

    def __call__(
        self, logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in self._context.items():
            event_dict.setdefault(key, value)
        return event_dict


def configure_logging(settings: Settings) -> None:
    """
    Configure structured logging for the application.

    Call this once at application startup.
    """
    level = getattr(logging, settings.logging.level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        WatchContext(settings),
    ]

    if settings.logging.format == "json":
        renderer: list[Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=[*shared_processors, *renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def ensure_stderr_logging() -> None:
    """
    Route structlog to stderr if nobody has configured it yet.

    structlog's defaults print to stdout, where log lines would mix
    with command output.
    """
    if structlog.is_configured():
        return

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyClass(LoggerMixin):
            def my_method(self):
                self.log.info("doing_something", key="value")
    """

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        """Get logger bound to this class name."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
