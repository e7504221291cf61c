"""
Watchrun Exceptions.

Errors raised during startup. Runtime failures inside watcher
tasks are logged where they happen and never raised across tasks.
Requires Python 3.11+.
"""


class WatchrunError(Exception):
    """Base class for all watchrun errors."""


class ConfigurationError(WatchrunError):
    """Settings are invalid or incomplete."""


class RootPathError(WatchrunError):
    """The root path to enumerate cannot be stat'ed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot stat root path {path}: {reason}")
        self.path = path
        self.reason = reason


class WatchSetupError(WatchrunError):
    """The OS change-notification subscription could not be created."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
