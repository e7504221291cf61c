"""
Watchrun Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import asyncio
import logging
import os
import sys
import time
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep WATCHRUN_* variables and stray .env files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("WATCHRUN_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def stderr_logging():
    """Send log lines to stderr so stdout only carries command output."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def watch_dir(tmp_path: Path) -> Path:
    """Create a directory with a few files to watch."""
    root = tmp_path / "src"
    root.mkdir()
    (root / "a.txt").write_text("a\n")
    (root / "b.txt").write_text("b\n")
    (root / "notes.md").write_text("# notes\n")

    nested = root / "nested"
    nested.mkdir()
    (nested / "c.txt").write_text("c\n")
    return root


def touch_later(path: Path, seconds: int = 1) -> None:
    """Move a file's modification time strictly forward."""
    st = path.stat()
    later = st.st_mtime_ns + seconds * 1_000_000_000
    os.utime(path, ns=(st.st_atime_ns, later))


async def wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
    """Poll predicate on the event loop until it holds or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.01)
    return predicate()
