"""
Watchrun Command Executor.

Runs the configured shell command for each accepted change.
Requires Python 3.11+.
"""

import asyncio
import sys
import time

from watchrun.utils.config import ExecutionMode
from watchrun.utils.logger import LoggerMixin


def shell_argv(command: str, platform: str = sys.platform) -> list[str]:
    """
    Build the argv that runs command through the host shell.

    Args:
        command: Command line to interpret
        platform: sys.platform value of the host

    Returns:
        ["cmd", "/C", command] on Windows, ["sh", "-c", command] elsewhere
    """
    if platform == "win32":
        return ["cmd", "/C", command]
    return ["sh", "-c", command]


class CommandExecutor(LoggerMixin):
    """
    Launches the configured command, optionally after a fixed delay.

    The child inherits stdout and stderr. fire() does not wait for the
    command: results and spawn errors are dropped, so invocations of a
    slow command may overlap. In "serial" mode invocations take turns
    on a lock instead.
    """

    def __init__(
        self,
        command: str,
        delay: float = 0.0,
        mode: ExecutionMode = "concurrent",
    ) -> None:
        """
        Initialize the executor.

        Args:
            command: Shell command line to run
            delay: Seconds to wait before each invocation
            mode: "concurrent" or "serial"
        """
        self._command = command
        self._delay = delay
        self._mode = mode
        self._lock = asyncio.Lock() if mode == "serial" else None
        self._tasks: set[asyncio.Task[int | None]] = set()

    @property
    def command(self) -> str:
        return self._command

    @property
    def in_flight(self) -> int:
        """Get number of invocations not yet finished."""
        return len(self._tasks)

    async def execute(self) -> int | None:
        """
        Run the command once and wait for it.

        Returns:
            Exit code, or None if the shell could not be spawned
        """
        if self._delay > 0:
            await asyncio.sleep(self._delay)

        if self._lock is None:
            return await self._run()

        async with self._lock:
            return await self._run()

    async def _run(self) -> int | None:
        start_time = time.perf_counter()
        try:
            process = await asyncio.create_subprocess_exec(
                *shell_argv(self._command),
                stdin=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            self.log.debug("command_spawn_failed", error=str(e))
            return None

        exit_code = await process.wait()
        self.log.debug(
            "command_finished",
            exit_code=exit_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return exit_code

    def fire(self) -> asyncio.Task[int | None]:
        """Start an invocation in the background and return immediately."""
        task = asyncio.create_task(self.execute())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight invocation to finish."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
