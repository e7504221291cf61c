"""
Watchrun Executor Package.

Shell command execution triggered by file changes.
Requires Python 3.11+.
"""

from watchrun.executor.command import CommandExecutor, shell_argv

__all__ = ["CommandExecutor", "shell_argv"]
