"""
Watchrun Command Line Interface.

Watches files and runs a shell command whenever one of them changes.

Usage:
    watchrun --path ./src --types .py,.toml --command "pytest -q"
    watchrun --command "make" --poll 500 --delay 200 --verbose
"""

import argparse
import sys
from typing import Any

from pydantic import ValidationError

from watchrun import __version__
from watchrun.exceptions import ConfigurationError, RootPathError, WatchSetupError
from watchrun.runner import run_blocking
from watchrun.utils.config import LoggingSettings, Settings
from watchrun.utils.logger import configure_logging, get_logger

logger = get_logger("watchrun")

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser. Unset flags fall back to the environment."""
    parser = argparse.ArgumentParser(
        prog="watchrun",
        description="Run a shell command whenever a watched file changes.",
    )
    parser.add_argument("--path", help="Directory (or file) to watch (default: .)")
    parser.add_argument(
        "--types",
        help="Comma-separated file extensions to watch (default: .go)",
    )
    parser.add_argument("--command", help="Shell command to run when a file changes")
    parser.add_argument(
        "--poll",
        type=int,
        dest="poll_interval_ms",
        metavar="MS",
        help="Poll every MS milliseconds instead of using OS notifications",
    )
    parser.add_argument(
        "--delay",
        type=int,
        dest="delay_ms",
        metavar="MS",
        help="Wait MS milliseconds before each command run",
    )
    parser.add_argument(
        "--mode",
        choices=["concurrent", "serial"],
        dest="execution_mode",
        help="Let command runs overlap (concurrent) or take turns (serial)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Log every file change that triggers the command",
    )
    parser.add_argument("--log-level", help="Log level (default: INFO)")
    parser.add_argument("--log-format", choices=["console", "json"], help="Log output format")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """
    Build settings from the environment with command-line overrides.

    Raises:
        ValidationError: If a value is out of range
    """
    overrides: dict[str, Any] = {
        key: value
        for key, value in vars(args).items()
        if value is not None and not key.startswith("log_")
    }

    log_overrides = {}
    if args.log_level is not None:
        log_overrides["level"] = args.log_level
    if args.log_format is not None:
        log_overrides["format"] = args.log_format
    if log_overrides:
        overrides["logging"] = LoggingSettings(**log_overrides)

    return Settings(**overrides)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the watchrun console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    configure_logging(settings)

    try:
        run_blocking(settings)
    except ConfigurationError as e:
        logger.error("configuration_invalid", error=str(e))
        return EXIT_USAGE
    except RootPathError as e:
        logger.error("root_path_invalid", path=e.path, error=e.reason)
        return EXIT_FATAL
    except WatchSetupError as e:
        logger.error("watch_setup_failed", path=e.path, error=str(e))
        return EXIT_FATAL
    except KeyboardInterrupt:
        pass

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
