"""
Watchrun File Enumeration.

Builds the list of files to watch from a root path and an
extension filter.
Requires Python 3.11+.
"""

import sys
from pathlib import Path

from watchrun.exceptions import RootPathError
from watchrun.utils.config import split_extensions
from watchrun.utils.logger import get_logger

logger = get_logger(__name__)


def host_is_case_insensitive() -> bool:
    """Check if the host filesystem conventionally ignores case."""
    return sys.platform in ("win32", "cygwin", "darwin")


def _matches(path: Path, extensions: set[str], case_insensitive: bool) -> bool:
    if not extensions:
        return True
    suffix = path.suffix.casefold() if case_insensitive else path.suffix
    return suffix in extensions


def collect_files(
    root: str | Path,
    extensions: list[str] | str,
    case_insensitive: bool | None = None,
) -> list[Path]:
    """
    Collect the files under root whose extension is watched.

    Args:
        root: Directory to walk recursively, or a single file
        extensions: Extensions to keep, with or without the leading dot.
            An empty list keeps every file.
        case_insensitive: Compare extensions ignoring case. Defaults to
            the host convention.

    Returns:
        Sorted list of absolute file paths

    Raises:
        RootPathError: If the root cannot be stat'ed
    """
    if case_insensitive is None:
        case_insensitive = host_is_case_insensitive()

    root = Path(root).absolute()
    try:
        root.stat()
    except OSError as e:
        raise RootPathError(str(root), e.strerror or str(e)) from e

    wanted = set(split_extensions(extensions))
    if case_insensitive:
        wanted = {ext.casefold() for ext in wanted}

    if root.is_file():
        candidates = [root]
    else:
        candidates = sorted(p for p in root.rglob("*") if p.is_file())

    files = [p for p in candidates if _matches(p, wanted, case_insensitive)]

    logger.debug("files_collected", root=str(root), count=len(files))
    return files
