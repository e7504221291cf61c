"""
Watchrun Target Registry.

The fixed set of paths observed for the lifetime of the process.
Requires Python 3.11+.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from watchrun.watcher.models import WatchTarget


class TargetRegistry:
    """
    Immutable, ordered collection of watch targets.

    Built once at startup; safe to share between watcher tasks
    without synchronization.
    """

    def __init__(self, paths: Iterable[str | Path]) -> None:
        seen: set[Path] = set()
        targets = []
        for p in paths:
            path = Path(p).absolute()
            if path in seen:
                continue
            seen.add(path)
            targets.append(WatchTarget(path=path))

        self._targets: tuple[WatchTarget, ...] = tuple(targets)
        self._paths: frozenset[Path] = frozenset(seen)

    def __iter__(self) -> Iterator[WatchTarget]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, path: object) -> bool:
        if isinstance(path, (str, Path)):
            return Path(path).absolute() in self._paths
        return False

    @property
    def targets(self) -> tuple[WatchTarget, ...]:
        return self._targets

    @property
    def directories(self) -> list[Path]:
        """Unique parent directories of all targets, in registry order."""
        dirs: dict[Path, None] = {}
        for target in self._targets:
            dirs.setdefault(target.path.parent, None)
        return list(dirs)
